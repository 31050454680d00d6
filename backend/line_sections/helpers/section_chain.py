"""
Section chain derivation helpers.

These pure functions derive endpoints and station order from an unordered
collection of sections, without touching the collection itself. They are used
by the Sections model for validating and splicing edits, and are testable
in isolation.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from line_sections.models.section import Section
    from line_sections.models.station import Station


class SplitLengths(NamedTuple):
    """Distances of the two sections produced by splitting one section."""

    upper: int
    lower: int


def find_start_endpoint(sections: Iterable[Section]) -> Station | None:
    """
    Find the station that is only ever an up-station.

    Args:
        sections: Sections of one line, in any order

    Returns:
        The start station, or None if there are no sections (or no station
        qualifies)

    Examples:
        >>> a, b, c = Station(1, "A"), Station(2, "B"), Station(3, "C")
        >>> find_start_endpoint([Section(1, b, c, 2), Section(1, a, b, 3)])
        <Station(id=1, name=A)>

        >>> find_start_endpoint([]) is None
        True
    """
    sections = list(sections)
    down_stations = {section.down_station for section in sections}
    for section in sections:
        if section.up_station not in down_stations:
            return section.up_station
    return None


def find_end_endpoint(sections: Iterable[Section]) -> Station | None:
    """
    Find the station that is only ever a down-station.

    Args:
        sections: Sections of one line, in any order

    Returns:
        The end station, or None if there are no sections (or no station
        qualifies, e.g. a cycle)
    """
    sections = list(sections)
    up_stations = {section.up_station for section in sections}
    for section in sections:
        if section.down_station not in up_stations:
            return section.down_station
    return None


def find_section_by_up_station(sections: Iterable[Section], station: Station) -> Section | None:
    """Return the section starting at station, or None."""
    return next((section for section in sections if section.up_station == station), None)


def find_section_by_down_station(sections: Iterable[Section], station: Station) -> Section | None:
    """Return the section ending at station, or None."""
    return next((section for section in sections if section.down_station == station), None)


def collect_stations(sections: Iterable[Section]) -> set[Station]:
    """
    Collect every station touched by the sections.

    Equivalent to all up-stations plus the end endpoint when the sections
    form a single path.
    """
    stations: set[Station] = set()
    for section in sections:
        stations.add(section.up_station)
        stations.add(section.down_station)
    return stations


def order_stations(sections: Sequence[Section]) -> list[Station]:
    """
    Walk the chain from its start endpoint and return stations in path order.

    Follows up -> down links until the end is reached. Storage order of the
    sections is irrelevant.

    Args:
        sections: Sections of one line, in any order

    Returns:
        Ordered list of stations from start to end (empty if no sections)

    Examples:
        >>> a, b, c = Station(1, "A"), Station(2, "B"), Station(3, "C")
        >>> order_stations([Section(1, b, c, 2), Section(1, a, b, 3)])
        [<Station(id=1, name=A)>, <Station(id=2, name=B)>, <Station(id=3, name=C)>]
    """
    start = find_start_endpoint(sections)
    if start is None:
        return []

    next_by_up = {section.up_station: section.down_station for section in sections}
    ordered = [start]
    current = start
    # Bounded by the section count so a malformed chain cannot loop forever
    for _ in range(len(sections)):
        following = next_by_up.get(current)
        if following is None:
            break
        ordered.append(following)
        current = following
    return ordered


def is_single_path(sections: Sequence[Section]) -> bool:
    """
    Check that sections form one simple directed path.

    No station may start or end more than one section, and the walk from the
    start endpoint must reach every section (no disconnected pieces or loops).

    Args:
        sections: Sections of one line, in any order

    Returns:
        True if the sections are a single path (an empty list counts as one)

    Examples:
        >>> a, b, c, d = Station(1, "A"), Station(2, "B"), Station(3, "C"), Station(4, "D")
        >>> is_single_path([Section(1, b, c, 2), Section(1, a, b, 3)])
        True

        >>> is_single_path([Section(1, a, b, 3), Section(1, c, d, 5)])  # Disconnected
        False

        >>> is_single_path([Section(1, a, b, 3), Section(1, a, c, 5)])  # Branching
        False
    """
    if not sections:
        return True

    up_stations = {section.up_station for section in sections}
    down_stations = {section.down_station for section in sections}
    if len(up_stations) != len(sections) or len(down_stations) != len(sections):
        return False

    return len(order_stations(sections)) == len(sections) + 1


def split_lengths(existing_distance: int, new_distance: int, *, new_on_upper: bool) -> SplitLengths:
    """
    Compute the two distances produced by splitting a section.

    Does NOT validate positivity - Section construction does that.

    Args:
        existing_distance: Distance of the section being split
        new_distance: Distance of the section being inserted
        new_on_upper: True if the new section becomes the upper half
            (split anchored at the shared up-station), False if it becomes
            the lower half (anchored at the shared down-station)

    Returns:
        SplitLengths(upper, lower)

    Examples:
        >>> split_lengths(5, 2, new_on_upper=True)
        SplitLengths(upper=2, lower=3)

        >>> split_lengths(5, 2, new_on_upper=False)
        SplitLengths(upper=3, lower=2)
    """
    remainder = existing_distance - new_distance
    if new_on_upper:
        return SplitLengths(upper=new_distance, lower=remainder)
    return SplitLengths(upper=remainder, lower=new_distance)
