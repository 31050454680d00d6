"""Section chain manager for a single line."""

from collections.abc import Iterator

import structlog

from line_sections.exceptions import (
    EmptyChainError,
    InvalidDistanceError,
    InvalidTopologyError,
    describe_station,
)
from line_sections.helpers.section_chain import (
    collect_stations,
    find_end_endpoint,
    find_section_by_down_station,
    find_section_by_up_station,
    find_start_endpoint,
    is_single_path,
    order_stations,
    split_lengths,
)
from line_sections.models.section import Section
from line_sections.models.station import Station

logger = structlog.get_logger(__name__)


class Sections:
    """
    All sections of one line, kept as a single directed path.

    The chain exclusively owns its sections: they are only created and removed
    through add_section() and delete_section(). Storage order is not
    meaningful; use all_stations() for path order.

    Every edit validates and builds the replacement sections before the
    backing list is touched, so a failed edit leaves the chain unchanged.
    """

    def __init__(self, sections: list[Section] | None = None) -> None:
        """
        Initialize the chain.

        Args:
            sections: Existing sections to adopt, e.g. when rehydrating a
                stored line. They are adopted as-is, not replayed through
                add_section(), but must already form a single path.

        Raises:
            InvalidTopologyError: If the adopted sections branch, loop or are
                disconnected
        """
        adopted = list(sections or [])
        if not is_single_path(adopted):
            edges = ", ".join(f"{section.up_station.id} -> {section.down_station.id}" for section in adopted)
            msg = f"Stored sections do not form a single path: {edges}"
            raise InvalidTopologyError(msg)
        self._sections: list[Section] = adopted

    def __len__(self) -> int:
        return len(self._sections)

    def __iter__(self) -> Iterator[Section]:
        return iter(self._sections)

    def __contains__(self, station: object) -> bool:
        """Check if a station is on the chain."""
        return station in collect_stations(self._sections)

    def __repr__(self) -> str:
        """String representation of the chain."""
        return f"<Sections(count={len(self._sections)}, total_distance={self.total_distance})>"

    @property
    def sections(self) -> tuple[Section, ...]:
        """Read-only snapshot of the sections in storage order."""
        return tuple(self._sections)

    @property
    def total_distance(self) -> int:
        """Sum of all section distances."""
        return sum(section.distance for section in self._sections)

    @property
    def is_empty(self) -> bool:
        return not self._sections

    # ==================== Editing ====================

    def add_section(self, line_id: int, up_station: Station, down_station: Station, distance: int) -> None:
        """
        Insert a section, extending the chain or splitting an existing section.

        Args:
            line_id: Owning line id
            up_station: Upstream station of the new section
            down_station: Downstream station of the new section
            distance: Distance of the new section (must be positive)

        Raises:
            InvalidTopologyError: If both stations are already on the chain, or
                neither is
            InvalidDistanceError: If distance is not positive, or a split would
                leave a zero or negative remainder
        """
        new_section = Section(line_id, up_station, down_station, distance)

        if not self._sections:
            self._sections.append(new_section)
            logger.debug("section_chain_started", line_id=line_id, up=up_station.id, down=down_station.id)
            return

        self._validate_connection(up_station, down_station)

        if self.start_endpoint() == down_station or self.is_end_endpoint(up_station):
            self._sections.append(new_section)
            logger.debug("section_chain_extended", line_id=line_id, up=up_station.id, down=down_station.id)
            return

        if (existing := find_section_by_up_station(self._sections, up_station)) is not None:
            lengths = split_lengths(existing.distance, distance, new_on_upper=True)
            replacement = self._split(existing, middle=down_station, upper=lengths.upper, lower=lengths.lower)
        elif (existing := find_section_by_down_station(self._sections, down_station)) is not None:
            lengths = split_lengths(existing.distance, distance, new_on_upper=False)
            replacement = self._split(existing, middle=up_station, upper=lengths.upper, lower=lengths.lower)
        else:
            # Only reachable on a malformed chain
            msg = f"No section to split for {describe_station(up_station)} -> {describe_station(down_station)}"
            raise InvalidTopologyError(msg)

        self._sections.remove(existing)
        self._sections.extend(replacement)
        logger.debug(
            "section_split",
            line_id=line_id,
            replaced_up=existing.up_station.id,
            replaced_down=existing.down_station.id,
            up=up_station.id,
            down=down_station.id,
        )

    def delete_section(self, station: Station) -> None:
        """
        Remove the section ending at the downstream terminus.

        Only the last section can be removed. Removing the only section leaves
        the chain empty.

        Args:
            station: Must be the current end station

        Raises:
            EmptyChainError: If the chain has no sections
            InvalidTopologyError: If station is not the end station
        """
        if not self._sections:
            raise EmptyChainError

        if not self.is_end_endpoint(station):
            msg = f"Only the last station can be removed, {describe_station(station)} is not the end of the line"
            raise InvalidTopologyError(msg)

        section = find_section_by_down_station(self._sections, station)
        if section is None:
            msg = f"No section ends at {describe_station(station)}"
            raise InvalidTopologyError(msg)

        self._sections.remove(section)
        logger.debug("section_removed", line_id=section.line_id, up=section.up_station.id, down=station.id)

    def _validate_connection(self, up_station: Station, down_station: Station) -> None:
        """Require exactly one of the two stations to be on the chain already."""
        stations = collect_stations(self._sections)
        up_known = up_station in stations
        down_known = down_station in stations

        if up_known and down_known:
            msg = (
                f"Both {describe_station(up_station)} and {describe_station(down_station)} "
                "are already on the line"
            )
            raise InvalidTopologyError(msg)
        if not (up_known or down_known):
            msg = (
                f"Neither {describe_station(up_station)} nor {describe_station(down_station)} "
                "is on the line"
            )
            raise InvalidTopologyError(msg)

    @staticmethod
    def _split(existing: Section, *, middle: Station, upper: int, lower: int) -> tuple[Section, Section]:
        """
        Build the two sections that replace existing, meeting at middle.

        Raises:
            InvalidDistanceError: If either half would not be positive
        """
        if upper <= 0 or lower <= 0:
            msg = (
                f"Cannot split a section of distance {existing.distance} into {upper} and {lower}; "
                "the new section must be shorter than the one it splits"
            )
            raise InvalidDistanceError(min(upper, lower), msg)

        return (
            Section(existing.line_id, existing.up_station, middle, upper),
            Section(existing.line_id, middle, existing.down_station, lower),
        )

    # ==================== Queries ====================

    def start_endpoint(self) -> Station | None:
        """Upstream terminus, or None if the chain is empty."""
        return find_start_endpoint(self._sections)

    def end_endpoint(self) -> Station:
        """
        Downstream terminus.

        Raises:
            InvalidTopologyError: If no station is only ever a down-station
                (empty or malformed chain)
        """
        station = find_end_endpoint(self._sections)
        if station is None:
            msg = "Line has no downstream terminus"
            raise InvalidTopologyError(msg)
        return station

    def is_end_endpoint(self, station: Station) -> bool:
        return self.end_endpoint() == station

    def find_section_by_up_station(self, station: Station) -> Section | None:
        return find_section_by_up_station(self._sections, station)

    def find_section_by_down_station(self, station: Station) -> Section | None:
        return find_section_by_down_station(self._sections, station)

    def all_stations(self) -> list[Station]:
        """Stations in path order from start to end (empty for an empty chain)."""
        return order_stations(self._sections)
