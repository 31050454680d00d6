"""Domain exceptions for section chain editing and line lookups."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from line_sections.models.station import Station


class SectionChainError(Exception):
    """Base exception for section chain errors."""

    pass


class InvalidTopologyError(SectionChainError):
    """
    Raised when an edit would break the single-path shape of a line.

    Covers branches, cycles, disconnected sections, deletion of a station that
    is not the downstream terminus, and chains with no resolvable end.
    """


class InvalidDistanceError(SectionChainError):
    """
    Raised when a section would end up with a zero or negative distance.

    Happens either on construction or when splitting an existing section with
    a distance that is not strictly shorter than the section being split.
    """

    def __init__(self, distance: int, message: str | None = None) -> None:
        self.distance = distance
        super().__init__(message or f"Section distance must be positive, got {distance}.")


class EmptyChainError(SectionChainError):
    """Raised when removing a section from a line that has none."""

    def __init__(self) -> None:
        super().__init__("Line has no sections to remove.")


# Registry lookups


class RegistryError(LookupError):
    """Base exception for line and station lookups."""

    pass


class LineNotFoundError(RegistryError):
    """Raised when a line id is not registered."""

    def __init__(self, line_id: int) -> None:
        self.line_id = line_id
        super().__init__(f"Line '{line_id}' not found.")


class StationNotFoundError(RegistryError):
    """Raised when a station id is not registered."""

    def __init__(self, station_id: int) -> None:
        self.station_id = station_id
        super().__init__(f"Station '{station_id}' not found.")


def describe_station(station: Station) -> str:
    """Short human readable label for error messages."""
    return f"{station.name} ({station.id})" if station.name else str(station.id)
