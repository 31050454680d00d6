"""Section value type."""

from dataclasses import dataclass

from line_sections.exceptions import InvalidDistanceError, InvalidTopologyError, describe_station
from line_sections.models.station import Station


@dataclass(frozen=True)
class Section:
    """
    Directed edge of a line: up_station -> down_station.

    Sections are never mutated. Splitting replaces one section with two new
    ones.

    Raises:
        InvalidDistanceError: If distance is not strictly positive
        InvalidTopologyError: If both ends are the same station
    """

    line_id: int
    up_station: Station
    down_station: Station
    distance: int

    def __post_init__(self) -> None:
        """Validate distance and reject self-loops."""
        if self.distance <= 0:
            raise InvalidDistanceError(self.distance)
        if self.up_station == self.down_station:
            msg = f"Section cannot start and end at the same station: {describe_station(self.up_station)}"
            raise InvalidTopologyError(msg)

    def __repr__(self) -> str:
        """String representation of the section."""
        return (
            f"<Section(line_id={self.line_id}, up={self.up_station.id}, "
            f"down={self.down_station.id}, distance={self.distance})>"
        )
