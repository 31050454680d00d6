"""Line model."""

from dataclasses import dataclass, field

from line_sections.models.sections import Sections
from line_sections.models.station import Station


@dataclass(eq=False)
class Line:
    """Transit line (e.g., "Line 2") owning a chain of sections."""

    id: int
    name: str
    color: str
    sections: Sections = field(default_factory=Sections)

    def add_section(self, up_station: Station, down_station: Station, distance: int) -> None:
        """Insert a section on this line. See Sections.add_section()."""
        self.sections.add_section(self.id, up_station, down_station, distance)

    def delete_section(self, station: Station) -> None:
        """Remove the section ending at station. See Sections.delete_section()."""
        self.sections.delete_section(station)

    @property
    def stations(self) -> list[Station]:
        """Stations in path order."""
        return self.sections.all_stations()

    @property
    def start_station(self) -> Station | None:
        return self.sections.start_endpoint()

    @property
    def end_station(self) -> Station:
        return self.sections.end_endpoint()

    def __repr__(self) -> str:
        """String representation of the line."""
        return f"<Line(id={self.id}, name={self.name}, sections={len(self.sections)})>"
