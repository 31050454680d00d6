"""Pydantic schemas for line and section management."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from line_sections.models.line import Line
from line_sections.models.section import Section
from line_sections.models.station import Station

# ==================== Request Schemas ====================


class SectionCreateRequest(BaseModel):
    """Request to add a section to a line."""

    up_station_id: int = Field(..., gt=0, description="Upstream station id")
    down_station_id: int = Field(..., gt=0, description="Downstream station id")
    distance: int = Field(..., gt=0, description="Distance between the two stations")

    @model_validator(mode="after")
    def validate_distinct_stations(self) -> "SectionCreateRequest":
        """Ensure the section connects two different stations."""
        if self.up_station_id == self.down_station_id:
            msg = "up_station_id and down_station_id must be different stations"
            raise ValueError(msg)
        return self


class LineCreateRequest(SectionCreateRequest):
    """Request to create a line together with its first section."""

    name: str = Field(..., min_length=1, max_length=255)
    color: str = Field(..., min_length=1, max_length=50)


class StationCreateRequest(BaseModel):
    """Request to register a station."""

    name: str = Field(..., min_length=1, max_length=255)


# ==================== Response Schemas ====================


class StationResponse(BaseModel):
    """Station reference."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str | None = None


class SectionResponse(BaseModel):
    """Single section of a line."""

    up_station: StationResponse
    down_station: StationResponse
    distance: int

    @classmethod
    def from_section(cls, section: Section) -> "SectionResponse":
        return cls(
            up_station=StationResponse.model_validate(section.up_station),
            down_station=StationResponse.model_validate(section.down_station),
            distance=section.distance,
        )


class LineResponse(BaseModel):
    """Line with its stations in path order."""

    id: int
    name: str
    color: str
    stations: list[StationResponse]
    sections: list[SectionResponse]
    start_station: StationResponse | None = None
    end_station: StationResponse | None = None
    total_distance: int = 0

    @classmethod
    def from_line(cls, line: Line) -> "LineResponse":
        """
        Build a response from a Line.

        Sections are listed in path order (by their up-station position), not
        storage order.
        """
        stations = line.stations
        position = {station: index for index, station in enumerate(stations)}
        sections = sorted(line.sections, key=lambda section: position.get(section.up_station, len(position)))
        return cls(
            id=line.id,
            name=line.name,
            color=line.color,
            stations=[_station_response(station) for station in stations],
            sections=[SectionResponse.from_section(section) for section in sections],
            start_station=_station_response(stations[0]) if stations else None,
            end_station=_station_response(stations[-1]) if stations else None,
            total_distance=line.sections.total_distance,
        )


def _station_response(station: Station) -> StationResponse:
    return StationResponse.model_validate(station)


# ==================== Document Schemas ====================


class StationDocument(BaseModel):
    """Station entry in a stored line document."""

    id: int = Field(..., gt=0)
    name: str | None = None


class SectionDocument(BaseModel):
    """Section entry in a stored line document."""

    up_station_id: int = Field(..., gt=0)
    down_station_id: int = Field(..., gt=0)
    distance: int = Field(..., gt=0)


class LineDocument(BaseModel):
    """
    JSON document holding one line, its stations and its sections.

    Used by the CLI to load and save a line between invocations.
    """

    id: int = Field(..., gt=0)
    name: str
    color: str
    stations: list[StationDocument] = Field(default_factory=list)
    sections: list[SectionDocument] = Field(default_factory=list)
