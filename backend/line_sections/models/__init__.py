"""Domain models for line section management."""

from line_sections.models.line import Line
from line_sections.models.section import Section
from line_sections.models.sections import Sections
from line_sections.models.station import Station

__all__ = [
    "Line",
    "Section",
    "Sections",
    "Station",
]
