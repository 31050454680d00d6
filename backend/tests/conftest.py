"""Pytest configuration and fixtures."""

import os

# Set DEBUG=true for all tests BEFORE any line_sections imports
# This must be done before line_sections.core.config loads settings
os.environ["DEBUG"] = "true"
os.environ["OTEL_ENABLED"] = "false"

from collections.abc import Callable

import pytest
from line_sections.models.line import Line
from line_sections.models.section import Section
from line_sections.models.sections import Sections
from line_sections.models.station import Station

LINE_ID = 1


@pytest.fixture
def stations() -> dict[str, Station]:
    """
    Stations keyed by a single letter, A (id 1) to H (id 8).

    Returns:
        Mapping of label to Station
    """
    return {label: Station(id=index, name=label) for index, label in enumerate("ABCDEFGH", start=1)}


@pytest.fixture
def make_sections(stations: dict[str, Station]) -> Callable[..., Sections]:
    """
    Factory building a Sections chain from (up, down, distance) label tuples.

    Sections are adopted in the given order, not replayed through add_section().

    Example:
        chain = make_sections(("A", "B", 3), ("B", "C", 2))
    """

    def _make(*edges: tuple[str, str, int]) -> Sections:
        return Sections([Section(LINE_ID, stations[up], stations[down], distance) for up, down, distance in edges])

    return _make


@pytest.fixture
def line(stations: dict[str, Station]) -> Line:
    """Line with a single A -> B section of distance 10."""
    line = Line(id=LINE_ID, name="Line 2", color="bg-green-600")
    line.add_section(stations["A"], stations["B"], 10)
    return line
