"""Line and section management service.

In-memory collaborator around the Sections model: it resolves station ids,
keeps lines keyed by id and serialises edits to the same line.
"""

import itertools
import threading
from collections.abc import Generator
from contextlib import contextmanager

import structlog

from line_sections.core.telemetry import service_span
from line_sections.exceptions import LineNotFoundError, SectionChainError, StationNotFoundError
from line_sections.models.line import Line
from line_sections.models.station import Station
from line_sections.schemas.sections import (
    LineCreateRequest,
    LineResponse,
    SectionCreateRequest,
    StationCreateRequest,
)

logger = structlog.get_logger(__name__)

SERVICE_NAME = "line-service"


class LineService:
    """Service for managing lines, their stations and their sections."""

    def __init__(self) -> None:
        """Initialize empty station and line registries."""
        self._stations: dict[int, Station] = {}
        self._lines: dict[int, Line] = {}
        self._line_locks: dict[int, threading.Lock] = {}
        self._registry_lock = threading.Lock()
        self._station_ids = itertools.count(1)
        self._line_ids = itertools.count(1)

    # ==================== Stations ====================

    def create_station(self, request: StationCreateRequest) -> Station:
        """
        Register a new station.

        Args:
            request: Station details

        Returns:
            The created station
        """
        with self._registry_lock:
            station = Station(id=next(self._station_ids), name=request.name)
            self._stations[station.id] = station
        logger.info("station_created", station_id=station.id, name=station.name)
        return station

    def add_station(self, station: Station) -> Station:
        """Register an existing station under its own id (e.g. when loading stored data)."""
        with self._registry_lock:
            self._stations[station.id] = station
        return station

    def get_station(self, station_id: int) -> Station:
        """
        Get a station by id.

        Raises:
            StationNotFoundError: If the station is not registered
        """
        try:
            return self._stations[station_id]
        except KeyError:
            raise StationNotFoundError(station_id) from None

    def list_stations(self) -> list[Station]:
        return sorted(self._stations.values(), key=lambda station: station.id)

    # ==================== Lines ====================

    def create_line(self, request: LineCreateRequest) -> LineResponse:
        """
        Create a line together with its first section.

        Args:
            request: Line name, color and first section

        Returns:
            The created line

        Raises:
            StationNotFoundError: If either station is not registered
        """
        with service_span("line.create", SERVICE_NAME, **{"line.name": request.name}) as span:
            up_station = self.get_station(request.up_station_id)
            down_station = self.get_station(request.down_station_id)

            with self._registry_lock:
                line = Line(id=next(self._line_ids), name=request.name, color=request.color)
                line.add_section(up_station, down_station, request.distance)
                self._lines[line.id] = line
                self._line_locks[line.id] = threading.Lock()

            span.set_attribute("line.id", line.id)
            logger.info("line_created", line_id=line.id, name=line.name)
            return LineResponse.from_line(line)

    def add_line(self, line: Line) -> Line:
        """Register an existing line under its own id (e.g. when loading stored data)."""
        with self._registry_lock:
            self._lines[line.id] = line
            self._line_locks.setdefault(line.id, threading.Lock())
        return line

    def get_line(self, line_id: int) -> Line:
        """
        Get a line by id.

        Raises:
            LineNotFoundError: If the line is not registered
        """
        try:
            return self._lines[line_id]
        except KeyError:
            raise LineNotFoundError(line_id) from None

    def get_line_response(self, line_id: int) -> LineResponse:
        return LineResponse.from_line(self.get_line(line_id))

    def list_lines(self) -> list[LineResponse]:
        return [LineResponse.from_line(line) for line in sorted(self._lines.values(), key=lambda line: line.id)]

    def delete_line(self, line_id: int) -> None:
        """
        Delete a line and all of its sections.

        Raises:
            LineNotFoundError: If the line is not registered
        """
        with self._registry_lock:
            if line_id not in self._lines:
                raise LineNotFoundError(line_id)
            del self._lines[line_id]
            self._line_locks.pop(line_id, None)
        logger.info("line_deleted", line_id=line_id)

    # ==================== Sections ====================

    def add_section(self, line_id: int, request: SectionCreateRequest) -> LineResponse:
        """
        Add a section to a line.

        Args:
            line_id: Line id
            request: Section to add

        Returns:
            The updated line

        Raises:
            LineNotFoundError: If the line is not registered
            StationNotFoundError: If either station is not registered
            InvalidTopologyError: If the section would not join the line as a single path
            InvalidDistanceError: If a split would leave a non-positive distance
        """
        with service_span(
            "line.add_section",
            SERVICE_NAME,
            **{
                "line.id": line_id,
                "section.up_station_id": request.up_station_id,
                "section.down_station_id": request.down_station_id,
                "section.distance": request.distance,
            },
        ) as span:
            up_station = self.get_station(request.up_station_id)
            down_station = self.get_station(request.down_station_id)

            with self._editing(line_id) as line:
                try:
                    line.add_section(up_station, down_station, request.distance)
                except SectionChainError as e:
                    logger.warning(
                        "section_add_rejected",
                        line_id=line_id,
                        up_station_id=up_station.id,
                        down_station_id=down_station.id,
                        distance=request.distance,
                        error=str(e),
                    )
                    raise

                span.set_attribute("line.section_count", len(line.sections))
                logger.info(
                    "section_added",
                    line_id=line_id,
                    up_station_id=up_station.id,
                    down_station_id=down_station.id,
                    distance=request.distance,
                )
                return LineResponse.from_line(line)

    def delete_section(self, line_id: int, station_id: int) -> LineResponse:
        """
        Remove the last section of a line.

        Args:
            line_id: Line id
            station_id: Must be the line's current end station

        Returns:
            The updated line

        Raises:
            LineNotFoundError: If the line is not registered
            StationNotFoundError: If the station is not registered
            EmptyChainError: If the line has no sections
            InvalidTopologyError: If the station is not the end station
        """
        with service_span(
            "line.delete_section",
            SERVICE_NAME,
            **{"line.id": line_id, "section.station_id": station_id},
        ) as span:
            station = self.get_station(station_id)

            with self._editing(line_id) as line:
                try:
                    line.delete_section(station)
                except SectionChainError as e:
                    logger.warning("section_delete_rejected", line_id=line_id, station_id=station_id, error=str(e))
                    raise

                span.set_attribute("line.section_count", len(line.sections))
                logger.info("section_deleted", line_id=line_id, station_id=station_id)
                return LineResponse.from_line(line)

    # ==================== Queries ====================

    def start_endpoint(self, line_id: int) -> Station | None:
        """Upstream terminus of a line, or None if it has no sections."""
        return self.get_line(line_id).sections.start_endpoint()

    def end_endpoint(self, line_id: int) -> Station:
        """
        Downstream terminus of a line.

        Raises:
            LineNotFoundError: If the line is not registered
            InvalidTopologyError: If the line has no resolvable end station
        """
        return self.get_line(line_id).sections.end_endpoint()

    def all_stations(self, line_id: int) -> list[Station]:
        """Stations of a line in path order."""
        return self.get_line(line_id).sections.all_stations()

    @contextmanager
    def _editing(self, line_id: int) -> Generator[Line]:
        """
        Hold the per-line lock while a line is edited.

        Raises:
            LineNotFoundError: If the line is not registered, or was deleted
                while waiting for the lock
        """
        with self._registry_lock:
            line = self._lines.get(line_id)
            lock = self._line_locks.get(line_id)
        if line is None or lock is None:
            raise LineNotFoundError(line_id)

        with lock:
            if self._lines.get(line_id) is not line:
                raise LineNotFoundError(line_id)
            yield line
