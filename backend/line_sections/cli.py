#!/usr/bin/env python3
"""CLI tool for editing a line stored as a JSON document.

Usage:
    # Show endpoints and stations in order
    python -m line_sections.cli show line.json

    # Add a section (dry run unless --write is given)
    python -m line_sections.cli add-section line.json --up 2 --down 4 --distance 3 --write

    # Remove the last section
    python -m line_sections.cli delete-section line.json --station 3 --write
"""

import argparse
import logging
import sys
from pathlib import Path

import structlog
from pydantic import ValidationError

from line_sections.core.config import settings
from line_sections.core.logging import configure_logging
from line_sections.exceptions import RegistryError, SectionChainError
from line_sections.models.line import Line
from line_sections.models.section import Section
from line_sections.models.sections import Sections
from line_sections.models.station import Station
from line_sections.schemas.sections import (
    LineDocument,
    LineResponse,
    SectionCreateRequest,
    SectionDocument,
    StationDocument,
)
from line_sections.services.line_service import LineService

logger = structlog.get_logger(__name__)


def load_line_document(path: Path) -> LineDocument:
    """
    Read and validate a line document.

    Raises:
        pydantic.ValidationError: If the file is not a valid line document
        OSError: If the file cannot be read
    """
    return LineDocument.model_validate_json(path.read_text(encoding="utf-8"))


def build_service(document: LineDocument) -> LineService:
    """
    Load a line document into a fresh LineService.

    Stored sections are adopted as-is rather than replayed, since their
    storage order need not be an order in which they could be added. They
    must still form a single path.

    Raises:
        StationNotFoundError: If a section references an unknown station
        InvalidTopologyError: If the stored sections branch, loop or are
            disconnected
    """
    service = LineService()
    for station in document.stations:
        service.add_station(Station(id=station.id, name=station.name))

    sections = [
        Section(
            document.id,
            service.get_station(section.up_station_id),
            service.get_station(section.down_station_id),
            section.distance,
        )
        for section in document.sections
    ]
    service.add_line(Line(id=document.id, name=document.name, color=document.color, sections=Sections(sections)))
    return service


def dump_line_document(service: LineService, line_id: int) -> LineDocument:
    """Serialise a line from the service back into a document."""
    line = service.get_line(line_id)
    return LineDocument(
        id=line.id,
        name=line.name,
        color=line.color,
        stations=[StationDocument(id=station.id, name=station.name) for station in service.list_stations()],
        sections=[
            SectionDocument(
                up_station_id=section.up_station.id,
                down_station_id=section.down_station.id,
                distance=section.distance,
            )
            for section in line.sections
        ],
    )


def print_line(line: LineResponse) -> None:
    """Print a line summary to stdout."""
    print(f"Line {line.id}: {line.name} ({line.color})")
    if not line.stations:
        print("   (no sections)")
        return

    start = line.start_station
    end = line.end_station
    print(f"   Start:    {start.name or start.id if start else '-'}")
    print(f"   End:      {end.name or end.id if end else '-'}")
    print(f"   Distance: {line.total_distance}")
    print("   Stations: " + " -> ".join(station.name or str(station.id) for station in line.stations))


def cmd_show(args: argparse.Namespace, service: LineService, line_id: int) -> int:
    """
    Show a line.

    Returns:
        Exit code (0 for success)
    """
    print_line(service.get_line_response(line_id))
    return 0


def cmd_add_section(args: argparse.Namespace, service: LineService, line_id: int) -> int:
    """
    Add a section to the line.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        request = SectionCreateRequest(
            up_station_id=args.up,
            down_station_id=args.down,
            distance=args.distance,
        )
    except ValidationError as e:
        print(f"❌ Invalid section: {e.errors()[0]['msg']}", file=sys.stderr)
        return 1

    line = service.add_section(line_id, request)
    print("✅ Section added")
    print_line(line)
    return 0


def cmd_delete_section(args: argparse.Namespace, service: LineService, line_id: int) -> int:
    """
    Remove the last section of the line.

    Returns:
        Exit code (0 for success)
    """
    line = service.delete_section(line_id, args.station)
    print("✅ Section removed")
    print_line(line)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="Line section editing CLI tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show a line
  python -m line_sections.cli show line.json

  # Split or extend the line with a new section and save it
  python -m line_sections.cli add-section line.json --up 2 --down 4 --distance 3 --write

  # Remove the section ending at the last station
  python -m line_sections.cli delete-section line.json --station 3 --write
        """,
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=sorted(logging.getLevelNamesMapping()),
        default=settings.LOG_LEVEL,
        help=f"Log level (default: {settings.LOG_LEVEL})",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    show_parser = subparsers.add_parser(
        "show",
        help="Show endpoints, stations in order and total distance",
    )
    show_parser.add_argument("file", type=Path, help="Path to the line JSON document")

    add_parser = subparsers.add_parser(
        "add-section",
        help="Add a section to the line",
        description="Add a section. It must share exactly one station with the line; "
        "sections inside the line split an existing section.",
    )
    add_parser.add_argument("file", type=Path, help="Path to the line JSON document")
    add_parser.add_argument("--up", type=int, required=True, help="Upstream station id")
    add_parser.add_argument("--down", type=int, required=True, help="Downstream station id")
    add_parser.add_argument("--distance", type=int, required=True, help="Section distance")
    add_parser.add_argument("--write", action="store_true", help="Save the result back to the file")

    delete_parser = subparsers.add_parser(
        "delete-section",
        help="Remove the last section of the line",
    )
    delete_parser.add_argument("file", type=Path, help="Path to the line JSON document")
    delete_parser.add_argument("--station", type=int, required=True, help="Current end station id")
    delete_parser.add_argument("--write", action="store_true", help="Save the result back to the file")

    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the CLI tool.

    Args:
        argv: Arguments to parse (defaults to sys.argv)

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    configure_logging(log_level=args.log_level)

    command_handlers = {
        "show": cmd_show,
        "add-section": cmd_add_section,
        "delete-section": cmd_delete_section,
    }

    handler = command_handlers.get(args.command)
    if handler is None:
        print(f"❌ Unknown command: {args.command}", file=sys.stderr)
        return 1

    try:
        document = load_line_document(args.file)
        service = build_service(document)
        exit_code = handler(args, service, document.id)
    except (OSError, ValidationError) as e:
        print(f"❌ Could not read {args.file}: {e}", file=sys.stderr)
        return 1
    except (SectionChainError, RegistryError) as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1

    if exit_code == 0 and getattr(args, "write", False):
        args.file.write_text(dump_line_document(service, document.id).model_dump_json(indent=2), encoding="utf-8")
        logger.info("line_document_written", path=str(args.file), line_id=document.id)

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
