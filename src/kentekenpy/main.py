#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
import uuid
from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from kentekenpy.adapters.spreadsheet import DEFAULT_FIELD_LABELS, PlateFileError, read_plate_file
from kentekenpy.app import (
    delete_saved_vehicles,
    list_saved_vehicles,
    lookup_plates,
    save_vehicles,
)
from kentekenpy.config import ConfigurationError, configure_logging
from kentekenpy.domain.batch_pipeline import PipelineState
from kentekenpy.domain.ports.persistence import SavedVehicleError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from kentekenpy.app import LookupResult

log = logging.getLogger(__name__)

_TABLE_FIELDS = ("merk", "handelsbenaming", "vervaldatum_apk", "wam_verzekerd", "geschorst")


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def _field_labels(value: str) -> dict[str, str]:
    names = [name.strip() for name in value.split(",") if name.strip()]
    unknown = [name for name in names if name not in DEFAULT_FIELD_LABELS]
    if not names or unknown:
        choices = ", ".join(DEFAULT_FIELD_LABELS)
        raise argparse.ArgumentTypeError(f"expected a comma separated list of: {choices}")
    return {name: DEFAULT_FIELD_LABELS[name] for name in names}


def _add_fields_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--fields",
        type=_field_labels,
        default=DEFAULT_FIELD_LABELS,
        help="Vehicle fields to export, in column order (default: all)",
    )


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Look up Dutch license plates in the RDW registry")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    lookup = commands.add_parser("lookup", help="Look up one or more plates")
    lookup.add_argument("plates", nargs="+", help="License plates, e.g. 1-ABC-23")
    lookup.add_argument("--output", type=Path, help="Export the results to this .xlsx file")
    _add_fields_argument(lookup)

    bulk = commands.add_parser("bulk", help="Look up every plate listed in a file")
    bulk.add_argument(
        "--file",
        type=Path,
        required=True,
        help="CSV, TSV, .txt or .xlsx file with a license plate column",
    )
    bulk.add_argument(
        "--output",
        type=Path,
        help="Export file or directory (large runs export to the working directory)",
    )
    bulk.add_argument(
        "--batch-size",
        type=_positive_int,
        help="Plates per concurrent chunk (default: chosen from the list size)",
    )
    _add_fields_argument(bulk)

    saved = commands.add_parser("saved", help="Manage the saved-vehicle list")
    saved_commands = saved.add_subparsers(dest="saved_command", required=True)
    saved_commands.add_parser("list", help="Show saved vehicles, newest first")
    add = saved_commands.add_parser("add", help="Look up plates and save the ones found")
    add.add_argument("plates", nargs="+")
    delete = saved_commands.add_parser("delete", help="Delete saved vehicles you added")
    delete.add_argument("ids", nargs="+", type=uuid.UUID, help="Saved vehicle ids")

    return parser.parse_args(list(argv))


def _print_records(result: LookupResult) -> None:
    for record in result.records:
        values = "  ".join(record.fields.get(name, "") for name in _TABLE_FIELDS)
        print(f"{record.identifier:<10} {record.status:<9} {values}")
    summary = result.summary
    print(
        f"\n{summary.total} processed: {summary.found} found, "
        f"{summary.not_found} not found, {summary.errors} errors"
    )
    if result.export_path is not None:
        print(f"Exported to {result.export_path}")


def _run_lookup(args: argparse.Namespace) -> int:
    if args.command == "bulk":
        plates = read_plate_file(args.file)
        result = lookup_plates(
            plates,
            batch_size=args.batch_size,
            export_to=args.output,
            field_labels=args.fields,
        )
    else:
        result = lookup_plates(args.plates, export_to=args.output, field_labels=args.fields)

    if result.state is PipelineState.FAILED:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1
    _print_records(result)
    if result.state is PipelineState.CANCELLED:
        print(f"Cancelled after {len(result.records)} of {result.total_count} plates")
        return 130
    return 0


def _run_saved(args: argparse.Namespace) -> int:
    if args.saved_command == "list":
        for vehicle in list_saved_vehicles():
            make = vehicle.fields.get("merk", "")
            model = vehicle.fields.get("handelsbenaming", "")
            added = vehicle.added_at.strftime("%Y-%m-%d %H:%M")
            print(
                f"{vehicle.id}  {vehicle.identifier:<10} {make} {model}  {vehicle.added_by} {added}"
            )
        return 0

    if args.saved_command == "add":
        result = lookup_plates(args.plates)
        if result.state is not PipelineState.COMPLETED:
            reason = result.error or result.state
            print(f"Error: lookup did not complete ({reason})", file=sys.stderr)
            return 1
        saved = save_vehicles(result.records)
        for vehicle in saved.saved:
            print(f"Saved {vehicle.identifier} as {vehicle.id}")
        for identifier in saved.already_saved:
            print(f"{identifier} is already saved")
        for identifier in saved.skipped:
            print(f"{identifier} was not found and is not saved")
        return 0

    deleted = delete_saved_vehicles(args.ids)
    print(f"Deleted {deleted} saved vehicle(s)")
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    try:
        parsed_args = _parse_args(sys.argv[1:] if argv is None else argv)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)

    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "saved":
            code = _run_saved(parsed_args)
        else:
            code = _run_lookup(parsed_args)
    except KeyboardInterrupt:
        print("\nClosed by user (Ctrl+C)")
        sys.exit(130)
    except (ConfigurationError, PlateFileError, SavedVehicleError, ValueError) as exc:
        log.exception("Invalid request")
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)
    except Exception as e:
        log.exception("Command failed")
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
