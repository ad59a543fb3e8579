"""Excel export of resolution results."""

from __future__ import annotations

import re
from datetime import date, datetime
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Final

from openpyxl import Workbook

from kentekenpy.domain.model import (
    ERROR_VALUE,
    NOT_FOUND_VALUE,
    UNKNOWN_VALUE,
    VEHICLE_FIELDS,
    summarize,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from kentekenpy.domain.model import ResolutionRecord

log = getLogger(__name__)

RESULTS_SHEET: Final[str] = "Vehicle Data"
SUMMARY_SHEET: Final[str] = "Summary"
PLATE_HEADER: Final[str] = "License Plate"
STATUS_HEADER: Final[str] = "Status"

DEFAULT_FIELD_LABELS: Final[dict[str, str]] = {
    "merk": "Make",
    "handelsbenaming": "Model",
    "vervaldatum_apk": "MOT Expiration",
    "datum_eerste_toelating": "First Admission",
    "wam_verzekerd": "WAM Insured",
    "geschorst": "Suspended",
    "datum_tenaamstelling": "Registration Date",
    "datum_eerste_tenaamstelling_in_nederland_dt": "First NL Registration",
    "export_indicator": "Export Indicator",
    "tenaamstellen_mogelijk": "Registration Possible",
}

DATE_FIELDS: Final[frozenset[str]] = frozenset(
    {
        "datum_eerste_toelating",
        "datum_tenaamstelling",
        "datum_eerste_tenaamstelling_in_nederland_dt",
    }
)

_COMPACT_DATE = re.compile(r"^\d{8}$")
_SENTINELS = frozenset({UNKNOWN_VALUE, NOT_FOUND_VALUE, ERROR_VALUE})


def format_date(value: str) -> str:
    """Render RDW dates (``20190412`` or ISO) as ``12-04-2019``; leave anything else alone."""

    if not value or value in _SENTINELS:
        return value
    if _COMPACT_DATE.match(value):
        return f"{value[6:8]}-{value[4:6]}-{value[0:4]}"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return value
    return parsed.strftime("%d-%m-%Y")


def default_export_filename(today: date | None = None) -> str:
    day = today or date.today()
    return f"vehicle_verification_{day.isoformat()}.xlsx"


def _now() -> datetime:
    return datetime.now().astimezone()


class ExcelResultExporter:
    """Write results to an ``.xlsx`` workbook with a data sheet and a summary sheet."""

    def __init__(self, *, clock: Callable[[], datetime] = _now) -> None:
        self._clock = clock

    def export(
        self,
        records: Sequence[ResolutionRecord],
        destination: Path,
        *,
        field_labels: Mapping[str, str] = DEFAULT_FIELD_LABELS,
    ) -> Path:
        unknown = set(field_labels).difference(VEHICLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot export unknown fields: {', '.join(sorted(unknown))}")

        target = Path(destination)
        if target.is_dir():
            target = target / default_export_filename(self._clock().date())

        workbook = Workbook()
        results_sheet = workbook.active
        if results_sheet is None:
            results_sheet = workbook.create_sheet(RESULTS_SHEET)
        results_sheet.title = RESULTS_SHEET
        results_sheet.append([PLATE_HEADER, *field_labels.values(), STATUS_HEADER])
        for record in records:
            results_sheet.append(
                [
                    self._plate(record),
                    *(self._cell(record, name) for name in field_labels),
                    str(record.status),
                ]
            )

        summary_sheet = workbook.create_sheet(SUMMARY_SHEET)
        for row in self._summary_rows(records):
            summary_sheet.append(row)

        target.parent.mkdir(parents=True, exist_ok=True)
        workbook.save(target)
        log.info("Exported %s records to %s", len(records), target)
        return target

    @staticmethod
    def _plate(record: ResolutionRecord) -> str:
        """The registry's plate for found vehicles, the plate as entered otherwise."""
        kenteken = record.fields.get("kenteken", UNKNOWN_VALUE)
        if record.is_found and kenteken != UNKNOWN_VALUE:
            return kenteken
        return record.identifier

    @staticmethod
    def _cell(record: ResolutionRecord, name: str) -> str:
        value = record.fields.get(name, UNKNOWN_VALUE)
        return format_date(value) if name in DATE_FIELDS else value

    def _summary_rows(self, records: Sequence[ResolutionRecord]) -> list[list[object]]:
        summary = summarize(records)
        rows: list[list[object]] = [
            ["Processing Summary", ""],
            ["Total Processed", summary.total],
            ["Found", summary.found],
            ["Not Found", summary.not_found],
            ["Errors", summary.errors],
            ["Processing Date", self._clock().strftime("%Y-%m-%d %H:%M:%S")],
            ["", ""],
            ["Status Breakdown", "Count"],
        ]
        if summary.found:
            rows.append(["Valid Records", summary.found])
        if summary.unresolved:
            rows.append(["Invalid/Error Records", summary.unresolved])
        return rows
