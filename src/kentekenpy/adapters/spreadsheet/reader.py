"""Read plate lists from CSV, text and Excel files."""

from __future__ import annotations

import csv
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Final

from openpyxl import load_workbook

if TYPE_CHECKING:
    from collections.abc import Sequence

log = getLogger(__name__)

EXACT_HEADERS: Final[tuple[str, ...]] = (
    "licenseplate",
    "license plate",
    "kenteken",
    "license_plate",
)
PARTIAL_HEADERS: Final[tuple[str, ...]] = ("license", "kenteken", "plate", "nummerplaat")
EXCEL_SUFFIXES: Final[frozenset[str]] = frozenset({".xlsx", ".xlsm"})
_DELIMITERS = ",;\t"


class PlateFileError(ValueError):
    """Raised when a file holds no usable plate column."""


def find_plate_column(headers: Sequence[str]) -> int:
    """Index of the plate column: exact header match, then partial match, else the first column."""

    lowered = [header.strip().lower() for header in headers]
    for candidate in EXACT_HEADERS:
        if candidate in lowered:
            return lowered.index(candidate)
    for candidate in PARTIAL_HEADERS:
        for index, header in enumerate(lowered):
            if candidate in header:
                return index
    return 0


def read_plate_file(path: Path) -> list[str]:
    """Return the raw plate strings in file order.

    ``.txt`` files hold one plate per line. CSV-like and Excel files need a
    header row followed by at least one data row.
    """

    source = Path(path)
    suffix = source.suffix.lower()
    if suffix == ".txt":
        plates = [line.strip() for line in source.read_text(encoding="utf-8-sig").splitlines()]
        plates = [plate for plate in plates if plate]
    else:
        rows = _read_excel_rows(source) if suffix in EXCEL_SUFFIXES else _read_csv_rows(source)
        plates = _plates_from_rows(rows, source)

    if not plates:
        raise PlateFileError(f"No license plates found in {source}")
    log.info("Read %s plates from %s", len(plates), source)
    return plates


def _plates_from_rows(rows: list[list[str]], source: Path) -> list[str]:
    rows = [row for row in rows if any(cell.strip() for cell in row)]
    if len(rows) < 2:
        raise PlateFileError(f"{source} must contain a header row and at least one data row")
    headers, *data = rows
    column = find_plate_column(headers)
    log.info("Using column %s (%r) for license plates", column, headers[column] if headers else "")
    plates: list[str] = []
    for row in data:
        if column < len(row):
            plate = row[column].strip().strip('"')
            if plate:
                plates.append(plate)
    return plates


def _read_csv_rows(path: Path) -> list[list[str]]:
    text = path.read_text(encoding="utf-8-sig")
    try:
        dialect = csv.Sniffer().sniff(text[:4096], delimiters=_DELIMITERS)
    except csv.Error:
        return [list(row) for row in csv.reader(text.splitlines())]
    return [list(row) for row in csv.reader(text.splitlines(), dialect)]


def _read_excel_rows(path: Path) -> list[list[str]]:
    workbook = load_workbook(path, read_only=True, data_only=True)
    try:
        sheet = workbook.active
        if sheet is None:
            return []
        return [
            ["" if value is None else str(value) for value in row]
            for row in sheet.iter_rows(values_only=True)
        ]
    finally:
        workbook.close()
