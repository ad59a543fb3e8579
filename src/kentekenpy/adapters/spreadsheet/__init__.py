"""Spreadsheet adapters: plate list ingestion and result export."""

from __future__ import annotations

from .exporter import (
    DEFAULT_FIELD_LABELS,
    ExcelResultExporter,
    default_export_filename,
    format_date,
)
from .reader import PlateFileError, find_plate_column, read_plate_file

__all__ = [
    "DEFAULT_FIELD_LABELS",
    "ExcelResultExporter",
    "PlateFileError",
    "default_export_filename",
    "find_plate_column",
    "format_date",
    "read_plate_file",
]
