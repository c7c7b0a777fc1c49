"""CSV import and export for spreadsheets.

Import writes every field through :meth:`Spreadsheet.put`, so formulas
are evaluated in file order (left to right, top to bottom).  Export
writes each cell's formula source when it has one, else its value.
"""

from __future__ import annotations

import csv
from pathlib import Path

from gridcalc.logging.events import (
    CSV_READ_FAILED,
    CSV_WRITE_FAILED,
    EventType,
    emit_error,
    emit_info,
)
from gridcalc.sheet import Spreadsheet


def read_csv(
    sheet: Spreadsheet,
    path: Path | str,
    separator: str = ",",
    start: str = "A1",
) -> int:
    """Load a CSV file into *sheet*, with its first field at *start*.

    Fields past the last column and lines past the last row are ignored.

    Args:
        sheet: Target spreadsheet.
        path: CSV file to read.
        separator: Single-character field delimiter.
        start: Address of the top-left cell to fill.

    Returns:
        Number of cells written.

    Raises:
        FileNotFoundError: If *path* does not exist.
        UnicodeDecodeError: If *path* is not UTF-8 text.
        csv.Error: If *path* is not parseable CSV.
        InvalidAddressError: If *start* is not a valid address.
    """
    path = Path(path)
    start_row, start_col = sheet.resolver.parse_address(start)
    written = 0
    try:
        with open(path, newline="", encoding="utf-8") as f:
            reader = csv.reader(f, delimiter=separator)
            for r, fields in enumerate(reader, start=start_row):
                if r >= sheet.rows:
                    break
                for c, raw in enumerate(fields, start=start_col):
                    if c >= sheet.cols:
                        break
                    sheet.put_at(r, c, raw.strip())
                    written += 1
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        emit_error(
            EventType.csv_failed,
            f"Could not read {path}: {exc}",
            {"path": str(path)},
            error_code=CSV_READ_FAILED,
        )
        raise

    emit_info(
        EventType.csv_imported,
        f"Imported {written} cells from {path.name}",
        {"path": str(path), "cells": written, "start": start.upper()},
    )
    return written


def save_csv(sheet: Spreadsheet, path: Path | str, separator: str = ",") -> None:
    """Write every cell of *sheet* to *path*, one line per row."""
    path = Path(path)
    try:
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f, delimiter=separator, lineterminator="\n")
            for r in range(sheet.rows):
                writer.writerow([sheet.source_at(r, c) for c in range(sheet.cols)])
    except OSError as exc:
        emit_error(
            EventType.csv_failed,
            f"Could not write {path}: {exc}",
            {"path": str(path)},
            error_code=CSV_WRITE_FAILED,
        )
        raise

    emit_info(
        EventType.csv_exported,
        f"Exported {sheet.rows}x{sheet.cols} cells to {path.name}",
        {"path": str(path), "rows": sheet.rows, "cols": sheet.cols},
    )
