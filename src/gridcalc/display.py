"""Plain-text rendering of a sheet for the console."""

from __future__ import annotations

from typing import TYPE_CHECKING

from gridcalc.addressing import index_to_col_letter

if TYPE_CHECKING:
    from gridcalc.sheet import Spreadsheet

CELL_WIDTH = 4


def format_cell(value: str) -> str:
    """Right-align *value* to the cell width; longer values are not cut."""
    return f"{value:>{CELL_WIDTH}}"


def render_grid(sheet: Spreadsheet) -> str:
    """Render column headers, row numbers and every cell value.

    Lines for a 1x2 sheet holding 5 and 12::

        "      A  |   B  | "
        " 1:    5 |   12 | "
    """
    parts = ["    "]
    for c in range(sheet.cols):
        parts.append(f"  {index_to_col_letter(c)}  | ")
    for r, row in enumerate(sheet.iter_rows(), start=1):
        parts.append("\n")
        parts.append(f"{r:>2}: ")
        for cell in row:
            parts.append(format_cell(cell.value) + " | ")
    return "".join(parts)
