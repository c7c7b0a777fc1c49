"""Fixed-size cell storage."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Cell:
    """One grid cell.

    Attributes:
        formula: Formula body without the leading ``=``, uppercased.
            Empty for literal cells.
        value: Current display string: the literal, the last evaluation
            result, or an error code starting with ``#``.
    """

    formula: str = ""
    value: str = ""

    @property
    def is_formula(self) -> bool:
        return bool(self.formula)


class CellStore:
    """A dense ``rows x cols`` grid of :class:`Cell` objects.

    Holds storage only.  Evaluation of formulas is the caller's job.
    """

    def __init__(self, rows: int, cols: int) -> None:
        self.rows = rows
        self.cols = cols
        self._cells: list[list[Cell]] = [
            [Cell() for _ in range(cols)] for _ in range(rows)
        ]

    def cell(self, row: int, col: int) -> Cell:
        return self._cells[row][col]

    def read(self, row: int, col: int) -> str:
        return self._cells[row][col].value

    def formula(self, row: int, col: int) -> str:
        return self._cells[row][col].formula

    def write_literal(self, row: int, col: int, text: str) -> None:
        """Clear any formula and store *text* verbatim."""
        cell = self._cells[row][col]
        cell.formula = ""
        cell.value = text

    def write_formula(self, row: int, col: int, source: str) -> None:
        """Store a marker-stripped formula body, uppercased.

        The value is left untouched; the caller must evaluate and call
        :meth:`write_value` within the same operation.
        """
        self._cells[row][col].formula = source.upper()

    def write_value(self, row: int, col: int, value: str) -> None:
        self._cells[row][col].value = value

    def iter_rows(self):
        """Yield each row as a list of cells, top to bottom."""
        for row in self._cells:
            yield list(row)
