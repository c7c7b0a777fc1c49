"""The spreadsheet: cell storage plus eager formula evaluation.

A formula is evaluated exactly once, when it is written.  Cells that
reference it are not recomputed when it later changes, and there is no
cycle detection: a formula only ever sees the values its references hold
at the moment of its own ``put``.

Usage::

    sheet = Spreadsheet(10, 10)
    sheet.put("A1", "5")
    sheet.put("A2", "7")
    sheet.put("B1", "=A1+A2")
    sheet.get("B1")  # "12"
"""

from __future__ import annotations

from gridcalc.addressing import MAX_COLS, AddressResolver, make_addr
from gridcalc.cells import Cell, CellStore
from gridcalc.display import render_grid
from gridcalc.formulas.errors import (
    DivideByZeroError,
    FormulaError,
    GridSizeError,
    RefError,
    display_code,
)
from gridcalc.formulas.evaluator import evaluate_rpn, parse_int_strict
from gridcalc.formulas.functions import evaluate_function, match_function
from gridcalc.formulas.parser import parse_expression
from gridcalc.formulas.tokenizer import Token, TokenKind
from gridcalc.logging.events import (
    DIV_BY_ZERO,
    FORMULA_ERROR,
    EventType,
    emit_info,
    emit_warning,
)

FORMULA_MARKER = "="

MAX_ROWS = 99


class Spreadsheet:
    """A fixed-size grid of cells with formula support.

    Parameters
    ----------
    rows : int
        Number of rows, 1-99.
    cols : int
        Number of columns, 1-26 (A-Z).

    Raises
    ------
    GridSizeError
        If either dimension is out of bounds.
    """

    def __init__(self, rows: int, cols: int) -> None:
        if not (1 <= rows <= MAX_ROWS and 1 <= cols <= MAX_COLS):
            raise GridSizeError(rows, cols)
        self._resolver = AddressResolver(rows, cols)
        self._store = CellStore(rows, cols)
        emit_info(
            EventType.sheet_created,
            f"Created {rows}x{cols} sheet",
            {"rows": rows, "cols": cols},
        )

    @property
    def rows(self) -> int:
        return self._resolver.rows

    @property
    def cols(self) -> int:
        return self._resolver.cols

    @property
    def resolver(self) -> AddressResolver:
        return self._resolver

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get(self, address: str) -> str:
        """Return the display value of the cell at *address*.

        Raises:
            InvalidAddressError: If the address is malformed or outside
                the grid.
        """
        row, col = self._resolver.parse_address(address)
        return self._store.read(row, col)

    def put(self, address: str, text: str | None) -> None:
        """Write a literal or formula into the cell at *address*.

        Text starting with ``=`` is a formula and is evaluated before this
        returns.  Formula faults never propagate: they are stored as
        ``#ERR`` or ``#DIV/0!``.

        Raises:
            InvalidAddressError: If the address is malformed or outside
                the grid.
        """
        row, col = self._resolver.parse_address(address)
        self.put_at(row, col, text)

    def put_at(self, row: int, col: int, text: str | None) -> None:
        """Like :meth:`put` with 0-based coordinates."""
        text = "" if text is None else text.strip()
        if not text.startswith(FORMULA_MARKER):
            self._store.write_literal(row, col, text)
            return
        self._store.write_formula(row, col, text[len(FORMULA_MARKER):])
        self._store.write_value(row, col, self._evaluate_cell(row, col))

    def formula_source(self, address: str) -> str:
        """Return ``=`` plus the stored formula, or the literal value."""
        row, col = self._resolver.parse_address(address)
        return self.source_at(row, col)

    def source_at(self, row: int, col: int) -> str:
        cell = self._store.cell(row, col)
        if cell.is_formula:
            return FORMULA_MARKER + cell.formula
        return cell.value

    def evaluate(self, body: str) -> str:
        """Evaluate a formula body against the grid without storing it.

        Returns the display value, an error code on failure.
        """
        try:
            return self.compute(body)
        except FormulaError as exc:
            return display_code(exc)

    def compute(self, body: str) -> str:
        """Evaluate a formula body, raising on any formula fault.

        Args:
            body: Formula text without the leading ``=``.

        Returns:
            The result as text; ``""`` for an empty body.

        Raises:
            FormulaError: Any parse, reference or arithmetic fault.
        """
        body = body.strip().upper()
        if not body:
            return ""
        if match_function(body) is not None:
            return str(evaluate_function(body, self._resolver, self._store))
        rpn = parse_expression(body, self._resolve_ref)
        return str(evaluate_rpn(rpn))

    def cell(self, row: int, col: int) -> Cell:
        return self._store.cell(row, col)

    def iter_rows(self):
        """Yield each row as a list of :class:`Cell`, top to bottom."""
        return self._store.iter_rows()

    def __str__(self) -> str:
        return render_grid(self)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _evaluate_cell(self, row: int, col: int) -> str:
        formula = self._store.formula(row, col)
        try:
            return self.compute(formula)
        except FormulaError as exc:
            code = display_code(exc)
            emit_warning(
                EventType.formula_error,
                str(exc),
                {"address": make_addr(row, col), "formula": formula, "value": code},
                error_code=DIV_BY_ZERO if isinstance(exc, DivideByZeroError) else FORMULA_ERROR,
            )
            return code

    def _resolve_ref(self, ref: str) -> Token:
        """Turn a cell reference into a number token of its current value."""
        row, col = self._resolver.parse_address(ref)
        value = self._store.read(row, col).strip()
        if not value:
            return Token(TokenKind.NUMBER, "0")
        if value.startswith("#"):
            raise RefError(ref, value)
        parse_int_strict(value)
        return Token(TokenKind.NUMBER, value)
