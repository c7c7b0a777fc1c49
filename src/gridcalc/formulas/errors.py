"""Error types for formula parsing and evaluation.

Every fault raised while evaluating a formula derives from
:class:`FormulaError`.  :class:`gridcalc.sheet.Spreadsheet` is the single
place that converts these faults into the display codes below.
"""

from __future__ import annotations

# Display error codes stored in place of a computed value.
ERR = "#ERR"
DIV0 = "#DIV/0!"


class FormulaError(Exception):
    """Base class for all formula-related errors."""


class InvalidAddressError(FormulaError, ValueError):
    """Malformed or out-of-bounds cell address.

    Attributes:
        address: The offending address text.
    """

    def __init__(self, address: str, message: str | None = None) -> None:
        self.address = address
        super().__init__(message or f"Invalid cell address: {address!r}")


class InvalidRangeError(FormulaError):
    """Range text that is not of the form ``<addr>:<addr>``."""

    def __init__(self, range_text: str) -> None:
        self.range_text = range_text
        super().__init__(f"Invalid range: {range_text!r}")


class UnexpectedTokenError(FormulaError):
    """Character or token not valid at this point of a formula.

    Attributes:
        token: The offending lexeme.
        position: Character position where the error was detected.
    """

    def __init__(self, token: str, position: int | None = None) -> None:
        self.token = token
        self.position = position
        msg = f"Unexpected token: {token!r}"
        if position is not None:
            msg += f" (at position {position})"
        super().__init__(msg)


class MismatchedParensError(FormulaError):
    """Unbalanced parentheses in an expression."""

    def __init__(self) -> None:
        super().__init__("Mismatched parentheses")


class MalformedExpressionError(FormulaError):
    """Postfix sequence that does not reduce to exactly one value."""

    def __init__(self, message: str = "Malformed expression") -> None:
        super().__init__(message)


class FunctionSyntaxError(FormulaError):
    """Function call without a closing parenthesis or with a bad argument.

    Attributes:
        func_name: The function that caused the error.
    """

    def __init__(self, func_name: str, message: str | None = None) -> None:
        self.func_name = func_name
        super().__init__(message or f"Invalid function syntax: {func_name}")


class RefError(FormulaError):
    """Reference to a cell that currently holds an error code."""

    def __init__(self, ref: str, value: str) -> None:
        self.ref = ref
        self.value = value
        super().__init__(f"Ref error: {ref} holds {value}")


class NotANumberError(FormulaError):
    """Operand or cell value that is not an integer literal."""

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"Not an integer: {text!r}")


class EmptyRangeError(FormulaError):
    """Aggregate that needs at least one value received none."""

    def __init__(self, func_name: str) -> None:
        self.func_name = func_name
        super().__init__(f"{func_name}: empty range")


class DivideByZeroError(FormulaError):
    """Integer division by zero; the only fault rendered as ``#DIV/0!``."""

    def __init__(self) -> None:
        super().__init__("Division by zero in formula")


class GridSizeError(ValueError):
    """Grid dimensions outside the supported bounds."""

    def __init__(self, rows: int, cols: int) -> None:
        self.rows = rows
        self.cols = cols
        super().__init__(
            f"Grid size {rows}x{cols} out of bounds (rows 1-99, cols 1-26)"
        )


def display_code(exc: FormulaError) -> str:
    """Return the display code a formula fault renders as."""
    if isinstance(exc, DivideByZeroError):
        return DIV0
    return ERR
