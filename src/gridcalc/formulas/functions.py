"""Range aggregate functions: SUMME, MIN, MAX, MITTELWERT.

Each function takes exactly one range argument, e.g. ``SUMME(A1:B3)``.
Empty cells in the range are skipped; every other cell must hold an
integer literal.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Protocol

from gridcalc.formulas.errors import (
    EmptyRangeError,
    FunctionSyntaxError,
    InvalidRangeError,
)
from gridcalc.formulas.evaluator import parse_int_strict, wrap64

if TYPE_CHECKING:
    from gridcalc.addressing import AddressResolver


class CellReader(Protocol):
    """Read access to cell values by 0-based coordinates."""

    def read(self, row: int, col: int) -> str:
        ...


_FUNCTIONS: dict[str, Callable[[list[int]], int]] = {}


def register_function(name: str) -> Callable:
    """Decorator that registers a range aggregate by name.

    Args:
        name: Uppercase function name as written in formulas.

    Returns:
        The original function, unmodified.
    """

    def decorator(fn: Callable[[list[int]], int]) -> Callable[[list[int]], int]:
        _FUNCTIONS[name] = fn
        return fn

    return decorator


def function_names() -> list[str]:
    return sorted(_FUNCTIONS)


@register_function("SUMME")
def _fn_sum(values: list[int]) -> int:
    return wrap64(sum(values))


@register_function("MIN")
def _fn_min(values: list[int]) -> int:
    if not values:
        raise EmptyRangeError("MIN")
    return min(values)


@register_function("MAX")
def _fn_max(values: list[int]) -> int:
    if not values:
        raise EmptyRangeError("MAX")
    return max(values)


@register_function("MITTELWERT")
def _fn_average(values: list[int]) -> int:
    """Mean rounded to the nearest integer, ties away from zero."""
    if not values:
        raise EmptyRangeError("MITTELWERT")
    total = sum(values)
    n = len(values)
    q, r = divmod(abs(total), n)
    if 2 * r >= n:
        q += 1
    return -q if total < 0 else q


def match_function(body: str) -> str | None:
    """Return the function name if *body* is a call to a known aggregate."""
    upper = body.strip().upper()
    for name in _FUNCTIONS:
        if upper.startswith(name + "("):
            return name
    return None


def function_argument(name: str, body: str) -> str:
    """Extract the trimmed text between ``NAME(`` and the final ``)``."""
    text = body.strip()
    if not text.endswith(")"):
        raise FunctionSyntaxError(name, f"Invalid function syntax: {body}")
    return text[len(name) + 1 : -1].strip()


def range_values(arg: str, resolver: AddressResolver, cells: CellReader) -> list[int]:
    """Collect the integer values of every non-empty cell in range *arg*.

    Cells are visited row by row.

    Raises:
        InvalidRangeError: If *arg* is not a single ``<addr>:<addr>``.
        NotANumberError: If a non-empty cell is not an integer literal.
    """
    values: list[int] = []
    for row, col in resolver.cells_in_range(arg):
        text = cells.read(row, col).strip()
        if not text:
            continue
        values.append(parse_int_strict(text))
    return values


def evaluate_function(
    body: str, resolver: AddressResolver, cells: CellReader
) -> int:
    """Evaluate an aggregate call such as ``MAX(A1:C3)``.

    Raises:
        FunctionSyntaxError: If *body* names no known function or lacks
            its closing parenthesis.
    """
    name = match_function(body)
    if name is None:
        raise FunctionSyntaxError(body.split("(", 1)[0], f"Unknown function in {body!r}")
    arg = function_argument(name, body)
    if not arg:
        raise InvalidRangeError(arg)
    return _FUNCTIONS[name](range_values(arg, resolver, cells))
