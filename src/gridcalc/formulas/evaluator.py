"""Stack evaluator for postfix (RPN) token sequences.

All arithmetic follows signed 64-bit integer semantics: ``+ - * /`` wrap
around on overflow, ``/`` truncates toward zero and ``^`` is computed as a
real power, then truncated and saturated to the 64-bit range.
"""

from __future__ import annotations

import math
import re

from gridcalc.formulas.errors import (
    DivideByZeroError,
    MalformedExpressionError,
    NotANumberError,
)
from gridcalc.formulas.tokenizer import Token, TokenKind

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

_INT_RE = re.compile(r"-?[0-9]+")

# Longest digit run that can fit in 64 bits, leading zeros aside.
_MAX_DIGITS = 19


def parse_int_strict(text: str) -> int:
    """Parse ``-?[0-9]+`` into a 64-bit integer.

    Raises:
        NotANumberError: For anything else, including values that do not
            fit in 64 bits.
    """
    if not _INT_RE.fullmatch(text):
        raise NotANumberError(text)
    digits = text.lstrip("-").lstrip("0") or "0"
    if len(digits) > _MAX_DIGITS:
        raise NotANumberError(text)
    value = -int(digits) if text.startswith("-") else int(digits)
    if not INT64_MIN <= value <= INT64_MAX:
        raise NotANumberError(text)
    return value


def wrap64(value: int) -> int:
    """Reduce *value* to signed 64-bit two's complement."""
    value &= (1 << 64) - 1
    if value > INT64_MAX:
        value -= 1 << 64
    return value


def _div(a: int, b: int) -> int:
    if b == 0:
        raise DivideByZeroError()
    q = abs(a) // abs(b)
    return wrap64(-q if (a < 0) != (b < 0) else q)


def _pow(a: int, b: int) -> int:
    try:
        result = float(a) ** b
    except ZeroDivisionError:
        # 0 to a negative power is +inf
        return INT64_MAX
    except OverflowError:
        result = -math.inf if a < 0 and b % 2 else math.inf
    if math.isinf(result):
        return INT64_MAX if result > 0 else INT64_MIN
    return max(INT64_MIN, min(INT64_MAX, math.trunc(result)))


_APPLY = {
    "+": lambda a, b: wrap64(a + b),
    "-": lambda a, b: wrap64(a - b),
    "*": lambda a, b: wrap64(a * b),
    "/": _div,
    "^": _pow,
}


def evaluate_rpn(rpn: list[Token]) -> int:
    """Evaluate a postfix token sequence to a single integer.

    Args:
        rpn: Output of :func:`~gridcalc.formulas.parser.to_rpn`.

    Returns:
        The computed value.

    Raises:
        MalformedExpressionError: If an operator lacks operands or the
            stack does not end with exactly one value.
        NotANumberError: If an operand is not an integer literal.
        DivideByZeroError: On integer division by zero.
    """
    stack: list[int] = []
    for tok in rpn:
        if tok.kind is TokenKind.OPERATOR:
            if len(stack) < 2:
                raise MalformedExpressionError()
            b = stack.pop()
            a = stack.pop()
            stack.append(_APPLY[tok.text](a, b))
        else:
            stack.append(parse_int_strict(tok.text))
    if len(stack) != 1:
        raise MalformedExpressionError()
    return stack[0]
