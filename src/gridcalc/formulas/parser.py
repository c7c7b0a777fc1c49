"""Shunting-yard conversion of infix token streams to postfix (RPN).

Operator precedence (lowest to highest):
  1. Addition/subtraction: + -
  2. Multiplication/division: * /
  3. Exponentiation: ^ (right-associative)

Cell references are resolved to number tokens while parsing, so the RPN
sequence handed to the evaluator only holds numbers and operators.
"""

from __future__ import annotations

from typing import Callable

from gridcalc.formulas.errors import MismatchedParensError, UnexpectedTokenError
from gridcalc.formulas.tokenizer import OPERATORS, Token, TokenKind, tokenize

PRECEDENCE: dict[str, int] = {
    "^": 3,
    "*": 2,
    "/": 2,
    "+": 1,
    "-": 1,
}

RefResolver = Callable[[str], Token]


def precedence(op: str) -> int:
    return PRECEDENCE.get(op, 0)


def is_left_assoc(op: str) -> bool:
    return op != "^"


def is_operator(token: Token) -> bool:
    return token.kind is TokenKind.OPERATOR and token.text in OPERATORS


def to_rpn(tokens: list[Token], resolve_ref: RefResolver) -> list[Token]:
    """Convert infix *tokens* to postfix order.

    Args:
        tokens: Output of :func:`~gridcalc.formulas.tokenizer.tokenize`.
        resolve_ref: Callback mapping a reference like ``"A1"`` to a
            number token holding the referenced cell's value.  Faults it
            raises abort parsing.

    Returns:
        Tokens in RPN order, free of parentheses.

    Raises:
        MismatchedParensError: On unbalanced parentheses.
        UnexpectedTokenError: On ``:`` or ``,`` outside a function call.
    """
    output: list[Token] = []
    ops: list[Token] = []

    for tok in tokens:
        kind = tok.kind
        if kind is TokenKind.REF:
            output.append(resolve_ref(tok.text))
        elif kind is TokenKind.NUMBER:
            output.append(tok)
        elif kind is TokenKind.OPERATOR:
            while ops and is_operator(ops[-1]) and (
                precedence(ops[-1].text) > precedence(tok.text)
                or (
                    precedence(ops[-1].text) == precedence(tok.text)
                    and is_left_assoc(tok.text)
                )
            ):
                output.append(ops.pop())
            ops.append(tok)
        elif kind is TokenKind.LPAREN:
            ops.append(tok)
        elif kind is TokenKind.RPAREN:
            while ops and ops[-1].kind is not TokenKind.LPAREN:
                output.append(ops.pop())
            if not ops:
                raise MismatchedParensError()
            ops.pop()
        else:
            # Ranges and argument lists only exist inside function calls.
            raise UnexpectedTokenError(tok.text)

    while ops:
        op = ops.pop()
        if op.kind is TokenKind.LPAREN:
            raise MismatchedParensError()
        output.append(op)
    return output


def parse_expression(body: str, resolve_ref: RefResolver) -> list[Token]:
    """Tokenize and convert a formula body to RPN in one step."""
    return to_rpn(tokenize(body), resolve_ref)
