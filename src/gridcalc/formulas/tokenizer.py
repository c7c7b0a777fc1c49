"""Lexer for formula bodies.

Produces a flat list of typed :class:`Token` objects.  The token kind is
decided here, once; later stages dispatch on ``Token.kind`` only.

Token categories:

- Cell references: ``A1``, ``B12`` (letters followed by digits)
- Numbers: unsigned digit runs (a leading ``-`` is the ``-`` operator)
- Operators: ``+ - * / ^``
- Parentheses
- Separators: ``:`` and ``,`` (only meaningful inside function calls)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from gridcalc.formulas.errors import UnexpectedTokenError


class TokenKind(str, Enum):
    REF = "ref"
    NUMBER = "number"
    OPERATOR = "operator"
    LPAREN = "lparen"
    RPAREN = "rparen"
    COLON = "colon"
    COMMA = "comma"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str

    def __str__(self) -> str:
        return self.text


OPERATORS = frozenset("+-*/^")

_TOKEN_RE = re.compile(
    r"(?P<ref>[A-Z]+[0-9]+)"
    r"|(?P<number>[0-9]+)"
    r"|(?P<operator>[-+*/^])"
    r"|(?P<lparen>\()"
    r"|(?P<rparen>\))"
    r"|(?P<colon>:)"
    r"|(?P<comma>,)"
)

_WS_RE = re.compile(r"\s+")


def normalize(body: str) -> str:
    """Uppercase a formula body and drop all whitespace."""
    return _WS_RE.sub("", body.upper())


def tokenize(body: str) -> list[Token]:
    """Split a formula body (``=`` already stripped) into tokens.

    Args:
        body: Formula text, e.g. ``"a1 + 2*(B3-4)"``.

    Returns:
        Tokens in source order.

    Raises:
        UnexpectedTokenError: On any character that starts no token.
    """
    text = normalize(body)
    tokens: list[Token] = []
    pos = 0
    while pos < len(text):
        m = _TOKEN_RE.match(text, pos)
        if m is None:
            raise UnexpectedTokenError(text[pos], position=pos)
        kind = TokenKind(m.lastgroup)
        tokens.append(Token(kind, m.group()))
        pos = m.end()
    return tokens
