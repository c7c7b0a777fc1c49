"""Tests for tokenizing, shunting-yard conversion and RPN evaluation."""

from __future__ import annotations

import pytest

from gridcalc.formulas import (
    DivideByZeroError,
    MalformedExpressionError,
    MismatchedParensError,
    NotANumberError,
    Token,
    TokenKind,
    UnexpectedTokenError,
    evaluate_rpn,
    parse_expression,
    parse_int_strict,
    to_rpn,
    tokenize,
)
from gridcalc.formulas.evaluator import INT64_MAX, INT64_MIN, wrap64


# ────────────────────────────────────────────────────────────────
# Helpers
# ────────────────────────────────────────────────────────────────


def _no_refs(ref: str) -> Token:
    raise AssertionError(f"unexpected reference {ref}")


def _rpn(body: str, refs: dict[str, str] | None = None) -> str:
    """Return the RPN of *body* as a space-joined string."""
    table = refs or {}

    def resolve(ref: str) -> Token:
        return Token(TokenKind.NUMBER, table[ref])

    return " ".join(t.text for t in parse_expression(body, resolve if refs else _no_refs))


def _eval(body: str) -> int:
    return evaluate_rpn(parse_expression(body, _no_refs))


# ────────────────────────────────────────────────────────────────
# Tokenizer
# ────────────────────────────────────────────────────────────────


class TestTokenizer:
    def test_kinds(self) -> None:
        tokens = tokenize("a1 + 22*(B3-4)")
        assert [t.kind for t in tokens] == [
            TokenKind.REF,
            TokenKind.OPERATOR,
            TokenKind.NUMBER,
            TokenKind.OPERATOR,
            TokenKind.LPAREN,
            TokenKind.REF,
            TokenKind.OPERATOR,
            TokenKind.NUMBER,
            TokenKind.RPAREN,
        ]
        assert [t.text for t in tokens] == ["A1", "+", "22", "*", "(", "B3", "-", "4", ")"]

    def test_separators(self) -> None:
        tokens = tokenize("A1:B2,C3")
        assert [t.kind for t in tokens] == [
            TokenKind.REF,
            TokenKind.COLON,
            TokenKind.REF,
            TokenKind.COMMA,
            TokenKind.REF,
        ]

    def test_whitespace_removed(self) -> None:
        assert tokenize(" 1 2 ") == [Token(TokenKind.NUMBER, "12")]

    def test_empty(self) -> None:
        assert tokenize("") == []

    def test_unknown_character(self) -> None:
        with pytest.raises(UnexpectedTokenError) as exc_info:
            tokenize("2 & 3")
        assert exc_info.value.token == "&"
        assert exc_info.value.position == 1

    def test_letters_without_digits(self) -> None:
        with pytest.raises(UnexpectedTokenError):
            tokenize("SUM(1)")

    def test_decimal_point_rejected(self) -> None:
        with pytest.raises(UnexpectedTokenError):
            tokenize("1.5")


# ────────────────────────────────────────────────────────────────
# Shunting-yard
# ────────────────────────────────────────────────────────────────


class TestToRpn:
    def test_precedence(self) -> None:
        assert _rpn("2+3*4") == "2 3 4 * +"

    def test_left_associative(self) -> None:
        assert _rpn("8-3-2") == "8 3 - 2 -"
        assert _rpn("8/4/2") == "8 4 / 2 /"

    def test_power_right_associative(self) -> None:
        assert _rpn("2^3^2") == "2 3 2 ^ ^"

    def test_parentheses(self) -> None:
        assert _rpn("(2+3)*4") == "2 3 + 4 *"

    def test_references_resolved(self) -> None:
        assert _rpn("A1*B2", {"A1": "6", "B2": "-7"}) == "6 -7 *"

    def test_unmatched_close(self) -> None:
        with pytest.raises(MismatchedParensError):
            _rpn("2)")

    def test_unmatched_open(self) -> None:
        with pytest.raises(MismatchedParensError):
            _rpn("(2+3")

    @pytest.mark.parametrize("body", ["1:2", "1,2"])
    def test_separator_outside_function(self, body: str) -> None:
        with pytest.raises(UnexpectedTokenError):
            _rpn(body)

    def test_resolver_fault_aborts(self) -> None:
        def failing(ref: str) -> Token:
            raise NotANumberError("abc")

        with pytest.raises(NotANumberError):
            to_rpn(tokenize("1+A1"), failing)


# ────────────────────────────────────────────────────────────────
# RPN evaluation
# ────────────────────────────────────────────────────────────────


class TestEvaluateRpn:
    def test_arithmetic(self) -> None:
        assert _eval("2+3*4") == 14
        assert _eval("(2+3)*4") == 20
        assert _eval("10-4-3") == 3

    def test_exponentiation(self) -> None:
        assert _eval("2^3^2") == 512
        assert _eval("3^2") == 9

    def test_integer_division_truncates(self) -> None:
        assert _eval("7/2") == 3
        assert _eval("3/2") == 1

    def test_negative_division_truncates_toward_zero(self) -> None:
        rpn = [Token(TokenKind.NUMBER, "-7"), Token(TokenKind.NUMBER, "2"), Token(TokenKind.OPERATOR, "/")]
        assert evaluate_rpn(rpn) == -3

    def test_divide_by_zero(self) -> None:
        with pytest.raises(DivideByZeroError):
            _eval("6/0")

    def test_negative_exponent_truncates(self) -> None:
        rpn = [Token(TokenKind.NUMBER, "2"), Token(TokenKind.NUMBER, "-1"), Token(TokenKind.OPERATOR, "^")]
        assert evaluate_rpn(rpn) == 0

    def test_zero_to_negative_power_saturates(self) -> None:
        rpn = [Token(TokenKind.NUMBER, "0"), Token(TokenKind.NUMBER, "-1"), Token(TokenKind.OPERATOR, "^")]
        assert evaluate_rpn(rpn) == INT64_MAX

    def test_power_saturates(self) -> None:
        assert _eval("2^63") == INT64_MAX
        assert _eval("10^400") == INT64_MAX

    def test_addition_wraps(self) -> None:
        rpn = [Token(TokenKind.NUMBER, str(INT64_MAX)), Token(TokenKind.NUMBER, "1"), Token(TokenKind.OPERATOR, "+")]
        assert evaluate_rpn(rpn) == INT64_MIN

    def test_unary_minus_is_malformed(self) -> None:
        with pytest.raises(MalformedExpressionError):
            _eval("-5")

    def test_dangling_operator(self) -> None:
        with pytest.raises(MalformedExpressionError):
            _eval("1+")

    def test_two_values_left(self) -> None:
        with pytest.raises(MalformedExpressionError):
            evaluate_rpn([Token(TokenKind.NUMBER, "1"), Token(TokenKind.NUMBER, "2")])

    def test_empty(self) -> None:
        with pytest.raises(MalformedExpressionError):
            evaluate_rpn([])

    def test_empty_parens(self) -> None:
        with pytest.raises(MalformedExpressionError):
            _eval("()")


class TestParseIntStrict:
    @pytest.mark.parametrize("text, expected", [("0", 0), ("42", 42), ("-17", -17), ("007", 7)])
    def test_valid(self, text: str, expected: int) -> None:
        assert parse_int_strict(text) == expected

    @pytest.mark.parametrize("text", ["", "-", "+5", "1.0", "1e3", " 5", "1,000", "#ERR", "99999999999999999999"])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(NotANumberError):
            parse_int_strict(text)

    def test_huge_digit_run(self) -> None:
        with pytest.raises(NotANumberError):
            parse_int_strict("1" * 5000)
        with pytest.raises(NotANumberError):
            parse_int_strict("-" + "9" * 5000)

    def test_leading_zeros_do_not_count(self) -> None:
        assert parse_int_strict("0" * 5000 + "42") == 42
        assert parse_int_strict("-" + "0" * 30 + str(INT64_MAX)) == -INT64_MAX


class TestWrap64:
    def test_in_range_unchanged(self) -> None:
        assert wrap64(-5) == -5
        assert wrap64(INT64_MAX) == INT64_MAX

    def test_overflow_wraps(self) -> None:
        assert wrap64(INT64_MAX + 1) == INT64_MIN
        assert wrap64(INT64_MIN - 1) == INT64_MAX
