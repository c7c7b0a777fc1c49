"""Integer formula tokenizing, parsing and evaluation.

Public API::

    from gridcalc.formulas import tokenize, to_rpn, evaluate_rpn, evaluate_function
"""

from gridcalc.formulas.errors import (
    DIV0,
    ERR,
    DivideByZeroError,
    EmptyRangeError,
    FormulaError,
    FunctionSyntaxError,
    GridSizeError,
    InvalidAddressError,
    InvalidRangeError,
    MalformedExpressionError,
    MismatchedParensError,
    NotANumberError,
    RefError,
    UnexpectedTokenError,
    display_code,
)
from gridcalc.formulas.evaluator import evaluate_rpn, parse_int_strict
from gridcalc.formulas.functions import evaluate_function, function_names, match_function
from gridcalc.formulas.parser import parse_expression, to_rpn
from gridcalc.formulas.tokenizer import Token, TokenKind, tokenize

__all__ = [
    "DIV0",
    "ERR",
    "DivideByZeroError",
    "EmptyRangeError",
    "FormulaError",
    "FunctionSyntaxError",
    "GridSizeError",
    "InvalidAddressError",
    "InvalidRangeError",
    "MalformedExpressionError",
    "MismatchedParensError",
    "NotANumberError",
    "RefError",
    "Token",
    "TokenKind",
    "UnexpectedTokenError",
    "display_code",
    "evaluate_function",
    "evaluate_rpn",
    "function_names",
    "match_function",
    "parse_expression",
    "parse_int_strict",
    "to_rpn",
    "tokenize",
]
