"""Postfix (reverse-Polish) expression tokenizing and evaluation.

Public API::

    from postfixcsv.postfix import PostfixEvaluator, tokenize, PostfixError
"""

from postfixcsv.postfix.errors import (
    ERROR_TOKEN,
    CellNotFoundError,
    DivisionByZeroError,
    ErrorKind,
    NotEnoughOperandsError,
    PostfixError,
    RecursionExceededError,
    TooManyOperandsError,
)
from postfixcsv.postfix.evaluator import DEFAULT_MAX_DEPTH, PostfixEvaluator
from postfixcsv.postfix.tokens import Token, TokenKind, classify, tokenize

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "ERROR_TOKEN",
    "CellNotFoundError",
    "DivisionByZeroError",
    "ErrorKind",
    "NotEnoughOperandsError",
    "PostfixError",
    "PostfixEvaluator",
    "RecursionExceededError",
    "Token",
    "TokenKind",
    "TooManyOperandsError",
    "classify",
    "tokenize",
]
