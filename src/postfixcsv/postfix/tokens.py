"""Tokenizer for whitespace-separated postfix expressions."""

from __future__ import annotations

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict

from postfixcsv.coord import Coord, is_coordinate, parse

OPERATORS = frozenset({"+", "-", "*", "/"})

# Plain decimal literals only; float() alone would also take "inf", "nan" and "1_0".
_NUMBER_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class TokenKind(str, Enum):
    number = "number"
    operator = "operator"
    reference = "reference"
    unrecognized = "unrecognized"


class Token(BaseModel):
    """One classified token.

    ``value`` is set for numbers.  ``coord`` is set for references whose
    label names a real cell position; a label such as ``A0`` is still a
    reference but has no coordinate.
    """

    model_config = ConfigDict(frozen=True)

    kind: TokenKind
    text: str
    value: float | None = None
    coord: Coord | None = None


def classify(text: str) -> Token:
    """Classify a single non-empty token."""
    if text in OPERATORS:
        return Token(kind=TokenKind.operator, text=text)
    if is_coordinate(text):
        return Token(kind=TokenKind.reference, text=text.upper(), coord=parse(text))
    if _NUMBER_RE.fullmatch(text):
        return Token(kind=TokenKind.number, text=text, value=float(text))
    return Token(kind=TokenKind.unrecognized, text=text)


def tokenize(expression: str) -> list[Token]:
    """Split *expression* on whitespace and classify each piece.

    Example::

        >>> [t.kind.value for t in tokenize("A1 2.5 + ?")]
        ['reference', 'number', 'operator', 'unrecognized']
    """
    return [classify(part) for part in expression.split()]
