"""Infix-to-postfix conversion for writing test sheets by hand.

Not used by the evaluator.  Supports ``+ - * /``, parentheses, unary
minus, decimal numbers and cell labels::

    >>> to_postfix("(A1 + 2) * -B3")
    'A1 2 + 0 B3 - *'
"""

from __future__ import annotations

from lark import Lark, Transformer
from lark.exceptions import LarkError

from postfixcsv.errors import PostfixCsvError

# Operator precedence (lowest to highest):
#   1. Addition/subtraction: + -  (left-associative)
#   2. Multiplication/division: * /  (left-associative)
#   3. Unary minus
#   4. Atoms: number, cell label, parenthesized expr
GRAMMAR = r"""
start: expr

?expr: term
    | expr "+" term  -> add
    | expr "-" term  -> sub

?term: unary
    | term "*" unary  -> mul
    | term "/" unary  -> div

?unary: atom
    | "-" unary  -> neg

?atom: NUMBER         -> number
    | CELL_REF        -> cell_ref
    | "(" expr ")"

CELL_REF.2: /[A-Za-z]+[0-9]+/

%import common.NUMBER
%import common.WS
%ignore WS
"""

_parser = Lark(GRAMMAR, parser="lalr", start="start")


class InfixSyntaxError(PostfixCsvError):
    """Syntax error in an infix expression.

    Attributes:
        position: Column where the error was detected, if known.
    """

    def __init__(self, message: str, position: int | None = None) -> None:
        self.position = position
        full = f"Infix parse error: {message}"
        if position is not None:
            full += f" (at position {position})"
        super().__init__(full)


class _ToPostfix(Transformer):
    """Turn each subtree into its list of postfix tokens."""

    def start(self, children: list) -> list[str]:
        return children[0]

    def number(self, children: list) -> list[str]:
        return [str(children[0])]

    def cell_ref(self, children: list) -> list[str]:
        return [str(children[0]).upper()]

    def neg(self, children: list) -> list[str]:
        operand = children[0]
        # A single literal folds into a signed number
        if len(operand) == 1 and not operand[0].startswith("-") and operand[0][0].isdigit():
            return ["-" + operand[0]]
        return ["0", *operand, "-"]

    def add(self, children: list) -> list[str]:
        return [*children[0], *children[1], "+"]

    def sub(self, children: list) -> list[str]:
        return [*children[0], *children[1], "-"]

    def mul(self, children: list) -> list[str]:
        return [*children[0], *children[1], "*"]

    def div(self, children: list) -> list[str]:
        return [*children[0], *children[1], "/"]


def to_postfix(text: str) -> str:
    """Convert an infix expression to space-separated postfix.

    Raises:
        InfixSyntaxError: If *text* is not a valid expression.
    """
    try:
        tree = _parser.parse(text)
    except LarkError as exc:
        pos = getattr(exc, "column", None)
        raise InfixSyntaxError(str(exc), position=pos) from exc
    return " ".join(_ToPostfix().transform(tree))
