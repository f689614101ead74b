"""Stack-machine evaluator for postfix cell expressions.

Cell references are resolved on demand by evaluating the referenced
cell's raw text recursively.  Cycles are detected from the set of cells
currently on the evaluation path; a depth ceiling bounds very long
(non-cyclic) reference chains.  Nothing is cached between calls.
"""

from __future__ import annotations

from postfixcsv.coord import Coord, stringify
from postfixcsv.grid import Grid
from postfixcsv.postfix.errors import (
    CellNotFoundError,
    DivisionByZeroError,
    NotEnoughOperandsError,
    RecursionExceededError,
    TooManyOperandsError,
)
from postfixcsv.postfix.tokens import Token, TokenKind, tokenize

DEFAULT_MAX_DEPTH = 255


class PostfixEvaluator:
    """Evaluate postfix expressions against a read-only grid.

    Usage::

        ev = PostfixEvaluator(Grid.from_text("5,A1 2 +"))
        ev.calc_cell(Coord(column=1, row=0))   # 7.0
        ev.calc("A1 A1 *")                      # 25.0

    Parameters
    ----------
    grid : Grid
        Source of raw cell text.  Never written to.
    max_depth : int
        Maximum number of cells on one evaluation path.
    """

    def __init__(self, grid: Grid, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        if max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {max_depth}")
        self.grid = grid
        self.max_depth = max_depth
        self._in_progress: set[Coord] = set()
        self._eval_stack: list[Coord] = []
        self._deepest = 0

    # ------------------------------------------------------------------
    # Top-level entry points
    # ------------------------------------------------------------------

    def calc(self, expression: str) -> float:
        """Evaluate a free-standing expression.

        Raises:
            PostfixError: On any evaluation failure.
        """
        self._reset()
        try:
            return self._eval_expression(expression)
        except RecursionError:
            raise RecursionExceededError(depth=self._deepest) from None
        finally:
            self._reset()

    def calc_cell(self, coord: Coord) -> float:
        """Evaluate the cell at *coord*.

        Raises:
            PostfixError: On any evaluation failure, including failures in
                referenced cells, which propagate unchanged.
        """
        self._reset()
        try:
            return self._eval_cell(coord)
        except RecursionError:
            # Interpreter stack ran out before max_depth did
            raise RecursionExceededError(depth=self._deepest) from None
        finally:
            self._reset()

    # ------------------------------------------------------------------
    # Core evaluation
    # ------------------------------------------------------------------

    def _reset(self) -> None:
        self._in_progress.clear()
        self._eval_stack.clear()
        self._deepest = 0

    def _eval_cell(self, coord: Coord) -> float:
        if coord in self._in_progress:
            cycle_start = self._eval_stack.index(coord)
            cycle = self._eval_stack[cycle_start:] + [coord]
            raise RecursionExceededError(cycle_path=[stringify(c) for c in cycle])
        if len(self._eval_stack) >= self.max_depth:
            raise RecursionExceededError(depth=len(self._eval_stack))

        raw = self.grid.get(coord)
        if raw is None:
            raise CellNotFoundError(stringify(coord))

        self._in_progress.add(coord)
        self._eval_stack.append(coord)
        self._deepest = max(self._deepest, len(self._eval_stack))
        try:
            return self._eval_expression(raw)
        finally:
            self._in_progress.discard(coord)
            if self._eval_stack and self._eval_stack[-1] == coord:
                self._eval_stack.pop()

    def _eval_expression(self, expression: str) -> float:
        stack: list[float] = []
        for token in tokenize(expression):
            if token.kind is TokenKind.operator:
                stack.append(self._apply(token.text, stack))
            elif token.kind is TokenKind.reference:
                stack.append(self._resolve(token))
            elif token.kind is TokenKind.number:
                stack.append(token.value)
            # unrecognized tokens are skipped

        # Nested references follow the same exactly-one rule
        if not stack:
            raise NotEnoughOperandsError()
        if len(stack) > 1:
            raise TooManyOperandsError(len(stack))
        return stack[0]

    def _resolve(self, token: Token) -> float:
        if token.coord is None:
            # Shaped like a label but names no cell, e.g. "A0"
            raise CellNotFoundError(token.text)
        return self._eval_cell(token.coord)

    @staticmethod
    def _apply(operator: str, stack: list[float]) -> float:
        if len(stack) < 2:
            raise NotEnoughOperandsError(operator)
        right = stack.pop()
        left = stack.pop()
        if operator == "+":
            return left + right
        if operator == "-":
            return left - right
        if operator == "*":
            return left * right
        if right == 0:
            raise DivisionByZeroError()
        return left / right
