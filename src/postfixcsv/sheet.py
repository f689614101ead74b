"""Whole-sheet evaluation with snapshot semantics.

Every cell is evaluated against the original input grid and the results
are written into a separate copy, so a cell never sees another cell's
already-computed output and the iteration order cannot change results.
"""

from __future__ import annotations

import math

from postfixcsv.coord import Coord, stringify
from postfixcsv.grid import Grid
from postfixcsv.logging import EventType, emit_info, emit_warning
from postfixcsv.postfix.errors import ERROR_TOKEN, PostfixError, RecursionExceededError
from postfixcsv.postfix.evaluator import DEFAULT_MAX_DEPTH, PostfixEvaluator


def format_number(value: float) -> str:
    """Format a result for output: ``-8.0`` -> ``"-8"``, ``3.5`` -> ``"3.5"``."""
    # Beyond 1e16 int() would print float noise digits; repr gives "1e+20"
    if math.isfinite(value) and abs(value) < 1e16 and value == int(value):
        if value == 0 and math.copysign(1.0, value) < 0:
            return "-0"
        return str(int(value))
    return repr(value)


class SheetProcessor:
    """Evaluate every cell of a grid.

    Usage::

        out = SheetProcessor(Grid.from_text("5,A1 2 +")).process()
        out.render()   # "5,7"

    Parameters
    ----------
    grid : Grid
        Input grid.  Only read, never modified.
    max_depth : int
        Recursion ceiling passed to the evaluator.
    error_token : str
        Text written in place of any failed cell.
    """

    def __init__(
        self,
        grid: Grid,
        max_depth: int = DEFAULT_MAX_DEPTH,
        error_token: str = ERROR_TOKEN,
    ) -> None:
        self.grid = grid
        self.error_token = error_token
        self._evaluator = PostfixEvaluator(grid, max_depth=max_depth)
        self._errors: dict[str, PostfixError] = {}

    def evaluate(self, coord: Coord) -> float:
        """Evaluate a single cell.

        Raises:
            PostfixError: If the cell cannot be evaluated.
        """
        return self._evaluator.calc_cell(coord)

    def display_value(self, coord: Coord) -> str:
        """Return the formatted result for *coord*, or the error token."""
        try:
            return format_number(self.evaluate(coord))
        except PostfixError:
            return self.error_token

    def process(self) -> Grid:
        """Evaluate all cells in row-major order into a new grid.

        Per-cell errors are recorded (see :meth:`errors`) and rendered as
        the error token; they never stop the pass.
        """
        self._errors.clear()
        output = self.grid.copy()
        n_cells = 0

        emit_info(
            EventType.sheet_started,
            "Sheet evaluation started",
            {"rows": len(self.grid), "cols": self.grid.n_cols},
        )

        for coord in self.grid.coords():
            n_cells += 1
            try:
                text = format_number(self.evaluate(coord))
            except PostfixError as exc:
                label = stringify(coord)
                self._errors[label] = exc
                self._log_cell_error(label, exc)
                text = self.error_token
            output.set(coord, text)

        emit_info(
            EventType.sheet_completed,
            "Sheet evaluation completed",
            {"cells": n_cells, "errors": len(self._errors)},
        )
        return output

    def errors(self) -> dict[str, PostfixError]:
        """Return errors from the last :meth:`process` pass, keyed by label."""
        return dict(self._errors)

    @staticmethod
    def _log_cell_error(label: str, exc: PostfixError) -> None:
        if isinstance(exc, RecursionExceededError) and exc.cycle_path:
            emit_warning(
                EventType.cycle_detected,
                str(exc),
                {"cell": label, "cycle_path": exc.cycle_path},
                error_code=exc.kind.value,
            )
            return
        emit_warning(
            EventType.cell_error,
            str(exc),
            {"cell": label},
            error_code=exc.kind.value,
        )


def process_sheet(grid: Grid, **kwargs) -> Grid:
    """Shorthand for ``SheetProcessor(grid, **kwargs).process()``."""
    return SheetProcessor(grid, **kwargs).process()
