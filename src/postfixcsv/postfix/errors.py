"""Error types for postfix expression evaluation.

Every error renders as the same ``#ERR`` token in sheet output, but the
subclasses stay distinct for tests and diagnostics.
"""

from __future__ import annotations

from enum import Enum

from postfixcsv.errors import PostfixCsvError

ERROR_TOKEN = "#ERR"


class ErrorKind(str, Enum):
    recursion_exceeded = "recursion_exceeded"
    not_enough_operands = "not_enough_operands"
    too_many_operands = "too_many_operands"
    cell_not_found = "cell_not_found"
    division_by_zero = "division_by_zero"


class PostfixError(PostfixCsvError):
    """Base class for all evaluation errors."""

    kind: ErrorKind
    display = ERROR_TOKEN


class RecursionExceededError(PostfixError):
    """A cell reaches itself through references, or the depth ceiling was hit.

    Attributes:
        cycle_path: Labels on the cycle, first and last equal.  Empty when
            the depth ceiling was hit instead.
        depth: Recursion depth at which evaluation stopped.
    """

    kind = ErrorKind.recursion_exceeded

    def __init__(self, cycle_path: list[str] | None = None, depth: int | None = None) -> None:
        self.cycle_path = cycle_path or []
        self.depth = depth
        if self.cycle_path:
            msg = f"Circular cell reference: {' -> '.join(self.cycle_path)}"
        else:
            msg = f"Recursion depth exceeded ({depth})"
        super().__init__(msg)


class NotEnoughOperandsError(PostfixError):
    """An operator found fewer than two values, or nothing was left to return.

    Attributes:
        operator: The operator that ran short, ``None`` for an empty result.
    """

    kind = ErrorKind.not_enough_operands

    def __init__(self, operator: str | None = None) -> None:
        self.operator = operator
        if operator is None:
            msg = "Expression produced no value"
        else:
            msg = f"Not enough operands for {operator!r}"
        super().__init__(msg)


class TooManyOperandsError(PostfixError):
    """More than one value remained after the last token.

    Attributes:
        count: Number of values left on the stack.
    """

    kind = ErrorKind.too_many_operands

    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(f"Expression left {count} values, expected 1")


class CellNotFoundError(PostfixError):
    """Reference to a cell outside the grid.

    Attributes:
        label: The unresolved label.
    """

    kind = ErrorKind.cell_not_found

    def __init__(self, label: str) -> None:
        self.label = label
        super().__init__(f"Cell not found: {label}")


class DivisionByZeroError(PostfixError):
    """Right-hand operand of ``/`` was exactly zero."""

    kind = ErrorKind.division_by_zero

    def __init__(self) -> None:
        super().__init__("Division by zero")
