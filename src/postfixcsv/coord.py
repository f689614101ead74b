"""Spreadsheet-style cell labels (``A1``, ``AA10``) and zero-based coordinates.

Columns use bijective base-26: ``A`` is 1, ``Z`` is 26 and ``AA`` is 27,
so there is no digit for zero.  Internally both axes are zero-based.
"""

from __future__ import annotations

import re
from functools import total_ordering

from pydantic import BaseModel, ConfigDict, Field

# ASCII only: str.isalpha() would accept letters like "é".
_LABEL_RE = re.compile(r"([A-Za-z]+)([0-9]+)")


@total_ordering
class Coord(BaseModel):
    """Zero-based (column, row) position in a grid.

    Ordering is row-major: ``(row, column)``, matching grid iteration.
    """

    model_config = ConfigDict(frozen=True)

    column: int = Field(ge=0)
    row: int = Field(ge=0)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Coord):
            return NotImplemented
        return (self.row, self.column) < (other.row, other.column)

    def __str__(self) -> str:
        return stringify(self)

    def __repr__(self) -> str:
        return f"Coord({self.label}: column={self.column}, row={self.row})"

    @property
    def label(self) -> str:
        return stringify(self)


def letters_to_column(letters: str) -> int:
    """Convert column letter(s) to 0-based index.  A=0, B=1, ..., Z=25, AA=26."""
    idx = 0
    for ch in letters.upper():
        idx = idx * 26 + (ord(ch) - ord("A") + 1)
    return idx - 1


def column_to_letters(idx: int) -> str:
    """Convert 0-based column index to letter(s).  0=A, 25=Z, 26=AA."""
    if idx < 0:
        raise ValueError(f"Column index must be non-negative, got {idx}")
    result = ""
    n = idx + 1
    while n > 0:
        n, rem = divmod(n - 1, 26)
        result = chr(65 + rem) + result
    return result


def is_coordinate(token: str) -> bool:
    """Return True if *token* has the shape of a cell label.

    Letters must strictly precede digits and both runs must be
    non-empty.  This only checks the shape; see :func:`parse`.
    """
    return _LABEL_RE.fullmatch(token) is not None


def parse(label: str) -> Coord | None:
    """Parse a label such as ``"b3"`` into ``Coord(column=1, row=2)``.

    Returns ``None`` when *label* is not a cell label, or when its row
    number is too long for :func:`int` to convert.
    """
    m = _LABEL_RE.fullmatch(label.upper())
    if not m:
        return None
    letters, digits = m.groups()
    try:
        row = int(digits)
    except ValueError:
        # sys.get_int_max_str_digits() caps the row part
        return None
    # "A0" passes the shape check but has no zero-based row
    if row < 1:
        return None
    return Coord(column=letters_to_column(letters), row=row - 1)


def stringify(coord: Coord) -> str:
    """Build a cell label from a coordinate: ``Coord(column=26, row=0)`` -> ``"AA1"``."""
    return f"{column_to_letters(coord.column)}{coord.row + 1}"
