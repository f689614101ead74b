"""Backing store for a (possibly jagged) grid of raw cell strings."""

from __future__ import annotations

from typing import Iterator

import polars as pl

from postfixcsv.coord import Coord, column_to_letters
from postfixcsv.errors import GridError


class Grid:
    """Rows of mutable string cells addressed by :class:`Coord`.

    Rows may differ in length.  Out-of-range lookups return ``None``
    rather than raising, which is how a missing referenced cell is
    detected during evaluation.

    Usage::

        grid = Grid.from_text("1,2\\n3", separator=",")
        grid.get(Coord(column=1, row=0))   # "2"
        grid.get(Coord(column=1, row=1))   # None

    Parameters
    ----------
    rows : list[list[str]]
        Cell contents, row-major.
    separator : str
        Field separator used by :meth:`render`.
    """

    def __init__(self, rows: list[list[str]], separator: str = ",") -> None:
        if not separator:
            raise GridError("Separator must be a non-empty string")
        self._rows = rows
        self.separator = separator

    @classmethod
    def from_text(cls, text: str, separator: str = ",") -> Grid:
        """Build a grid from delimited text.

        Line endings are normalised (``\\r\\n`` and lone ``\\r`` become
        ``\\n``) and surrounding whitespace of the whole input is
        stripped before splitting into lines and fields.

        Raises:
            GridError: If *separator* is empty.
        """
        if not separator:
            raise GridError("Separator must be a non-empty string")
        text = text.replace("\r\n", "\n").replace("\r", "\n").strip()
        rows = [line.split(separator) for line in text.split("\n")]
        return cls(rows, separator)

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------

    def get(self, coord: Coord) -> str | None:
        """Return the cell text at *coord*, or ``None`` when out of range."""
        if coord.row >= len(self._rows):
            return None
        cells = self._rows[coord.row]
        if coord.column >= len(cells):
            return None
        return cells[coord.column]

    def set(self, coord: Coord, value: str) -> bool:
        """Overwrite the cell at *coord*.

        Returns:
            ``False`` (leaving the grid unchanged) when *coord* is out of
            range, ``True`` otherwise.
        """
        if coord.row >= len(self._rows) or coord.column >= len(self._rows[coord.row]):
            return False
        self._rows[coord.row][coord.column] = value
        return True

    def coords(self) -> Iterator[Coord]:
        """Yield every cell coordinate in row-major order."""
        for r, cells in enumerate(self._rows):
            for c in range(len(cells)):
                yield Coord(column=c, row=r)

    @property
    def rows(self) -> list[list[str]]:
        """A copy of the cell contents."""
        return [list(cells) for cells in self._rows]

    @property
    def n_cols(self) -> int:
        """Length of the longest row."""
        return max((len(cells) for cells in self._rows), default=0)

    def copy(self) -> Grid:
        """Return an independent grid with the same cells and separator."""
        return Grid(self.rows, self.separator)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def render(self) -> str:
        """Join cells with the separator and rows with ``\\n``."""
        return "\n".join(self.separator.join(cells) for cells in self._rows)

    def to_frame(self) -> pl.DataFrame:
        """Return the grid as a string DataFrame with columns ``A``, ``B``, ...

        Short rows are padded with nulls.
        """
        width = self.n_cols
        data = {
            column_to_letters(c): [
                cells[c] if c < len(cells) else None for cells in self._rows
            ]
            for c in range(width)
        }
        return pl.DataFrame(data, schema={name: pl.Utf8 for name in data})

    def __len__(self) -> int:
        return len(self._rows)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self._rows == other._rows and self.separator == other.separator

    def __repr__(self) -> str:
        return f"Grid(rows={len(self._rows)}, cols={self.n_cols}, separator={self.separator!r})"
