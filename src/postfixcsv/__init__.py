"""postfixcsv -- evaluate CSV grids of postfix expressions.

Public API::

    from postfixcsv import Grid, SheetProcessor

    grid = Grid.from_text("5,A1 2 +")
    print(SheetProcessor(grid).process().render())
"""

from postfixcsv.coord import Coord, is_coordinate, parse, stringify
from postfixcsv.errors import ConfigError, GridError, PostfixCsvError
from postfixcsv.grid import Grid
from postfixcsv.sheet import SheetProcessor, format_number, process_sheet

__version__ = "0.3.0"

__all__ = [
    "ConfigError",
    "Coord",
    "Grid",
    "GridError",
    "PostfixCsvError",
    "SheetProcessor",
    "__version__",
    "format_number",
    "is_coordinate",
    "parse",
    "process_sheet",
    "stringify",
]
