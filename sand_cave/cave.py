from enum import IntEnum
from typing import Iterable, Tuple

import numpy as np


class Cell(IntEnum):
    """Cell contents stored in the cave grid."""
    EMPTY = 0
    ROCK = 1
    SOURCE = 2
    SAND = 3


# Characters used for the text rendering of a cave.
CELL_CHARS = {
    Cell.EMPTY: ".",
    Cell.ROCK: "#",
    Cell.SOURCE: "+",
    Cell.SAND: "o",
}
FALLING_CHAR = "~"


class CaveBoundsError(IndexError):
    """Raised when a cell outside the grid is read or written."""


class CellOverwriteError(ValueError):
    """Raised when rock or settled sand would be replaced by something else."""


class CaveGrid:
    """A fixed-size occupancy grid indexed as (row, column).

    Rock and settled sand are write-once. The source marker is only a
    marker: it never blocks a grain.
    """

    def __init__(self, rows: int, columns: int, source: Tuple[int, int] = None) -> None:
        """
        Args:
            rows, columns: Grid dimensions
            source: Optional (column, row) of the source marker
        """
        if rows <= 0 or columns <= 0:
            raise ValueError(f"Cave dimensions must be positive, got {rows}x{columns}")
        self.rows = int(rows)
        self.columns = int(columns)
        self.cells = np.zeros((self.rows, self.columns), dtype=np.int8)  # [row, col]
        self.source = None
        if source is not None:
            self.place_source(*source)

    @classmethod
    def from_array(cls, cells: np.ndarray, source: Tuple[int, int] = None) -> "CaveGrid":
        """Wrap an existing [row, col] array of Cell values."""
        rows, columns = cells.shape
        grid = cls(rows, columns)
        grid.cells = np.asarray(cells, dtype=np.int8).copy()
        if source is not None:
            grid._check_bounds(source[1], source[0])
            grid.source = (int(source[0]), int(source[1]))
        return grid

    @property
    def shape(self) -> Tuple[int, int]:
        return self.rows, self.columns

    def in_bounds(self, row: int, column: int) -> bool:
        return 0 <= row < self.rows and 0 <= column < self.columns

    def _check_bounds(self, row: int, column: int) -> None:
        if not self.in_bounds(row, column):
            raise CaveBoundsError(
                f"Cell (row={row}, column={column}) is outside the {self.rows}x{self.columns} cave"
            )

    def get(self, row: int, column: int) -> Cell:
        self._check_bounds(row, column)
        return Cell(int(self.cells[row, column]))

    def set(self, row: int, column: int, value: Cell) -> None:
        """Write a cell, refusing to replace rock or settled sand."""
        self._check_bounds(row, column)
        current = Cell(int(self.cells[row, column]))
        if current == value:
            return
        if current in (Cell.ROCK, Cell.SAND):
            raise CellOverwriteError(
                f"Cannot replace {current.name} at (row={row}, column={column}) with {Cell(value).name}"
            )
        self.cells[row, column] = value

    def is_blocked(self, row: int, column: int) -> bool:
        """True if a grain cannot enter the cell."""
        return self.get(row, column) in (Cell.ROCK, Cell.SAND)

    def place_source(self, column: int, row: int) -> None:
        """Mark the source cell. Only one source exists at a time."""
        self._check_bounds(row, column)
        if self.source is not None:
            old_col, old_row = self.source
            if self.cells[old_row, old_col] == Cell.SOURCE:
                self.cells[old_row, old_col] = Cell.EMPTY
        self.set(row, column, Cell.SOURCE)
        self.source = (int(column), int(row))

    def fill_row(self, row: int, col_start: int, col_end: int, value: Cell = Cell.ROCK) -> None:
        """Fill columns col_start..col_end (inclusive) of one row."""
        for column in range(min(col_start, col_end), max(col_start, col_end) + 1):
            self.set(row, column, value)

    def fill_column(self, column: int, row_start: int, row_end: int, value: Cell = Cell.ROCK) -> None:
        """Fill rows row_start..row_end (inclusive) of one column."""
        for row in range(min(row_start, row_end), max(row_start, row_end) + 1):
            self.set(row, column, value)

    def count(self, value: Cell) -> int:
        return int(np.sum(self.cells == value))

    def lowest_row_with(self, value: Cell):
        """Index of the lowest row holding `value`, or None if there is none."""
        rows = np.flatnonzero(np.any(self.cells == value, axis=1))
        if rows.size == 0:
            return None
        return int(rows[-1])

    def has_floor(self) -> bool:
        """True if the bottom row is solid rock."""
        return bool(np.all(self.cells[-1] == Cell.ROCK))

    def render(self, grains: Iterable[Tuple[int, int]] = ()) -> str:
        """Text picture of the cave, with in-flight grains drawn as '~'."""
        canvas = [[CELL_CHARS[Cell(int(v))] for v in row] for row in self.cells]
        for column, row in grains:
            if self.in_bounds(row, column):
                canvas[row][column] = FALLING_CHAR
        return "\n".join("".join(line) for line in canvas)

    def __repr__(self) -> str:
        return f"CaveGrid(rows={self.rows}, columns={self.columns}, source={self.source})"
