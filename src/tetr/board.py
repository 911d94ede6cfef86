"""Board representation for the Tetris playfield."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from .tetromino import Tetromino


# Dimensions of the board.
WIDTH = 10
HEIGHT = 20

Grid = NDArray[np.uint8]


def create_empty_grid() -> Grid:
    """Return a new empty board grid filled with zeros."""

    return np.zeros((HEIGHT, WIDTH), dtype=np.uint8)


class Board:
    """Tetris board holding the locked cells.

    Cells are indexed ``[row, col]`` with row ``0`` at the top.  ``0`` marks an
    empty cell; any other value is occupied.
    """

    width: int = WIDTH
    height: int = HEIGHT

    def __init__(self) -> None:
        self.grid: Grid = create_empty_grid()

    def get_cell(self, row: int, col: int) -> int:
        """Safely return the value at ``(row, col)``.

        Raises:
            IndexError: If the coordinates are outside the board.
        """
        if 0 <= row < self.height and 0 <= col < self.width:
            return int(self.grid[row, col])
        raise IndexError("Cell out of bounds")

    def set_cell(self, row: int, col: int, value: int) -> None:
        """Safely set the value at ``(row, col)``.

        Raises:
            IndexError: If the coordinates are outside the board.
        """
        if 0 <= row < self.height and 0 <= col < self.width:
            self.grid[row, col] = np.uint8(value)
        else:
            raise IndexError("Cell out of bounds")

    def is_empty(self, row: int, col: int) -> bool:
        """Return ``True`` if the cell at ``(row, col)`` is empty.

        Any coordinates outside the board are treated as occupied.
        """

        if 0 <= row < self.height and 0 <= col < self.width:
            return bool(self.grid[row, col] == 0)
        return False

    def reset(self) -> None:
        """Empty every cell in place."""

        self.grid.fill(0)

    def collides(self, tetromino: Tetromino) -> bool:
        """Return ``True`` if ``tetromino`` overlaps a wall, the floor or a cell.

        Rows above the board (negative rows) are free: pieces may hang partly
        above the visible area.
        """

        for row, col in tetromino.blocks():
            if col < 0 or col >= self.width or row >= self.height:
                return True
            if row >= 0 and self.grid[row, col] != 0:
                return True
        return False

    def lock_piece(self, tetromino: Tetromino) -> None:
        """Lock the tetromino's blocks into the board grid.

        Blocks above the top row are discarded.
        """

        coordinates = np.asarray(tetromino.blocks(), dtype=np.int16)
        if coordinates.size == 0:
            return

        rows, cols = coordinates.T
        visible = rows >= 0
        rows, cols = rows[visible], cols[visible]
        if np.any(rows >= self.height) or np.any(cols < 0) or np.any(cols >= self.width):
            raise IndexError("Block out of bounds")

        self.grid[rows, cols] = np.uint8(tetromino.value)

    def is_row_full(self, row: int) -> bool:
        return bool(np.all(self.grid[row] != 0))

    def clear_full_rows(self) -> int:
        """Clear completed rows and return how many were removed.

        Rows are scanned bottom to top.  When the row under the cursor is
        full, everything above it drops by one and the same row is checked
        again, since it now holds what used to be the row above.
        """

        cleared = 0
        row = self.height - 1
        while row >= 0:
            if self.is_row_full(row):
                self.grid[1 : row + 1] = self.grid[:row].copy()
                self.grid[0] = 0
                cleared += 1
            else:
                row -= 1
        return cleared
