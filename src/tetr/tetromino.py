"""Tetromino definitions and basic behaviour.

Each piece is a 4x4 occupancy grid cut from one of seven fixed templates.
Rotation always turns the whole 4x4 box, so pieces may shift inside it; there
is no per-shape pivot and no wall kick.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Tuple

import numpy as np
from numpy.typing import NDArray

Position = Tuple[int, int]  # (row, col)
Color = Tuple[int, int, int]

# Size of the bounding box every piece lives in.
BOX_SIZE = 4

# Top-left corner of the bounding box for a freshly spawned piece: row 0,
# column 3.
SPAWN_POSITION: Position = (0, 3)


class TetrominoType(str, Enum):
    """Enumeration of the seven shapes, in shape index order."""

    I = "I"
    Z = "Z"
    S = "S"
    J = "J"
    L = "L"
    O = "O"
    T = "T"


# Spawn orientation of each shape, indexed by shape index.  Templates smaller
# than the bounding box are padded with empty cells on the right and bottom.
SHAPE_TEMPLATES: Tuple[Tuple[Tuple[int, ...], ...], ...] = (
    ((1, 1, 1, 1),),
    ((1, 1, 0), (0, 1, 1)),
    ((0, 1, 1), (1, 1, 0)),
    ((1, 1, 1), (0, 0, 1)),
    ((1, 1, 1), (1, 0, 0)),
    ((1, 1), (1, 1)),
    ((1, 1, 1), (0, 1, 0)),
)

SHAPE_TYPES: Tuple[TetrominoType, ...] = tuple(TetrominoType)

SHAPE_COLORS: Dict[TetrominoType, Color] = {
    TetrominoType.I: (0, 255, 255),
    TetrominoType.Z: (255, 0, 0),
    TetrominoType.S: (0, 255, 0),
    TetrominoType.J: (255, 165, 0),
    TetrominoType.L: (0, 0, 255),
    TetrominoType.O: (255, 255, 0),
    TetrominoType.T: (128, 0, 128),
}

SHAPE_COUNT = len(SHAPE_TEMPLATES)


def template_grid(index: int) -> NDArray[np.uint8]:
    """Return a fresh 4x4 occupancy grid for the shape at ``index``.

    Raises:
        IndexError: If ``index`` is not in ``[0, SHAPE_COUNT)``.
    """

    if not 0 <= index < SHAPE_COUNT:
        raise IndexError(f"Shape index {index} out of range")
    grid = np.zeros((BOX_SIZE, BOX_SIZE), dtype=np.uint8)
    template = np.array(SHAPE_TEMPLATES[index], dtype=np.uint8)
    rows, cols = template.shape
    grid[:rows, :cols] = template
    return grid


class Tetromino:
    """Falling piece: a 4x4 occupancy grid, a colour and a board position."""

    def __init__(self, index: int) -> None:
        self.shape: NDArray[np.uint8] = template_grid(index)
        self.index = index
        self.position: Position = SPAWN_POSITION

    def __repr__(self) -> str:
        return f"Tetromino({self.kind.value}, position={self.position})"

    @property
    def kind(self) -> TetrominoType:
        return SHAPE_TYPES[self.index]

    @property
    def color(self) -> Color:
        return SHAPE_COLORS[self.kind]

    @property
    def value(self) -> int:
        """Integer stored in the board grid for cells of this piece."""

        return self.index + 1

    def rotate(self) -> None:
        """Rotate the 4x4 box a quarter turn clockwise.

        Cell ``(i, j)`` of the result is cell ``(3 - j, i)`` of the current
        grid.  Four calls restore the original grid.
        """

        self.shape = np.rot90(self.shape, -1).copy()

    def move(self, dx: int, dy: int) -> None:
        """Move the piece by the given offsets.

        ``dx`` moves horizontally (columns) and ``dy`` moves vertically
        (rows).  No bounds are checked here; the board rejects illegal
        positions.
        """

        row, col = self.position
        self.position = (row + dy, col + dx)

    def move_left(self) -> None:
        self.move(-1, 0)

    def move_right(self) -> None:
        self.move(1, 0)

    def move_down(self) -> None:
        self.move(0, 1)

    def reset_position(self) -> None:
        self.position = SPAWN_POSITION

    def blocks(self) -> List[Position]:
        """Return the board coordinates of the occupied cells."""

        row, col = self.position
        rows, cols = np.nonzero(self.shape)
        return [(row + int(r), col + int(c)) for r, c in zip(rows, cols)]
