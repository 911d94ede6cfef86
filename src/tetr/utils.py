"""Utility helpers for renderers."""

from __future__ import annotations

from typing import List, Optional

from .board import Board
from .tetromino import BOX_SIZE, Tetromino


def render_grid(board: Board, active: Optional[Tetromino] = None) -> List[List[int]]:
    """Return a copy of the board grid with the active piece overlaid.

    This is a convenience for renderers that want a single 2D array to draw
    without mutating the underlying board state (i.e. without locking the
    piece). Cells occupied by the active piece receive the piece's value;
    cells above the board are skipped.
    """

    grid = [[int(cell) for cell in row] for row in board.grid]
    if active is not None:
        for r, c in active.blocks():
            if 0 <= r < board.height and 0 <= c < board.width:
                grid[r][c] = active.value
    return grid


def preview_grid(piece: Optional[Tetromino]) -> List[List[int]]:
    """Return the 4x4 box of ``piece`` filled with its value.

    ``None`` (e.g. an empty hold slot) yields an all-empty box.
    """

    if piece is None:
        return [[0] * BOX_SIZE for _ in range(BOX_SIZE)]
    return [[piece.value if cell else 0 for cell in row] for row in piece.shape]
