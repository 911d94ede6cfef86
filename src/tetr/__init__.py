"""Falling-block puzzle game: pieces, board and gameplay state machine."""

from .board import Board
from .tetromino import Tetromino, TetrominoType, SPAWN_POSITION
from .game_board import GameBoard, LINE_CLEAR_POINTS, line_clear_points
from .highscore import (
    FileHighScoreStore,
    HighScoreStore,
    MemoryHighScoreStore,
    default_highscore_path,
)
from .utils import preview_grid, render_grid

__all__ = [
    "Board",
    "Tetromino",
    "TetrominoType",
    "SPAWN_POSITION",
    "GameBoard",
    "LINE_CLEAR_POINTS",
    "line_clear_points",
    "HighScoreStore",
    "FileHighScoreStore",
    "MemoryHighScoreStore",
    "default_highscore_path",
    "preview_grid",
    "render_grid",
]
