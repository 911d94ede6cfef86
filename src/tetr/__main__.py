"""Simple ASCII demo for the Tetris engine.

Run with: `python -m tetr`

This module prints a single frame composed of the board plus the active
tetromino and the next piece, useful as a minimal smoke test without opening
a window.
"""

from __future__ import annotations

from . import GameBoard, preview_grid, render_grid


def _print_grid(grid: list[list[int]]) -> None:
    for row in grid:
        print("".join("#" if cell else "." for cell in row))


def main() -> None:
    game = GameBoard()
    _print_grid(render_grid(game.board, game.current))
    print()
    print(f"Next: {game.next.kind.value}")
    _print_grid(preview_grid(game.next))
    print(f"Score: {game.score}  High score: {game.high_score}")


if __name__ == "__main__":
    main()
