"""Pygame front-end for the Tetris engine.

This module is the thin driver around :class:`tetr.game_board.GameBoard`: it
turns key presses into board commands, ticks gravity on a timer and draws the
board, the previews and the score panel.  All gameplay decisions stay in the
board.
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple

import pygame

from .board import Board
from .game_board import GameBoard
from .highscore import FileHighScoreStore
from .tetromino import SHAPE_COLORS, SHAPE_TYPES, Tetromino
from .utils import preview_grid


LOGGER = logging.getLogger(__name__)

# Size of a single board cell in pixels
CELL_SIZE = 30
# Cell sizes of the next and hold previews
PREVIEW_CELL_SIZE = 20
HOLD_CELL_SIZE = 15
# Milliseconds between automatic downward moves
GRAVITY_MS = 500
# Frames per second to run the game loop at
FPS = 60
# How long a bonus message stays up, and the final stretch over which it fades
BONUS_DISPLAY_MS = 5000
BONUS_FADE_MS = 2000

PANEL_X = Board.width * CELL_SIZE + 20
LEGEND_X = PANEL_X + 160
WINDOW_SIZE = (650, 600)

BACKGROUND = (0, 0, 0)
GRID_LINE = (50, 50, 50)
TEXT_COLOR = (255, 255, 255)
BONUS_COLOR = (255, 215, 0)

# Mapping from the integer stored in the board grid to a colour
CELL_COLORS = {0: BACKGROUND}
for index, shape in enumerate(SHAPE_TYPES):
    CELL_COLORS[index + 1] = SHAPE_COLORS[shape]

CONTROLS = (
    "Controls:",
    "Left/Right: move",
    "Up: rotate",
    "Down: soft drop",
    "Space: hard drop",
    "C: hold",
    "R: restart",
)


@dataclass
class Bonus:
    """Transient message shown after a scoring action."""

    text: str = ""
    remaining_ms: int = 0

    def show(self, text: str) -> None:
        self.text = text
        self.remaining_ms = BONUS_DISPLAY_MS

    def clear(self) -> None:
        self.text = ""
        self.remaining_ms = 0

    def update(self, dt: int) -> None:
        if self.remaining_ms <= 0:
            return
        self.remaining_ms -= dt
        if self.remaining_ms <= 0:
            self.clear()

    @property
    def alpha(self) -> int:
        """Opacity in ``[0, 255]``; full until the fade window starts."""

        if not self.text:
            return 0
        return int(255 * min(1.0, self.remaining_ms / BONUS_FADE_MS))


def handle_key(event: pygame.event.Event, game: GameBoard, bonus: Bonus) -> None:
    """Process a key press, showing a bonus message where one is earned."""

    if event.key == pygame.K_r:
        game.restart()
        bonus.clear()
        return
    if game.game_over:
        return
    if event.key == pygame.K_LEFT:
        game.move_left()
    elif event.key == pygame.K_RIGHT:
        game.move_right()
    elif event.key == pygame.K_UP:
        game.rotate()
    elif event.key == pygame.K_DOWN:
        if game.soft_drop():
            bonus.show("+1")
    elif event.key == pygame.K_SPACE:
        distance = game.hard_drop()
        if distance > 0:
            bonus.show(f"+{distance * 2} for {distance} cells!")
    elif event.key == pygame.K_c:
        if game.hold():
            bonus.show("Piece held")


def _draw_cell(
    screen: pygame.Surface, color: Tuple[int, int, int], x: int, y: int, size: int
) -> None:
    rect = pygame.Rect(x, y, size, size)
    pygame.draw.rect(screen, color, rect)
    pygame.draw.rect(screen, GRID_LINE, rect, 1)


def draw_board(screen: pygame.Surface, board: Board) -> None:
    """Render the locked cells."""

    for r in range(board.height):
        for c in range(board.width):
            color = CELL_COLORS[int(board.grid[r, c])]
            _draw_cell(screen, color, c * CELL_SIZE, r * CELL_SIZE, CELL_SIZE)


def draw_tetromino(screen: pygame.Surface, piece: Tetromino) -> None:
    """Render the falling piece, skipping cells above the board."""

    for r, c in piece.blocks():
        if r < 0:
            continue
        _draw_cell(screen, piece.color, c * CELL_SIZE, r * CELL_SIZE, CELL_SIZE)


def draw_preview(
    screen: pygame.Surface, piece: Optional[Tetromino], x: int, y: int, size: int
) -> None:
    for r, row in enumerate(preview_grid(piece)):
        for c, value in enumerate(row):
            if value:
                _draw_cell(screen, CELL_COLORS[value], x + c * size, y + r * size, size)


def draw_panel(
    screen: pygame.Surface,
    game: GameBoard,
    bonus: Bonus,
    font: pygame.font.Font,
    small_font: pygame.font.Font,
) -> None:
    """Render previews, scores, the bonus message and the controls legend."""

    def text(label: str, x: int, y: int, use_font: pygame.font.Font = font) -> None:
        screen.blit(use_font.render(label, True, TEXT_COLOR), (x, y))

    text("Next:", PANEL_X, 30)
    draw_preview(screen, game.next, PANEL_X, 60, PREVIEW_CELL_SIZE)

    text("Hold:", PANEL_X, 150)
    if game.held is None:
        text("Empty", PANEL_X, 180, small_font)
    else:
        draw_preview(screen, game.held, PANEL_X, 180, HOLD_CELL_SIZE)

    text(f"Score: {game.score}", PANEL_X, 250)
    text(f"High score: {game.high_score}", PANEL_X, 280)
    text(f"Hard drops: {game.total_hard_drops}", PANEL_X, 320, small_font)
    text(f"Last: {game.last_hard_drop_distance} cells", PANEL_X, 340, small_font)

    if bonus.text:
        surface = font.render(bonus.text, True, BONUS_COLOR)
        surface.set_alpha(bonus.alpha)
        screen.blit(surface, (PANEL_X, 380))

    if game.game_over:
        text("GAME OVER", PANEL_X, 410)

    for i, line in enumerate(CONTROLS):
        text(line, LEGEND_X, 30 + i * 18, small_font)


class GameRunner:
    """Manage the game loop with start/stop controls."""

    def __init__(self, game: Optional[GameBoard] = None) -> None:
        self._running = False
        self._task: asyncio.Task | None = None
        self._screen: pygame.Surface | None = None
        self._clock: pygame.time.Clock | None = None
        self._game = game
        self._bonus = Bonus()
        self._drop_timer = 0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def game(self) -> Optional[GameBoard]:
        return self._game

    def _step(self, dt: int) -> None:
        """Advance gravity and the bonus timer by ``dt`` milliseconds."""

        if self._game is None:
            return
        self._bonus.update(dt)
        if self._game.game_over:
            self._drop_timer = 0
            return
        self._drop_timer += dt
        if self._drop_timer >= GRAVITY_MS:
            self._drop_timer = 0
            self._game.tick()

    async def _run_loop(self) -> None:
        pygame.init()
        self._screen = pygame.display.set_mode(WINDOW_SIZE)
        pygame.display.set_caption("Tetris")
        self._clock = pygame.time.Clock()
        font = pygame.font.SysFont("arial", 20)
        small_font = pygame.font.SysFont("arial", 14)

        if self._game is None:
            self._game = GameBoard(store=FileHighScoreStore())
        LOGGER.info("Game started (high score %d)", self._game.high_score)

        self._drop_timer = 0
        self._running = True
        while self._running:
            dt = self._clock.tick(FPS)
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self._running = False
                elif event.type == pygame.KEYDOWN:
                    handle_key(event, self._game, self._bonus)
                    if event.key == pygame.K_r:
                        self._drop_timer = 0

            self._step(dt)

            self._screen.fill(BACKGROUND)
            draw_board(self._screen, self._game.board)
            if not self._game.game_over:
                draw_tetromino(self._screen, self._game.current)
            draw_panel(self._screen, self._game, self._bonus, font, small_font)
            pygame.display.flip()

            await asyncio.sleep(0)

        pygame.quit()
        LOGGER.info("Game stopped")

    def start(self) -> None:
        if self._task and not self._task.done():
            LOGGER.info("Game already running")
            return
        try:
            loop = asyncio.get_running_loop()
            self._task = loop.create_task(self._run_loop())
        except RuntimeError:
            # No running loop (e.g., plain Python); run synchronously
            asyncio.run(self._run_loop())

    def stop(self) -> None:
        if not self._running:
            LOGGER.info("Stop ignored: game not running")
            return
        self._running = False


def main() -> None:
    """Open the game window and block until it is closed."""

    level = os.environ.get("TETR_LOG_LEVEL", "INFO")
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format="%(message)s")
    GameRunner().start()


if __name__ == "__main__":  # pragma: no cover - manual execution only
    main()
