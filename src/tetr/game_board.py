"""Gameplay state machine.

:class:`GameBoard` owns the grid, the falling piece, the lookahead and held
pieces and all scoring state.  Every public method runs a complete transition
before returning and reports its outcome through the return value; none of
them raise during normal play.
"""

from __future__ import annotations

import logging
import random
from typing import Dict, Optional

from .board import Board
from .highscore import HighScoreStore, MemoryHighScoreStore
from .tetromino import SHAPE_COUNT, Tetromino


LOGGER = logging.getLogger(__name__)

# Points awarded per lock, keyed by the number of rows cleared at once.
LINE_CLEAR_POINTS: Dict[int, int] = {0: 0, 1: 100, 2: 200, 3: 300, 4: 800}
SOFT_DROP_POINTS = 1
HARD_DROP_POINTS_PER_CELL = 2


def line_clear_points(cleared: int) -> int:
    """Return the score for clearing ``cleared`` rows with a single lock."""

    return LINE_CLEAR_POINTS.get(cleared, 0)


class GameBoard:
    """Single-player game session.

    Parameters
    ----------
    rng:
        Source of shape indices; only ``randrange`` is used.  Defaults to a
        fresh :class:`random.Random`.
    store:
        High score store consulted once on construction and written whenever
        the record is beaten.  Defaults to an in-memory store.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        store: Optional[HighScoreStore] = None,
    ) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._store: HighScoreStore = store if store is not None else MemoryHighScoreStore()
        self.board = Board()
        self.score = 0
        self.high_score = self._load_high_score()
        self.game_over = False
        self.held: Optional[Tetromino] = None
        self.can_hold = True
        self.total_hard_drops = 0
        self.last_hard_drop_distance = 0
        self.next: Tetromino = self._random_piece()
        self.current: Tetromino = self.next
        self.spawn_tetromino()

    def _load_high_score(self) -> int:
        try:
            value = self._store.load()
        except Exception as exc:
            LOGGER.warning("Could not load high score: %s", exc)
            return 0
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            LOGGER.warning("Ignoring invalid high score %r", value)
            return 0
        return value

    def _save_high_score(self) -> None:
        try:
            self._store.save(self.high_score)
        except Exception as exc:
            LOGGER.warning("Could not save high score: %s", exc)

    def _random_piece(self) -> Tetromino:
        return Tetromino(self._rng.randrange(SHAPE_COUNT))

    def _add_score(self, points: int) -> None:
        if points <= 0:
            return
        self.score += points
        if self.score > self.high_score:
            self.high_score = self.score
            LOGGER.debug("New high score: %d", self.high_score)
            self._save_high_score()

    def spawn_tetromino(self) -> Tetromino:
        """Promote the lookahead piece and draw a new one.

        The hold permission is restored.  A piece that collides as soon as it
        appears ends the game.
        """

        self.current = self.next
        self.next = self._random_piece()
        self.can_hold = True
        if self.board.collides(self.current):
            self.game_over = True
            LOGGER.info("Game over. Score: %d, high score: %d", self.score, self.high_score)
        return self.current

    def _lock_current(self) -> None:
        self.board.lock_piece(self.current)
        cleared = self.board.clear_full_rows()
        if cleared:
            LOGGER.debug("Cleared %d row(s)", cleared)
        self._add_score(line_clear_points(cleared))
        self.spawn_tetromino()

    def move_left(self) -> bool:
        """Shift the piece one column left.  Returns ``False`` if blocked."""

        if self.game_over:
            return False
        self.current.move_left()
        if self.board.collides(self.current):
            self.current.move_right()
            return False
        return True

    def move_right(self) -> bool:
        """Shift the piece one column right.  Returns ``False`` if blocked."""

        if self.game_over:
            return False
        self.current.move_right()
        if self.board.collides(self.current):
            self.current.move_left()
            return False
        return True

    def move_down(self) -> bool:
        """Drop the piece one row.

        Returns ``True`` while the piece is still falling.  When the row below
        is blocked the piece is locked, full rows are cleared and scored, the
        next piece spawns and ``False`` is returned.
        """

        if self.game_over:
            return False
        self.current.move_down()
        if self.board.collides(self.current):
            self.current.move(0, -1)
            self._lock_current()
            return False
        return True

    def tick(self) -> bool:
        """Apply one step of gravity."""

        return self.move_down()

    def soft_drop(self) -> bool:
        """Move down one row, scoring a point if the piece kept falling."""

        falling = self.move_down()
        if falling:
            self._add_score(SOFT_DROP_POINTS)
        return falling

    def hard_drop(self) -> int:
        """Drop the piece until it locks and return the distance travelled."""

        if self.game_over:
            return 0
        distance = 0
        while self.move_down():
            distance += 1
        if distance > 0:
            self.total_hard_drops += 1
            self.last_hard_drop_distance = distance
            self._add_score(distance * HARD_DROP_POINTS_PER_CELL)
        return distance

    def rotate(self) -> bool:
        """Rotate the piece clockwise.

        There is no wall kick: if the rotated piece collides it is turned
        three more times, back to where it started, and ``False`` is returned.
        """

        if self.game_over:
            return False
        self.current.rotate()
        if self.board.collides(self.current):
            for _ in range(3):
                self.current.rotate()
            return False
        return True

    def hold(self) -> bool:
        """Put the current piece on hold, once per spawned piece.

        With an empty hold slot the next piece spawns; otherwise the held
        and current pieces swap places at the spawn position.  A swap that
        would collide is undone: the held piece goes back to the hold slot and
        the current piece stays where it was rather than returning to the
        spawn position, so it never ends up overlapping the stack.
        """

        if self.game_over or not self.can_hold:
            return False

        if self.held is None:
            self.held = self.current
            self.held.reset_position()
            self.spawn_tetromino()
        else:
            previous = self.current
            incoming = self.held
            incoming.reset_position()
            self.current = incoming
            if self.board.collides(self.current):
                self.current = previous
                return False
            previous.reset_position()
            self.held = previous

        self.can_hold = False
        return True

    def restart(self) -> None:
        """Start a new game.  The high score is kept."""

        self.board.reset()
        self.score = 0
        self.total_hard_drops = 0
        self.last_hard_drop_distance = 0
        self.game_over = False
        self.held = None
        self.can_hold = True
        self.next = self._random_piece()
        self.spawn_tetromino()
        LOGGER.info("Game restarted")
