from __future__ import annotations

from typing import Iterable, List

import pytest

from tetr.game_board import GameBoard
from tetr.highscore import MemoryHighScoreStore


class ScriptedRandom:
    """Return shape indices from a fixed script, repeating the last one."""

    def __init__(self, indices: Iterable[int]) -> None:
        self.indices: List[int] = list(indices)
        self.calls = 0

    def randrange(self, stop: int) -> int:
        index = self.indices[min(self.calls, len(self.indices) - 1)]
        self.calls += 1
        assert 0 <= index < stop
        return index


@pytest.fixture
def store() -> MemoryHighScoreStore:
    return MemoryHighScoreStore()


@pytest.fixture
def make_game(store):
    def _make(*indices: int, high_scores=None) -> GameBoard:
        return GameBoard(
            rng=ScriptedRandom(indices or (0,)),
            store=high_scores if high_scores is not None else store,
        )

    return _make
