import logging

import pytest

from tetr.board import Board
from tetr.game_board import GameBoard, LINE_CLEAR_POINTS, line_clear_points
from tetr.tetromino import SPAWN_POSITION

I, Z, S, J, L, O, T = range(7)


def _drop_without_bonus(game: GameBoard) -> None:
    while game.move_down():
        pass


def test_new_board_spawns_lookahead(make_game):
    game = make_game(I, O, T)
    assert game.current.index == I
    assert game.next.index == O
    assert game.held is None
    assert game.can_hold
    assert not game.game_over
    assert game.score == 0
    assert not game.board.grid.any()


def test_default_board_uses_random_pieces():
    game = GameBoard()
    assert 0 <= game.current.index < 7
    assert not game.board.collides(game.current)


def test_moves_succeed_until_wall(make_game):
    game = make_game(I)
    assert game.move_left()
    assert game.move_left()
    assert game.move_left()
    assert game.current.position == (0, 0)
    assert not game.move_left()
    assert game.current.position == (0, 0)
    for _ in range(6):
        assert game.move_right()
    assert not game.move_right()
    assert game.current.position == (0, 6)
    assert game.score == 0


def test_move_down_locks_piece_and_spawns_next(make_game):
    game = make_game(I, O, T)
    steps = 0
    while game.move_down():
        steps += 1
    assert steps == Board.height - 1
    assert game.board.grid[19, 3:7].tolist() == [1, 1, 1, 1]
    assert int((game.board.grid != 0).sum()) == 4
    assert game.current.index == O
    assert game.current.position == SPAWN_POSITION
    assert game.next.index == T
    assert game.score == 0


def test_tick_is_gravity_step(make_game):
    game = make_game(T)
    assert game.tick()
    assert game.current.position == (1, 3)


def test_soft_drop_scores_while_falling(make_game):
    game = make_game(I)
    assert game.soft_drop()
    assert game.soft_drop()
    assert game.score == 2
    game.current.position = (Board.height - 1, 3)
    assert not game.soft_drop()
    assert game.score == 2


def test_hard_drop_distance_and_score(make_game):
    game = make_game(I, O)
    distance = game.hard_drop()
    assert distance == Board.height - 1
    assert game.score == 2 * distance
    assert game.total_hard_drops == 1
    assert game.last_hard_drop_distance == distance
    assert game.current.index == O


def test_hard_drop_with_zero_distance_keeps_stats(make_game):
    game = make_game(O)
    game.board.grid[2, 3] = 1
    assert game.hard_drop() == 0
    assert game.total_hard_drops == 0
    assert game.last_hard_drop_distance == 0
    assert game.score == 0


@pytest.mark.parametrize("rows, points", [(1, 100), (2, 200), (3, 300), (4, 800)])
def test_line_clear_scoring(make_game, rows, points):
    game = make_game(I, O)
    for row in range(Board.height - rows, Board.height):
        game.board.grid[row] = 2
        game.board.grid[row, 6] = 0
    assert game.rotate()  # vertical line in column 6
    _drop_without_bonus(game)
    assert game.score == points
    assert not game.board.grid.all(axis=1).any()
    assert int((game.board.grid != 0).sum()) == 4 - rows


def test_line_clear_table():
    assert [line_clear_points(n) for n in range(5)] == [0, 100, 200, 300, 800]
    assert LINE_CLEAR_POINTS[4] == 800


def test_filling_gap_clears_row_and_shifts_rest(make_game):
    game = make_game(I, O)
    game.board.grid[19] = 3
    game.board.grid[19, 6] = 0
    game.board.grid[18, 0] = 5
    game.rotate()
    _drop_without_bonus(game)
    assert game.score == 100
    assert game.board.grid[19].tolist() == [5, 0, 0, 0, 0, 0, 1, 0, 0, 0]
    assert game.board.grid[17:19, 6].tolist() == [1, 1]
    assert int((game.board.grid != 0).sum()) == 4


def test_rotate_reverts_on_collision(make_game):
    game = make_game(I)
    original = game.current.shape.copy()
    game.board.grid[3, 6] = 1
    assert not game.rotate()
    assert (game.current.shape == original).all()


def test_hold_into_empty_slot_spawns_next(make_game):
    game = make_game(I, O, T)
    game.move_left()
    game.move_down()
    held = game.current
    assert game.hold()
    assert game.held is held
    assert held.position == SPAWN_POSITION
    assert game.current.index == O
    assert game.next.index == T
    assert not game.can_hold


def test_hold_twice_is_rejected_until_next_spawn(make_game):
    game = make_game(I, O, T)
    assert game.hold()
    assert not game.hold()
    game.hard_drop()
    assert game.can_hold
    assert game.hold()
    assert game.current.index == I
    assert game.held.index == T


def test_hold_swap_collision_is_reverted(make_game):
    game = make_game(I, O, T)
    assert game.hold()  # I held, O current
    game.hard_drop()  # T current
    game.move_down()
    game.move_down()
    game.board.grid[0, 5] = 1
    current, held = game.current, game.held
    position = current.position
    assert not game.hold()
    assert game.current is current
    assert game.held is held
    assert game.current.position == position
    assert game.can_hold


def test_game_over_when_spawn_collides(make_game):
    game = make_game(O)
    for _ in range(10):
        game.hard_drop()
    assert game.game_over
    assert game.score == 180
    assert game.total_hard_drops == 9
    # Every command is a no-op now.
    position = game.current.position
    assert not game.move_left()
    assert not game.move_right()
    assert not game.move_down()
    assert not game.tick()
    assert not game.soft_drop()
    assert not game.rotate()
    assert not game.hold()
    assert game.hard_drop() == 0
    assert game.current.position == position
    assert game.score == 180


def test_restart_resets_everything_but_high_score(make_game, store):
    game = make_game(O)
    for _ in range(10):
        game.hard_drop()
    assert game.game_over
    game.restart()
    assert not game.board.grid.any()
    assert game.score == 0
    assert not game.game_over
    assert game.total_hard_drops == 0
    assert game.last_hard_drop_distance == 0
    assert game.held is None
    assert game.can_hold
    assert not game.board.collides(game.current)
    assert game.high_score == 180
    assert store.value == 180


def test_high_score_loaded_from_store_and_persisted(make_game, store):
    store.value = 30
    game = make_game(I)
    assert game.high_score == 30
    game.hard_drop()
    assert game.score == 38
    assert game.high_score == 38
    assert store.value == 38
    game.restart()
    assert game.high_score == 38


def test_high_score_not_saved_below_record(make_game, store):
    store.value = 1000
    game = make_game(I)
    game.hard_drop()
    assert game.high_score == 1000
    assert store.saves == 0


class FailingStore:
    def __init__(self, load_error=None, save_error=None, value=0):
        self.load_error = load_error
        self.save_error = save_error
        self.value = value

    def load(self):
        if self.load_error is not None:
            raise self.load_error
        return self.value

    def save(self, value):
        if self.save_error is not None:
            raise self.save_error
        self.value = value


def test_unreadable_store_starts_from_zero(make_game, caplog):
    store = FailingStore(load_error=OSError("disk gone"))
    with caplog.at_level(logging.WARNING, logger="tetr.game_board"):
        game = make_game(I, high_scores=store)
    assert game.high_score == 0
    assert "Could not load high score" in caplog.text


@pytest.mark.parametrize("value", [-3, "12", None, True])
def test_invalid_stored_value_starts_from_zero(make_game, value):
    game = make_game(I, high_scores=FailingStore(value=value))
    assert game.high_score == 0


def test_store_write_failure_does_not_interrupt_play(make_game, caplog):
    store = FailingStore(save_error=OSError("disk full"))
    game = make_game(I, high_scores=store)
    with caplog.at_level(logging.WARNING, logger="tetr.game_board"):
        assert game.hard_drop() == Board.height - 1
    assert game.score == 38
    assert game.high_score == 38
    assert "Could not save high score" in caplog.text
    assert game.soft_drop()
    assert game.high_score == 39
