import numpy as np

from tetromino_rl.game import BlockDropGame, GameConfig, ManualClock, PollingScheduler, RunStatus, TetrominoType
from tests.helpers import fill_rows, place


def _game(scheduler, **overrides):
    return BlockDropGame(GameConfig.basic(random_seed=2, **overrides), scheduler=scheduler)


def test_scheduler_fires_in_deadline_order(clock, scheduler):
    fired = []
    scheduler.call_later(200, lambda: fired.append("b"))
    scheduler.call_later(100, lambda: fired.append("a"))
    cancelled = scheduler.call_later(150, lambda: fired.append("x"))
    cancelled.cancel()
    clock.advance(99)
    assert scheduler.run_pending() == 0
    clock.advance(200)
    assert scheduler.run_pending() == 2
    assert fired == ["a", "b"]


def test_gravity_tick_after_interval(clock, scheduler):
    game = _game(scheduler)
    y0 = game.current_piece.y
    clock.advance(999)
    scheduler.run_pending()
    assert game.current_piece.y == y0
    clock.advance(1)
    scheduler.run_pending()
    assert game.current_piece.y == y0 + 1
    assert scheduler.pending() == 1


def test_gravity_eventually_locks_piece(clock, scheduler):
    game = _game(scheduler)
    for _ in range(25):
        clock.advance(1000)
        scheduler.run_pending()
    assert game.grid.grid.any()
    assert game.status is RunStatus.RUNNING


def test_pause_cancels_gravity(clock, scheduler):
    game = _game(scheduler)
    y0 = game.current_piece.y
    clock.advance(500)
    game.toggle_pause()
    assert scheduler.pending() == 0
    clock.advance(5000)
    scheduler.run_pending()
    assert game.current_piece.y == y0

    game.toggle_pause()
    clock.advance(999)
    scheduler.run_pending()
    assert game.current_piece.y == y0
    clock.advance(1)
    scheduler.run_pending()
    assert game.current_piece.y == y0 + 1


def test_stale_callback_is_ignored(clock, scheduler):
    game = _game(scheduler)
    stale = game._gravity_handle.callback
    game.toggle_pause()
    game.toggle_pause()
    y0 = game.current_piece.y
    stale()
    assert game.current_piece.y == y0
    assert scheduler.pending() == 1


def test_stale_callback_after_reset_leaves_session_alone(clock, scheduler):
    game = _game(scheduler)
    stale = game._gravity_handle.callback
    game.reset()
    piece = (game.current_piece.kind, game.current_piece.x, game.current_piece.y)
    board = game.grid.clone_state()
    stale()
    assert (game.current_piece.kind, game.current_piece.x, game.current_piece.y) == piece
    assert np.array_equal(game.grid.grid, board)
    assert scheduler.pending() == 1


def test_stale_callback_after_game_over_leaves_session_alone(clock, scheduler):
    game = _game(scheduler)
    stale = game._gravity_handle.callback
    game.grid.grid[0:2, 3:7] = 7
    place(game, TetrominoType.O, x=0, y=5)
    game.hard_drop()
    assert game.status is RunStatus.GAME_OVER
    piece = (game.current_piece.kind, game.current_piece.x, game.current_piece.y)
    board = game.grid.clone_state()
    stale()
    assert game.status is RunStatus.GAME_OVER
    assert (game.current_piece.kind, game.current_piece.x, game.current_piece.y) == piece
    assert np.array_equal(game.grid.grid, board)
    assert scheduler.pending() == 0


def test_level_up_reschedules_faster(clock, scheduler):
    game = _game(scheduler)
    game.lines_cleared_total = 9
    fill_rows(game, [19], skip_cols=(0, 1, 2, 3))
    place(game, TetrominoType.I, x=0)
    clock.advance(300)
    game.hard_drop()
    assert game.level == 2
    assert scheduler.pending() == 1
    assert game._gravity_handle.deadline_ms == clock() + 900


def test_game_over_stops_gravity(clock, scheduler):
    game = _game(scheduler)
    game.grid.grid[0:2, 3:7] = 7
    place(game, TetrominoType.O, x=0, y=5)
    game.hard_drop()
    assert game.status is RunStatus.GAME_OVER
    assert scheduler.pending() == 0

    game.reset()
    assert game.status is RunStatus.RUNNING
    assert scheduler.pending() == 1


def test_manual_clock():
    clock = ManualClock(10)
    clock.advance(5)
    assert clock() == 15
    assert PollingScheduler(clock).call_later(5, lambda: None).deadline_ms == 20
