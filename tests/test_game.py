from __future__ import annotations

import numpy as np
import pytest

from falling_columns.game import (
    MARKED,
    ColumnsGame,
    Command,
    ConfigError,
    EngineState,
    Finished,
    GameConfig,
    GameGrid,
    Piece,
    Renewed,
    Scored,
    ScriptedRandomizer,
    Updated,
)


def new_game(tilesets=((1, 2, 3),), grid=None, **config) -> ColumnsGame:
    game = ColumnsGame(GameConfig(**config), ScriptedRandomizer.from_tilesets(tilesets), grid)
    list(game.start())
    return game


def combo_grid() -> GameGrid:
    return GameGrid.from_rows(
        [
            [0, 0, 0, 0, 0, 0],
            [0, 0, 0, 0, 0, 0],
            [0, 2, 2, 0, 1, 1],
        ]
    )


@pytest.mark.parametrize(
    "field, value",
    [
        ("tiles_per_level_up", -1),
        ("initial_speed", 0),
        ("initial_speed", -2.0),
        ("speed_increment", -0.5),
        ("max_speed", 0),
        ("width", 0),
        ("height", 0),
    ],
)
def test_invalid_config_is_rejected(field, value):
    with pytest.raises(ConfigError):
        ColumnsGame(GameConfig(**{field: value}))


def test_config_error_is_a_value_error():
    assert issubclass(ConfigError, ValueError)


def test_start_renews_with_first_tileset():
    game = ColumnsGame(GameConfig(), ScriptedRandomizer.from_tilesets([(1, 2, 3), (4, 5, 6)]))
    events = list(game.start())
    assert len(events) == 1
    renewed = events[0]
    assert isinstance(renewed, Renewed)
    assert renewed.current == Piece((1, 2, 3), 3, 0)
    assert renewed.next.tiles == (4, 5, 6)
    assert renewed.grid.shape == (13, 6)
    assert game.state is EngineState.RUNNING
    assert list(game.start()) == []


def test_commands_move_the_current_piece():
    game = new_game()
    (moved,) = game.execute(Command.MOVE_LEFT)
    assert isinstance(moved, Updated)
    assert moved.piece.x == 2
    (moved,) = game.execute(Command.MOVE_RIGHT)
    assert moved.piece.x == 3
    (moved,) = game.execute(Command.MOVE_DOWN)
    assert moved.piece.y == 1
    (moved,) = game.execute(Command.ROTATE)
    assert moved.piece.tiles == (3, 1, 2)
    assert not moved.paused


@pytest.mark.parametrize(
    "toggle, state",
    [(Command.TOGGLE_PAUSE, EngineState.PAUSED), (Command.TOGGLE_WAIT, EngineState.WAITING)],
)
def test_frozen_game_reports_but_ignores_moves(toggle, state):
    game = new_game()
    before = game.current.copy()
    (toggled,) = game.execute(toggle)
    assert isinstance(toggled, Updated)
    assert game.state is state
    assert toggled.paused == (toggle == Command.TOGGLE_PAUSE)
    assert toggled.waiting == (toggle == Command.TOGGLE_WAIT)

    for command in (Command.MOVE_LEFT, Command.MOVE_RIGHT, Command.MOVE_DOWN, Command.ROTATE):
        events = list(game.execute(command))
        assert len(events) == 1
        assert events[0].piece == before
    assert list(game.tick()) == []
    assert game.current == before

    list(game.execute(toggle))
    assert game.state is EngineState.RUNNING
    (moved,) = game.execute(Command.MOVE_LEFT)
    assert moved.piece.x == 2


def test_pause_and_wait_are_independent():
    game = new_game()
    list(game.execute(Command.TOGGLE_PAUSE))
    list(game.execute(Command.TOGGLE_WAIT))
    assert game.state is EngineState.WAITING
    list(game.execute(Command.TOGGLE_PAUSE))
    assert game.state is EngineState.WAITING
    list(game.execute(Command.TOGGLE_WAIT))
    assert game.state is EngineState.RUNNING


def test_tick_moves_piece_down():
    game = new_game()
    (moved,) = game.tick()
    assert isinstance(moved, Updated)
    assert moved.piece.y == 1
    assert game.fall_interval == pytest.approx(2.0)


def test_combo_cascade_after_lock():
    game = new_game(tilesets=[(1, 2, 3), (4, 5, 6)], grid=combo_grid())
    assert [ev.piece.y for ev in (*game.tick(), *game.tick())] == [1, 2]

    events = list(game.tick())
    assert [type(ev) for ev in events] == [Scored, Scored, Renewed]
    first, second, renewed = events

    assert (first.removed, first.combo, first.level, first.points) == (3, 1, 1, 30)
    np.testing.assert_array_equal(
        first.grid,
        [
            [0, 0, 0, 3, 0, 0],
            [0, 0, 0, 2, 0, 0],
            [0, 2, 2, -1, -1, -1],
        ],
    )
    assert (second.removed, second.combo, second.level, second.points) == (3, 2, 1, 90)
    np.testing.assert_array_equal(
        second.grid,
        [
            [0, 0, 0, 0, 0, 0],
            [0, 0, 0, 3, 0, 0],
            [0, -1, -1, -1, 0, 0],
        ],
    )
    np.testing.assert_array_equal(
        renewed.grid,
        [
            [0, 0, 0, 0, 0, 0],
            [0, 0, 0, 0, 0, 0],
            [0, 0, 0, 3, 0, 0],
        ],
    )
    assert renewed.current == Piece((4, 5, 6), 3, 0)
    assert renewed.next.tiles == (1, 2, 3)
    assert game.total_removed == 6
    assert game.combo == 1
    assert not game.finished


def test_lock_phase_waits_for_each_event_to_be_taken():
    game = new_game(tilesets=[(1, 2, 3), (4, 5, 6)], grid=combo_grid())
    list(game.tick())
    list(game.tick())
    lock = game.tick()
    first = next(lock)
    assert isinstance(first, Scored)
    # Nothing past the first pass happened yet
    assert game.grid.cell(3, 2) == MARKED
    assert game.current.tiles == (1, 2, 3)
    rest = list(lock)
    assert isinstance(rest[-1], Renewed)
    assert game.current.tiles == (4, 5, 6)


def test_level_up_speeds_up_falling():
    grid = GameGrid.from_rows(
        [
            [0, 1, 0, 0, 0, 0],
            [1, 1, 0, 0, 1, 1],
            [1, 1, 1, 0, 1, 1],
        ]
    )
    game = new_game(tilesets=[(1, 1, 1), (4, 5, 6)], grid=grid, tiles_per_level_up=1)
    interval_before = game.fall_interval
    list(game.tick())
    list(game.tick())
    events = list(game.tick())
    assert [type(ev) for ev in events] == [Scored, Renewed]
    scored, renewed = events
    assert scored.removed == 12
    assert scored.level == 2
    np.testing.assert_array_equal(
        scored.grid,
        [
            [0, -1, 0, -1, 0, 0],
            [1, -1, 0, -1, -1, -1],
            [-1, -1, -1, -1, -1, -1],
        ],
    )
    np.testing.assert_array_equal(renewed.grid[2], [1, 0, 0, 0, 0, 0])
    assert renewed.current.tiles == (4, 5, 6)
    assert game.fall_interval < interval_before
    assert game.speed == pytest.approx(0.75)


def test_speed_is_capped():
    grid = GameGrid.from_rows([[0, 0, 0], [0, 0, 0], [1, 0, 1]])
    game = new_game(
        tilesets=[(1, 1, 1), (4, 5, 6)],
        grid=grid,
        tiles_per_level_up=1,
        initial_speed=1.0,
        speed_increment=5.0,
        max_speed=2.0,
    )
    list(game.tick())
    list(game.tick())
    list(game.tick())
    assert game.level == 2
    assert game.speed == pytest.approx(2.0)


def test_no_level_up_when_threshold_is_zero():
    game = new_game(tilesets=[(1, 2, 3), (4, 5, 6)], grid=combo_grid(), tiles_per_level_up=0)
    for _ in range(3):
        list(game.tick())
    assert game.total_removed == 6
    assert game.level == 1
    assert game.speed == pytest.approx(0.5)


def test_nothing_happens_before_the_first_renewal():
    game = ColumnsGame(GameConfig(width=3, height=1), ScriptedRandomizer.from_tilesets([(2, 3, 4)]))
    assert list(game.tick()) == []
    assert list(game.execute(Command.MOVE_LEFT)) == []
    assert list(game.execute(Command.QUIT)) == []
    assert game.grid.count_tiles() == 0
    assert not game.finished

    events = list(game.start())
    assert [type(ev) for ev in events] == [Renewed]
    assert events[0].current.tiles == (2, 3, 4)


def test_blocked_spawn_cell_ends_the_game_right_away():
    grid = GameGrid(6, 1)
    grid.grid[0, 3] = 1
    game = ColumnsGame(GameConfig(), ScriptedRandomizer.from_tilesets([(1, 1, 1)]), grid)
    events = list(game.start())
    assert [type(ev) for ev in events] == [Renewed, Finished]
    assert game.finished
    assert game.state is EngineState.FINISHED
    assert list(game.tick()) == []
    assert list(game.execute(Command.MOVE_LEFT)) == []


def test_filling_the_spawn_column_ends_the_game():
    game = new_game(tilesets=[(1, 2, 3), (4, 5, 6)], grid=GameGrid(6, 3))
    list(game.tick())
    list(game.tick())
    events = list(game.tick())
    assert [type(ev) for ev in events] == [Renewed, Finished]
    finished = events[-1]
    assert finished.total_removed == 0
    np.testing.assert_array_equal(finished.grid[:, 3], [3, 2, 1])


def test_quit_finishes_the_game():
    game = new_game()
    (finished,) = game.execute(Command.QUIT)
    assert isinstance(finished, Finished)
    assert (finished.level, finished.points) == (1, 0)
    assert list(game.execute(Command.MOVE_LEFT)) == []


def test_reset_restores_initial_state():
    game = new_game(tilesets=[(1, 2, 3), (4, 5, 6)], grid=combo_grid())
    for _ in range(3):
        list(game.tick())
    game.reset(ScriptedRandomizer.from_tilesets([(2, 2, 2)]))
    assert (game.level, game.points, game.total_removed) == (1, 0, 0)
    assert game.grid.count_tiles() == 0
    assert not game.finished
    (renewed,) = game.start()
    assert renewed.current.tiles == (2, 2, 2)
