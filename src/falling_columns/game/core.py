from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Iterator, Optional

from .events import Event, Finished, Renewed, Scored, Updated
from .grid import STANDARD_HEIGHT, STANDARD_WIDTH, GameGrid
from .pieces import Piece, Randomizer
from .rules import ScoringRules

logger = logging.getLogger(__name__)


class Command(IntEnum):
    MOVE_LEFT = 0
    MOVE_RIGHT = 1
    MOVE_DOWN = 2
    ROTATE = 3
    TOGGLE_PAUSE = 4
    # Freezes the game without the player noticing, e.g. while a front end animates removals
    TOGGLE_WAIT = 5
    QUIT = 6


class EngineState(Enum):
    RUNNING = "running"
    PAUSED = "paused"
    WAITING = "waiting"
    FINISHED = "finished"


class ConfigError(ValueError):
    """Raised when a GameConfig holds values the game cannot run with."""


@dataclass
class GameConfig:
    width: int = STANDARD_WIDTH
    height: int = STANDARD_HEIGHT
    # Tiles to remove before advancing a level, 0 never levels up
    tiles_per_level_up: int = 10
    # Falling speeds in cells per second
    initial_speed: float = 0.5
    speed_increment: float = 0.25
    max_speed: float = 13.0
    points_per_tile: int = 10
    random_seed: Optional[int] = None

    def validate(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ConfigError(f"Grid must be at least 1x1, got {self.width}x{self.height}")
        if self.tiles_per_level_up < 0:
            raise ConfigError("tiles_per_level_up can not be less than 0")
        if self.initial_speed <= 0:
            raise ConfigError("initial_speed must be greater than 0")
        if self.speed_increment < 0:
            raise ConfigError("speed_increment can not be less than 0")
        if self.max_speed <= 0:
            raise ConfigError("max_speed must be greater than 0")


class ColumnsGame:
    """Game state machine for one session.

    ``start``, ``execute`` and ``tick`` are generators: the game only advances
    as their events are consumed, so a caller that waits for each event to be
    delivered keeps the simulation in step with what was observed.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        randomizer: Optional[Randomizer] = None,
        grid: Optional[GameGrid] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.config.validate()
        self.rules = ScoringRules(
            points_per_tile=self.config.points_per_tile,
            tiles_per_level_up=self.config.tiles_per_level_up,
        )
        self.reset(randomizer, grid)

    def reset(self, randomizer: Optional[Randomizer] = None, grid: Optional[GameGrid] = None) -> None:
        self.rng: Randomizer = randomizer or random.Random(self.config.random_seed)
        self.grid = grid.copy() if grid is not None else GameGrid(self.config.width, self.config.height)
        self.level = 1
        self.total_removed = 0
        self.combo = 1
        self.points = 0
        self.speed = float(self.config.initial_speed)
        self.paused = False
        self.waiting = False
        self.finished = False
        self.started = False
        self.current = Piece(x=self.grid.spawn_column)
        self.next = Piece(x=self.grid.spawn_column)
        self.next.randomize(self.rng)

    @property
    def state(self) -> EngineState:
        if self.finished:
            return EngineState.FINISHED
        if self.waiting:
            return EngineState.WAITING
        if self.paused:
            return EngineState.PAUSED
        return EngineState.RUNNING

    @property
    def fall_interval(self) -> float:
        """Seconds between two gravity ticks at the current speed."""
        return 1.0 / self.speed

    def start(self) -> Iterator[Event]:
        if self.started:
            return
        self.started = True
        yield from self._renew()

    def execute(self, command: Command) -> Iterator[Event]:
        if self.finished or not self.started:
            return
        if command == Command.QUIT:
            logger.debug("Quit received")
            yield self._finish()
            return
        if command == Command.TOGGLE_PAUSE:
            self.paused = not self.paused
        elif command == Command.TOGGLE_WAIT:
            self.waiting = not self.waiting
        elif not (self.paused or self.waiting):
            if command == Command.MOVE_LEFT:
                self.current.move_left(self.grid)
            elif command == Command.MOVE_RIGHT:
                self.current.move_right(self.grid)
            elif command == Command.MOVE_DOWN:
                self.current.move_down(self.grid)
            elif command == Command.ROTATE:
                self.current.rotate()
        yield self._updated()

    def tick(self) -> Iterator[Event]:
        if self.finished or not self.started or self.paused or self.waiting:
            return
        if self.current.move_down(self.grid):
            yield self._updated()
            return
        logger.debug("Piece %s locked at (%d, %d)", self.current.tiles, self.current.x, self.current.y)
        self.grid.consolidate(self.current)
        yield from self._remove_lines()
        yield from self._renew()

    def _remove_lines(self) -> Iterator[Event]:
        self.combo = 1
        removed = self.grid.mark_lines_to_remove()
        while removed > 0:
            self.total_removed += removed
            if self.rules.reaches_next_level(self.total_removed, self.level):
                self.level += 1
                self._speed_up()
                logger.info("Level up to %d, falling at %.2f cells/s", self.level, self.speed)
            self.points += self.rules.points_for(removed, self.combo)
            logger.debug("Cascade pass %d removed %d tiles", self.combo, removed)
            yield Scored(
                grid=self.grid.snapshot(),
                combo=self.combo,
                removed=removed,
                level=self.level,
                points=self.points,
            )
            self.combo += 1
            self.grid.settle()
            removed = self.grid.mark_lines_to_remove()
        self.combo = 1

    def _speed_up(self) -> None:
        if self.speed < self.config.max_speed:
            self.speed = min(self.speed + self.config.speed_increment, self.config.max_speed)

    def _renew(self) -> Iterator[Event]:
        self.current.reset_to(self.next.tiles, self.grid.spawn_column)
        self.next.reset_to(self.next.tiles, self.grid.spawn_column)
        self.next.randomize(self.rng)
        yield Renewed(grid=self.grid.snapshot(), current=self.current.copy(), next=self.next.copy())
        if self.grid.is_spawn_blocked():
            logger.info("Spawn cell blocked, game over at level %d with %d points", self.level, self.points)
            yield self._finish()

    def _finish(self) -> Finished:
        self.finished = True
        return Finished(
            grid=self.grid.snapshot(),
            level=self.level,
            points=self.points,
            total_removed=self.total_removed,
        )

    def _updated(self) -> Updated:
        return Updated(piece=self.current.copy(), paused=self.paused, waiting=self.waiting)
