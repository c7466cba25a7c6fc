"""Game module for Falling Columns.

Exports the simulation core:
- GameGrid: The well, with line matching and gravity
- Piece: The falling column of three tiles
- Randomizer / ScriptedRandomizer: Sources of tile colors
- ScoringRules: Points and level thresholds
- ColumnsGame: Step-wise game state machine
- Engine / play: The game running on its own thread behind command and event queues
- Updated, Scored, Renewed, Finished: Events emitted by the game
"""

from .grid import EMPTY, MARKED, MAX_TILE, STANDARD_HEIGHT, STANDARD_WIDTH, GameGrid
from .pieces import Piece, Randomizer, ScriptedRandomizer
from .rules import ScoringRules
from .events import Event, Finished, Renewed, Scored, Updated
from .core import ColumnsGame, Command, ConfigError, EngineState, GameConfig
from .engine import Engine, play

__all__ = [
    "EMPTY",
    "MARKED",
    "MAX_TILE",
    "STANDARD_HEIGHT",
    "STANDARD_WIDTH",
    "GameGrid",
    "Piece",
    "Randomizer",
    "ScriptedRandomizer",
    "ScoringRules",
    "Event",
    "Finished",
    "Renewed",
    "Scored",
    "Updated",
    "ColumnsGame",
    "Command",
    "ConfigError",
    "EngineState",
    "GameConfig",
    "Engine",
    "play",
]
