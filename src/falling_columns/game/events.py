"""Events emitted by the game, one dataclass per kind.

Every event carries copies of the grid and pieces taken when it was emitted,
so consumers may keep them around while the game goes on.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import numpy as np

from .pieces import Piece


@dataclass(frozen=True)
class Updated:
    """The current piece moved, or a command was received."""

    piece: Piece
    paused: bool
    waiting: bool = False


@dataclass(frozen=True, eq=False)
class Scored:
    """One cascade pass removed tiles. ``grid`` still shows them as marked."""

    grid: np.ndarray
    combo: int
    removed: int
    level: int
    points: int = 0


@dataclass(frozen=True, eq=False)
class Renewed:
    """A new piece entered the grid."""

    grid: np.ndarray
    current: Piece
    next: Piece


@dataclass(frozen=True, eq=False)
class Finished:
    """Last event of a session, sent on game over or quit."""

    grid: np.ndarray
    level: int
    points: int
    total_removed: int


Event = Union[Updated, Scored, Renewed, Finished]
