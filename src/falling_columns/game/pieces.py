from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Protocol, Sequence, Tuple

from .grid import EMPTY, MAX_TILE, GameGrid


Tileset = Tuple[int, int, int]


class Randomizer(Protocol):
    """Source of tile colors. ``random.Random`` satisfies it."""

    def randrange(self, stop: int) -> int:
        ...


class ScriptedRandomizer:
    """Replays a fixed sequence of ``randrange`` results, cycling at the end."""

    def __init__(self, values: Iterable[int]) -> None:
        self.values = [int(v) for v in values]
        if not self.values:
            raise ValueError("ScriptedRandomizer needs at least one value")
        self._index = 0

    @classmethod
    def from_tilesets(cls, tilesets: Sequence[Sequence[int]]) -> "ScriptedRandomizer":
        """Build a randomizer whose pieces come out with exactly these tiles."""
        values: List[int] = []
        for tiles in tilesets:
            if len(tiles) != 3:
                raise ValueError(f"A tileset holds 3 tiles, got {list(tiles)}")
            values.extend(int(t) - 1 for t in tiles)
        return cls(values)

    def randrange(self, stop: int) -> int:
        value = self.values[self._index]
        self._index = (self._index + 1) % len(self.values)
        if not 0 <= value < stop:
            raise ValueError(f"Scripted value {value} outside [0, {stop})")
        return value


@dataclass
class Piece:
    """Three stacked tiles falling through the grid.

    ``(x, y)`` is the position of the lowest cell; tile ``i`` sits at row
    ``y - i``.
    """

    tiles: Tileset = (1, 1, 1)
    x: int = 0
    y: int = 0

    def cells(self) -> List[Tuple[int, int, int]]:
        return [(self.x, self.y - i, tile) for i, tile in enumerate(self.tiles)]

    def move_left(self, grid: GameGrid) -> bool:
        if self.x > 0 and grid.cell(self.x - 1, self.y) == EMPTY:
            self.x -= 1
            return True
        return False

    def move_right(self, grid: GameGrid) -> bool:
        if self.x < grid.width - 1 and grid.cell(self.x + 1, self.y) == EMPTY:
            self.x += 1
            return True
        return False

    def move_down(self, grid: GameGrid) -> bool:
        """Move one row down. False means the piece landed."""
        if self.y < grid.height - 1 and grid.cell(self.x, self.y + 1) == EMPTY:
            self.y += 1
            return True
        return False

    def rotate(self) -> None:
        a, b, c = self.tiles
        self.tiles = (c, a, b)

    def reset_to(self, tiles: Sequence[int], column: int) -> None:
        self.tiles = (int(tiles[0]), int(tiles[1]), int(tiles[2]))
        self.x = column
        self.y = 0

    def randomize(self, randomizer: Randomizer) -> None:
        self.tiles = (
            randomizer.randrange(MAX_TILE) + 1,
            randomizer.randrange(MAX_TILE) + 1,
            randomizer.randrange(MAX_TILE) + 1,
        )

    def copy(self) -> "Piece":
        return Piece(self.tiles, self.x, self.y)
