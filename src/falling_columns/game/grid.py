from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Sequence, Tuple

import numpy as np

if TYPE_CHECKING:
    from .pieces import Piece


Coordinate = Tuple[int, int]

EMPTY = 0
MARKED = -1
MAX_TILE = 6

# Well dimensions of the commercial releases
STANDARD_WIDTH = 6
STANDARD_HEIGHT = 13

# (dy, dx) steps: horizontal, vertical, diagonal \ and diagonal /
LINE_DIRECTIONS: Tuple[Coordinate, ...] = ((0, 1), (1, 0), (1, 1), (1, -1))


class GameGrid:
    """Discrete 2D well holding the tiles that already landed.

    The grid is indexed ``[y, x]`` with row 0 at the top. Cells hold ``EMPTY``,
    ``MARKED`` (matched and waiting for ``settle``) or a tile color in
    ``1..MAX_TILE``.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        if self.width < 1 or self.height < 1:
            raise ValueError(f"Grid must be at least 1x1, got {self.width}x{self.height}")
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "GameGrid":
        """Build a grid from a list of rows, top row first."""
        data = np.asarray(rows, dtype=np.int8)
        if data.ndim != 2:
            raise ValueError("Rows must form a rectangular 2D layout")
        grid = cls(data.shape[1], data.shape[0])
        grid.grid[:, :] = data
        return grid

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell(self, x: int, y: int) -> int:
        if not self.is_inside(x, y):
            raise IndexError(f"Cell ({x}, {y}) is outside a {self.width}x{self.height} grid")
        return int(self.grid[y, x])

    def is_empty(self, x: int, y: int) -> bool:
        return self.cell(x, y) == EMPTY

    @property
    def spawn_column(self) -> int:
        return self.width // 2

    def is_spawn_blocked(self) -> bool:
        return not self.is_empty(self.spawn_column, 0)

    def consolidate(self, piece: "Piece") -> None:
        """Write the piece tiles into the grid, dropping the ones above row 0."""
        for x, y, tile in piece.cells():
            if y < 0:
                return
            self.grid[y, x] = tile

    def mark_lines_to_remove(self) -> int:
        """Mark every tile in a line of three or more of the same color.

        Returns how many cells were newly marked. Nothing is touched when there
        is no line.
        """
        mask = self._line_mask()
        removed = int(np.count_nonzero(mask))
        if removed:
            self.grid[mask] = MARKED
        return removed

    def _line_mask(self, directions: Iterable[Coordinate] = LINE_DIRECTIONS) -> np.ndarray:
        g = self.grid
        mask = np.zeros(g.shape, dtype=np.bool_)
        for dy, dx in directions:
            rows = self.height - 2 * abs(dy)
            cols = self.width - 2 * abs(dx)
            if rows <= 0 or cols <= 0:
                continue
            # Window k holds the k-th cell of every candidate line of three
            x0 = 2 * abs(dx) if dx < 0 else 0
            offsets = [(k * dy, x0 + k * dx) for k in range(3)]
            a, b, c = (g[oy:oy + rows, ox:ox + cols] for oy, ox in offsets)
            hit = (a > EMPTY) & (a == b) & (b == c)
            for oy, ox in offsets:
                mask[oy:oy + rows, ox:ox + cols] |= hit
        return mask

    def settle(self) -> None:
        """Drop the surviving tiles of each column to the bottom, clearing marks."""
        for x in range(self.width):
            column = self.grid[:, x]
            tiles = column[column > EMPTY]
            settled = np.zeros_like(column)
            if tiles.size:
                settled[-tiles.size:] = tiles
            self.grid[:, x] = settled

    def count_tiles(self) -> int:
        return int(np.count_nonzero(self.grid > EMPTY))

    def snapshot(self) -> np.ndarray:
        return self.grid.copy()

    def copy(self) -> "GameGrid":
        new_grid = GameGrid(self.width, self.height)
        new_grid.grid = self.grid.copy()
        return new_grid
