from __future__ import annotations

from typing import Optional

import numpy as np
import pygame

from falling_columns.game import Piece
from .palette import color_for_value


class Renderer:
    def __init__(self, cell_size: int = 30, margin: int = 20) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self._font: Optional[pygame.font.Font] = None

    def window_size(self, width: int, height: int) -> tuple[int, int]:
        # Board plus a side panel four cells wide for the preview and counters
        return (
            width * self.cell_size + 4 * self.cell_size + self.margin * 3,
            height * self.cell_size + self.margin * 2,
        )

    def _cell_rect(self, x0: int, y0: int, x: int, y: int) -> pygame.Rect:
        return pygame.Rect(
            x0 + x * self.cell_size,
            y0 + y * self.cell_size,
            self.cell_size - 1,
            self.cell_size - 1,
        )

    def _grid_surface(self, state: np.ndarray, piece: Optional[Piece]) -> pygame.Surface:
        h, w = state.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill((30, 30, 36))
        for y in range(h):
            for x in range(w):
                pygame.draw.rect(surf, color_for_value(int(state[y, x])), self._cell_rect(0, 0, x, y))
        if piece is not None:
            for x, y, tile in piece.cells():
                if 0 <= y < h:
                    pygame.draw.rect(surf, color_for_value(tile), self._cell_rect(0, 0, x, y))
        return surf

    def _text(self, screen: pygame.Surface, text: str, pos: tuple[int, int]) -> None:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 26)
        screen.blit(self._font.render(text, True, (230, 230, 230)), pos)

    def draw(
        self,
        screen: pygame.Surface,
        state: np.ndarray,
        current: Optional[Piece] = None,
        next_piece: Optional[Piece] = None,
        level: int = 1,
        points: int = 0,
        message: str = "",
    ) -> None:
        screen.fill((10, 10, 14))
        screen.blit(self._grid_surface(state, current), (self.margin, self.margin))

        panel_x = self.margin * 2 + state.shape[1] * self.cell_size
        if next_piece is not None:
            # Lowest tile at the bottom of the preview
            for i, tile in enumerate(next_piece.tiles):
                rect = self._cell_rect(panel_x, self.margin, 0, 2 - i)
                pygame.draw.rect(screen, color_for_value(tile), rect)
        text_y = self.margin + 4 * self.cell_size
        self._text(screen, f"Level {level}", (panel_x, text_y))
        self._text(screen, f"Points {points}", (panel_x, text_y + 30))
        if message:
            self._text(screen, message, (self.margin, self.margin // 4))
        pygame.display.flip()
