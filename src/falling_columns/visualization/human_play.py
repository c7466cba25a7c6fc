from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np
import pygame

from falling_columns.game import (
    Command,
    Event,
    Finished,
    GameConfig,
    Piece,
    Renewed,
    Scored,
    Updated,
    play,
)
from .renderer import Renderer


KEY_TO_COMMAND: Dict[int, Command] = {
    pygame.K_LEFT: Command.MOVE_LEFT,
    pygame.K_RIGHT: Command.MOVE_RIGHT,
    pygame.K_DOWN: Command.MOVE_DOWN,
    pygame.K_UP: Command.ROTATE,
    pygame.K_TAB: Command.ROTATE,
    pygame.K_p: Command.TOGGLE_PAUSE,
    pygame.K_SPACE: Command.TOGGLE_PAUSE,
    pygame.K_ESCAPE: Command.QUIT,
}


@dataclass
class View:
    """What the window shows, rebuilt from the events received so far."""

    grid: np.ndarray
    current: Optional[Piece] = None
    next_piece: Optional[Piece] = None
    level: int = 1
    points: int = 0
    paused: bool = False
    finished: bool = False

    def apply(self, event: Event) -> None:
        if isinstance(event, Updated):
            self.current = event.piece
            self.paused = event.paused
        elif isinstance(event, Scored):
            self.grid = event.grid
            self.level = event.level
            self.points = event.points
        elif isinstance(event, Renewed):
            self.grid = event.grid
            self.current = event.current
            self.next_piece = event.next
        elif isinstance(event, Finished):
            self.grid = event.grid
            self.level = event.level
            self.points = event.points
            self.finished = True

    @property
    def message(self) -> str:
        if self.finished:
            return "Game Over - ESC to quit"
        if self.paused:
            return "Paused"
        return ""


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--width", type=int, default=GameConfig.width)
    p.add_argument("--height", type=int, default=GameConfig.height)
    p.add_argument("--speed", type=float, default=GameConfig.initial_speed,
                   help="Initial falling speed in cells per second")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--cell", type=int, default=28)
    return p


def run() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=logging.INFO)
    config = GameConfig(width=args.width, height=args.height, initial_speed=args.speed, random_seed=args.seed)
    engine = play(config)

    pygame.init()
    try:
        clock = pygame.time.Clock()
        renderer = Renderer(cell_size=args.cell)
        screen = pygame.display.set_mode(renderer.window_size(config.width, config.height))
        pygame.display.set_caption("Falling Columns")
        view = View(grid=np.zeros((config.height, config.width), dtype=np.int8))

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE and view.finished:
                        running = False
                    command = KEY_TO_COMMAND.get(event.key)
                    if command is not None:
                        engine.send(command)

            for game_event in engine.poll_events():
                view.apply(game_event)

            renderer.draw(
                screen,
                view.grid,
                current=None if view.finished else view.current,
                next_piece=view.next_piece,
                level=view.level,
                points=view.points,
                message=view.message,
            )
            clock.tick(60)
    finally:
        engine.close()
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    run()
