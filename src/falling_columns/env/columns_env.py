from __future__ import annotations

import random
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from falling_columns.game import MAX_TILE, ColumnsGame, Command, GameConfig, Scored
from falling_columns.game.events import Event
from falling_columns.visualization.palette import color_for_value


# Discrete action index -> command, None leaves the piece alone
ACTIONS: Tuple[Optional[Command], ...] = (
    Command.MOVE_LEFT,
    Command.MOVE_RIGHT,
    Command.MOVE_DOWN,
    Command.ROTATE,
    None,
)


class ColumnsEnv(gym.Env):
    """Columns as a turn-based environment.

    Each step applies one action to the falling piece and then advances gravity
    by one tick. The reward is the points scored during the step.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 max_episode_steps: int = 10000,
                 step_penalty: float = 0.0,
                 terminal_penalty: float = 0.0) -> None:
        super().__init__()
        self.game = ColumnsGame(config)
        self.render_mode = render_mode
        self.max_episode_steps = int(max_episode_steps)
        self.step_penalty = float(step_penalty)
        self.terminal_penalty = float(terminal_penalty)

        h, w = self.game.grid.height, self.game.grid.width
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=MAX_TILE, shape=(h, w), dtype=np.int8),
                "current": spaces.Box(low=1, high=MAX_TILE, shape=(3,), dtype=np.int8),
                "next": spaces.Box(low=1, high=MAX_TILE, shape=(3,), dtype=np.int8),
                "position": spaces.Box(low=0, high=max(h, w) - 1, shape=(2,), dtype=np.int16),
            }
        )
        self.action_space = spaces.Discrete(len(ACTIONS))
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        piece = self.game.current
        return {
            "grid": self.game.grid.snapshot(),
            "current": np.asarray(piece.tiles, dtype=np.int8),
            "next": np.asarray(self.game.next.tiles, dtype=np.int8),
            "position": np.asarray((piece.x, piece.y), dtype=np.int16),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "points": self.game.points,
            "level": self.game.level,
            "total_removed": self.game.total_removed,
            "tiles": self.game.grid.count_tiles(),
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is None:
            seed = int(self.np_random.integers(0, 2**31 - 1))
        self.game.reset(random.Random(seed))
        list(self.game.start())
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        if self.game.finished:
            info = self._get_info()
            info["combo"] = 0
            return self._get_obs(), 0.0, True, False, info
        command = ACTIONS[int(action)]
        points_before = self.game.points
        events: List[Event] = []
        if command is not None:
            events.extend(self.game.execute(command))
        events.extend(self.game.tick())
        self._steps += 1

        scored = [ev for ev in events if isinstance(ev, Scored)]
        gained = self.game.points - points_before
        terminated = self.game.finished
        truncated = not terminated and self._steps >= self.max_episode_steps

        reward = float(gained) + self.step_penalty
        if terminated:
            reward += self.terminal_penalty

        info = self._get_info()
        info["combo"] = max((ev.combo for ev in scored), default=0)
        return self._get_obs(), reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        grid = self.game.grid.snapshot()
        for x, y, tile in self.game.current.cells():
            if 0 <= y < self.game.grid.height:
                grid[y, x] = tile
        cell = 12
        h, w = grid.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color_for_value(int(grid[y, x]))
        return img

    def close(self) -> None:
        pass
