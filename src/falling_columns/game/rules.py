from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    points_per_tile: int = 10
    tiles_per_level_up: int = 10

    def points_for(self, removed: int, combo: int) -> int:
        if removed <= 0:
            return 0
        return removed * max(1, combo) * self.points_per_tile

    def reaches_next_level(self, total_removed: int, level: int) -> bool:
        # Zero tiles per level disables leveling
        if self.tiles_per_level_up <= 0:
            return False
        return total_removed // self.tiles_per_level_up > level - 1
