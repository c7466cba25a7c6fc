from __future__ import annotations

from typing import Tuple

PALETTE = {
    0: (20, 20, 26),
    1: (240, 0, 0),
    2: (0, 200, 0),
    3: (0, 90, 240),
    4: (240, 240, 0),
    5: (160, 0, 240),
    6: (240, 140, 0),
}

# Tiles matched and waiting to be removed
MARKED_COLOR = (245, 245, 245)


def color_for_value(v: int) -> Tuple[int, int, int]:
    if v < 0:
        return MARKED_COLOR
    return PALETTE.get(v, (200, 200, 200))
