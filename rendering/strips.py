from __future__ import annotations

import math
from typing import List

from fractals.base import Strip


def plan_strips(height: int, workers: int) -> List[Strip]:
    """
    Splits [0, height) into `workers` contiguous strips of ceil(height / workers)
    rows. Trailing strips may be shorter or empty; empty strips are kept so the
    strip index always matches the worker slot.
    """
    if height < 1 or workers < 1:
        raise ValueError(f"plan_strips needs height >= 1 and workers >= 1, got {height}, {workers}")
    strip_h = math.ceil(height / workers)
    strips: List[Strip] = []
    for i in range(workers):
        start = min(i * strip_h, height)
        end = min(start + strip_h, height)
        strips.append(Strip(index=i, start_y=start, end_y=end))
    return strips
