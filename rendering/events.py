from dataclasses import dataclass
import numpy as np

from fractals.base import Strip, TileGeometry

@dataclass(frozen=True)
class StripEvent:
    strip: Strip
    data: np.ndarray    # RGBA rows of this strip only
    completed: int      # strips reported so far, this one included
    dispatched: int

@dataclass(frozen=True)
class TileEvent:
    tile: TileGeometry
    data: np.ndarray    # full tile RGBA buffer (H, W, 4)
    elapsed: float      # seconds
