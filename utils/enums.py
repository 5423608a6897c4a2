from enum import Enum, IntEnum, auto

class HueMode(IntEnum):
    # Integer values are passed straight into the numba kernels.
    LINEAR = 0
    SQRT = 1

class TileOrder(Enum):
    ROW_MAJOR = auto()
    CENTER_FIRST = auto()
