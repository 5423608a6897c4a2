import numpy as np
import pytest

from fractals.tiling import grid_position, partition_tiles, tile_geometry, tile_name
from fractals.validator import ConfigError
from utils.enums import TileOrder


@pytest.mark.parametrize("full_w, full_h, rows, cols", [
    (56000, 32000, 4, 4),
    (101, 37, 3, 7),
    (10, 10, 10, 10),
    (1, 1, 1, 1),
    (17, 5, 5, 2),
])
def test_partition_covers_image_exactly(full_w, full_h, rows, cols):
    tiles = partition_tiles(full_w, full_h, rows, cols)
    assert len(tiles) == rows * cols
    assert sum(t.width * t.height for t in tiles) == full_w * full_h

    if full_w * full_h <= 10_000:
        cover = np.zeros((full_h, full_w), dtype=np.int32)
        for t in tiles:
            cover[t.offset_y:t.offset_y + t.height, t.offset_x:t.offset_x + t.width] += 1
        assert (cover == 1).all()


def test_leftover_pixels_go_to_last_row_and_column():
    tiles = {(r, c): tile_geometry(103, 50, 4, 5, r, c) for r in range(4) for c in range(5)}
    assert tiles[(0, 0)].width == 20 and tiles[(0, 0)].height == 12
    assert tiles[(0, 4)].width == 23
    assert tiles[(3, 0)].height == 14
    assert tiles[(3, 4)].offset_x == 80 and tiles[(3, 4)].offset_y == 36
    for (r, c), t in tiles.items():
        if c < 4:
            assert t.width == 20
        if r < 3:
            assert t.height == 12


def test_original_default_grid_corner_tile():
    t = tile_geometry(56000, 32000, 4, 4, 3, 3)
    assert (t.offset_x, t.offset_y, t.width, t.height) == (42000, 24000, 14000, 8000)


def test_center_first_order_is_permutation():
    row_major = partition_tiles(90, 60, 3, 3)
    centered = partition_tiles(90, 60, 3, 3, order=TileOrder.CENTER_FIRST)
    assert set(row_major) == set(centered)
    assert centered[0] == tile_geometry(90, 60, 3, 3, 1, 1)


def test_grid_position_round_trip():
    for r in range(3):
        for c in range(4):
            t = tile_geometry(47, 29, 3, 4, r, c)
            assert grid_position(t, 47, 29, 3, 4) == (r, c)


def test_tile_name():
    assert tile_name(3, 1) == "mandelbrot_r3_c1"


@pytest.mark.parametrize("args", [
    (100, 100, 0, 4, 0, 0),
    (100, 100, 4, 4, 4, 0),
    (100, 100, 4, 4, 0, -1),
    (3, 100, 4, 4, 0, 0),
    (100, 2, 4, 4, 0, 0),
    (0, 100, 1, 1, 0, 0),
])
def test_invalid_grid_rejected(args):
    with pytest.raises(ConfigError):
        tile_geometry(*args)
