from __future__ import annotations

from typing import List

from fractals.base import TileGeometry
from fractals.validator import validate_grid
from utils.enums import TileOrder


def tile_geometry(full_width: int, full_height: int, rows: int, cols: int,
                  row: int, col: int) -> TileGeometry:
    """
    Geometry of cell (row, col) in a rows x cols grid over the full image.
    Every tile gets full // count pixels per axis; the pixels left over by the
    integer division go to the last column/row only, so the grid covers the
    full image exactly.
    """
    validate_grid(full_width, full_height, rows, cols, row, col)

    tile_w = full_width // cols
    tile_h = full_height // rows
    extra_w = full_width - tile_w * cols
    extra_h = full_height - tile_h * rows

    width = tile_w + (extra_w if col == cols - 1 else 0)
    height = tile_h + (extra_h if row == rows - 1 else 0)
    return TileGeometry(offset_x=col * tile_w, offset_y=row * tile_h,
                        width=width, height=height)


def partition_tiles(full_width: int, full_height: int, rows: int, cols: int,
                    order: TileOrder = TileOrder.ROW_MAJOR) -> List[TileGeometry]:
    """
    All tiles of the grid, row-major by default.
    """
    validate_grid(full_width, full_height, rows, cols)
    tiles = [tile_geometry(full_width, full_height, rows, cols, r, c)
             for r in range(rows) for c in range(cols)]
    if order == TileOrder.CENTER_FIRST:
        tiles = _order_center_first(tiles, full_width, full_height)
    return tiles


def grid_position(tile: TileGeometry, full_width: int, full_height: int,
                  rows: int, cols: int) -> tuple:
    """(row, col) of a tile produced by tile_geometry for the same grid."""
    return tile.offset_y // (full_height // rows), tile.offset_x // (full_width // cols)


def tile_name(row: int, col: int) -> str:
    return f"mandelbrot_r{row}_c{col}"


def _order_center_first(tiles: List[TileGeometry], W: int, H: int) -> List[TileGeometry]:
    cx, cy = (W - 1) * 0.5, (H - 1) * 0.5
    # sort by tile center distance to image center
    def key(t: TileGeometry):
        tx, ty = t.offset_x + 0.5 * t.width, t.offset_y + 0.5 * t.height
        dx, dy = tx - cx, ty - cy
        return dx * dx + dy * dy
    return sorted(tiles, key=key)
