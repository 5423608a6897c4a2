"""
Tile driver for the composite Mandelbrot renderer.
Renders one tile (or every tile) of a ROWS x COLS grid laid over the full
image and saves each as mandelbrot_r{row}_c{col}.png. Adjacent tiles line up
pixel for pixel, so an external tool can mosaic them losslessly.

Usage examples:
  python main.py --full-size 56000x32000 --grid 4x4 --tile 3,3 --max-iter 4500

  python main.py --full-size 1600x900 --grid 2x2 --all --out tiles -v
"""

import argparse
import logging
import os
import sys
from dataclasses import replace
from typing import List, Optional, Tuple

from fractals.base import (ColorSettings, RenderParameters, TileRenderConfig,
                           DEFAULT_MAX_ITER, DEFAULT_FULL_WIDTH, DEFAULT_FULL_HEIGHT,
                           default_worker_count)
from fractals.tiling import grid_position, partition_tiles, tile_geometry, tile_name
from fractals.validator import ConfigError
from rendering.core import TileRenderer
from rendering.executor import StripExecutor, StripRenderError
from utils.enums import TileOrder
from utils.image import save_tile

logger = logging.getLogger("tilebrot")


# --- Helpers -----------------------------------------------------------------

def parse_size(token: str) -> Tuple[int, int]:
    """
    Parse a size like "56000x32000" -> (56000, 32000).
    """
    token = token.strip().lower().replace(' ', '')
    try:
        w, h = token.split('x')
        return int(w), int(h)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected WIDTHxHEIGHT, got {token!r}")


def parse_grid(token: str) -> Tuple[int, int]:
    """
    Parse a grid like "4x4" -> (rows, cols).
    """
    try:
        rows, cols = token.strip().lower().replace(' ', '').split('x')
        return int(rows), int(cols)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected ROWSxCOLS, got {token!r}")


def parse_cell(token: str) -> Tuple[int, int]:
    """
    Parse a tile index like "3,3" -> (row, col).
    """
    try:
        row, col = token.strip().replace(' ', '').split(',')
        return int(row), int(col)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected ROW,COL, got {token!r}")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Render tiles of a composite Mandelbrot image.")
    ap.add_argument("--full-size", type=parse_size,
                    default=(DEFAULT_FULL_WIDTH, DEFAULT_FULL_HEIGHT),
                    help="Resolution of the assembled image, WIDTHxHEIGHT")
    ap.add_argument("--grid", type=parse_grid, default=(4, 4),
                    help="Tile grid over the full image, ROWSxCOLS")
    ap.add_argument("--tile", type=parse_cell, default=(0, 0),
                    help="Tile to render, ROW,COL (0-based)")
    ap.add_argument("--all", action="store_true", help="Render every tile of the grid")
    ap.add_argument("--order", choices=["row-major", "center-first"], default="row-major",
                    help="Tile order for --all")
    ap.add_argument("--max-iter", type=int, default=DEFAULT_MAX_ITER)
    ap.add_argument("--escape-radius-squared", type=float, default=4.0)
    ap.add_argument("--center-x", type=float, default=-1.0)
    ap.add_argument("--center-y", type=float, default=0.0)
    ap.add_argument("--zoom", type=float, default=1.0,
                    help="Half-height of the view on the imaginary axis")
    ap.add_argument("--workers", type=int, default=default_worker_count(),
                    help="Strip workers per tile (default: CPU threads + 2, at least 4)")
    ap.add_argument("--hue-mode", choices=["linear", "sqrt"], default="linear",
                    help="'sqrt' cycles through the full hue range faster")
    ap.add_argument("--saturation", type=float, default=None,
                    help="HSB saturation before clamping (default 125)")
    ap.add_argument("--out", type=str, default=".", help="Output directory")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log every strip")
    return ap


def color_settings(args: argparse.Namespace) -> ColorSettings:
    color = ColorSettings.full_hue() if args.hue_mode == "sqrt" else ColorSettings()
    if args.saturation is not None:
        color = replace(color, saturation=args.saturation)
    return color


# --- Driver ------------------------------------------------------------------

def render_tiles(args: argparse.Namespace) -> List[str]:
    full_w, full_h = args.full_size
    rows, cols = args.grid
    params = RenderParameters(
        max_iter=args.max_iter,
        escape_radius_squared=args.escape_radius_squared,
        center_x=args.center_x,
        center_y=args.center_y,
        zoom=args.zoom,
        full_width=full_w,
        full_height=full_h,
    )
    color = color_settings(args)

    if args.all:
        order = TileOrder.CENTER_FIRST if args.order == "center-first" else TileOrder.ROW_MAJOR
        tiles = partition_tiles(full_w, full_h, rows, cols, order=order)
    else:
        row, col = args.tile
        tiles = [tile_geometry(full_w, full_h, rows, cols, row, col)]

    # Validate every tile before any work starts.
    configs = [TileRenderConfig(params=params, tile=tile, workers=args.workers, color=color)
               for tile in tiles]

    written: List[str] = []
    with StripExecutor(args.workers) as executor:
        for config in configs:
            tile = config.tile
            row, col = grid_position(tile, full_w, full_h, rows, cols)
            logger.info("Rendering tile row=%d, col=%d, tileSize=%dx%d, offset=%d,%d",
                        row, col, tile.width, tile.height, tile.offset_x, tile.offset_y)
            rgba = TileRenderer(config, executor=executor).render()
            path = save_tile(rgba, os.path.join(args.out, tile_name(row, col) + ".png"))
            logger.info("Saved %s", path)
            written.append(path)
    return written


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        render_tiles(args)
    except ConfigError as e:
        logger.error("%s", e)
        return 2
    except StripRenderError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
