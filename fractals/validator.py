from __future__ import annotations

import math
import numbers
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from fractals.base import RenderParameters, TileGeometry, TileRenderConfig

MAX_ITER_LIMIT = 2**31 - 1


class ConfigError(ValueError):
    """Aggregated render configuration error(s)."""


def _is_int(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _is_finite(value) -> bool:
    return (isinstance(value, numbers.Real) and not isinstance(value, bool)
            and math.isfinite(value))


def _raise(errors: List[str], what: str) -> None:
    if errors:
        raise ConfigError(f"{what} validation failed:\n- " + "\n- ".join(errors))


def check_params(params: "RenderParameters") -> List[str]:
    errors: List[str] = []

    if not _is_int(params.max_iter) or not 1 <= params.max_iter <= MAX_ITER_LIMIT:
        errors.append(f"max_iter must be an integer in [1, {MAX_ITER_LIMIT}], got {params.max_iter!r}.")

    # Smoothing takes log(log|z|), so |z| must exceed 1 at escape.
    if not _is_finite(params.escape_radius_squared) or params.escape_radius_squared <= 1.0:
        errors.append(f"escape_radius_squared must be finite and > 1, got {params.escape_radius_squared!r}.")

    if not _is_finite(params.zoom) or params.zoom <= 0:
        errors.append(f"zoom must be finite and > 0, got {params.zoom!r}.")

    for name in ("center_x", "center_y"):
        value = getattr(params, name)
        if not _is_finite(value):
            errors.append(f"{name} must be a finite number, got {value!r}.")

    for name in ("full_width", "full_height"):
        value = getattr(params, name)
        if not _is_int(value) or value < 1:
            errors.append(f"{name} must be a positive integer, got {value!r}.")

    return errors


def check_tile(tile: "TileGeometry", full_width, full_height) -> List[str]:
    errors: List[str] = []

    for name in ("offset_x", "offset_y"):
        value = getattr(tile, name)
        if not _is_int(value) or value < 0:
            errors.append(f"tile {name} must be a non-negative integer, got {value!r}.")
    for name in ("width", "height"):
        value = getattr(tile, name)
        if not _is_int(value) or value < 1:
            errors.append(f"tile {name} must be a positive integer, got {value!r}.")
    if errors:
        return errors

    if _is_int(full_width) and tile.offset_x + tile.width > full_width:
        errors.append(
            f"tile spans columns [{tile.offset_x}, {tile.offset_x + tile.width}) "
            f"outside full width {full_width}.")
    if _is_int(full_height) and tile.offset_y + tile.height > full_height:
        errors.append(
            f"tile spans rows [{tile.offset_y}, {tile.offset_y + tile.height}) "
            f"outside full height {full_height}.")
    return errors


def validate_config(config: "TileRenderConfig") -> None:
    """
    Validates a tile render configuration. Raises ConfigError listing every problem.
    """
    errors = check_params(config.params)
    errors += check_tile(config.tile, config.params.full_width, config.params.full_height)

    if not _is_int(config.workers) or config.workers < 1:
        errors.append(f"workers must be a positive integer, got {config.workers!r}.")

    color = config.color
    if not _is_finite(color.saturation):
        errors.append(f"color saturation must be finite, got {color.saturation!r}.")
    if not _is_finite(color.hue_span):
        errors.append(f"color hue_span must be finite, got {color.hue_span!r}.")
    if not _is_finite(color.ramp_fraction) or not 0.0 < color.ramp_fraction <= 1.0:
        errors.append(f"color ramp_fraction must be in (0, 1], got {color.ramp_fraction!r}.")

    _raise(errors, "Render configuration")


def validate_grid(full_width, full_height, rows, cols, row=None, col=None) -> None:
    """
    Validates a ROWS x COLS tile grid over the full image (and optionally one cell of it).
    """
    errors: List[str] = []
    for name, value in (("full_width", full_width), ("full_height", full_height)):
        if not _is_int(value) or value < 1:
            errors.append(f"{name} must be a positive integer, got {value!r}.")
    for name, value in (("rows", rows), ("cols", cols)):
        if not _is_int(value) or value < 1:
            errors.append(f"{name} must be a positive integer, got {value!r}.")
    _raise(errors, "Tile grid")

    # Every tile needs at least one pixel along each axis.
    if rows > full_height:
        errors.append(f"rows ({rows}) exceeds full height ({full_height}).")
    if cols > full_width:
        errors.append(f"cols ({cols}) exceeds full width ({full_width}).")
    if row is not None and (not _is_int(row) or not 0 <= row < rows):
        errors.append(f"row must be in [0, {rows - 1}], got {row!r}.")
    if col is not None and (not _is_int(col) or not 0 <= col < cols):
        errors.append(f"col must be in [0, {cols - 1}], got {col!r}.")
    _raise(errors, "Tile grid")
