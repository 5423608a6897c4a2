from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from fractals.validator import ConfigError, validate_config
from utils.enums import HueMode


DEFAULT_MAX_ITER = 4500
DEFAULT_ESCAPE_RADIUS_SQUARED = 4.0
DEFAULT_FULL_WIDTH = 56000
DEFAULT_FULL_HEIGHT = 32000


def default_worker_count() -> int:
    """
    Pool size for strip workers: hardware threads + 2, never below 4.
    Strips near the set boundary take far longer than the rest, so the pool
    is oversized to keep every thread busy while the slow strips finish.
    """
    cpus = os.cpu_count()
    if cpus is None:
        return 4
    return max(4, cpus + 2)


@dataclass(frozen=True)
class RenderParameters:
    """
    Holds the global render parameters for one composite image.
    Center and zoom place the image on the complex plane; the y-axis spans
    [-zoom, zoom] around center_y regardless of how the image is tiled.
    Full width and height are the resolution of the assembled composite.
    """
    max_iter: int = DEFAULT_MAX_ITER
    escape_radius_squared: float = DEFAULT_ESCAPE_RADIUS_SQUARED
    center_x: float = -1.0
    center_y: float = 0.0
    zoom: float = 1.0
    full_width: int = DEFAULT_FULL_WIDTH
    full_height: int = DEFAULT_FULL_HEIGHT

    @property
    def aspect_ratio(self) -> float:
        return self.full_width / self.full_height


@dataclass(frozen=True)
class TileGeometry:
    """
    Pixel rectangle of a tile inside the composite image.
    Offsets locate the tile's top-left corner in full-image pixel coordinates.
    """
    offset_x: int
    offset_y: int
    width: int
    height: int


@dataclass(frozen=True)
class Strip:
    """Row range [start_y, end_y) in tile-local coordinates."""
    index: int
    start_y: int
    end_y: int

    @property
    def rows(self) -> int:
        return max(0, self.end_y - self.start_y)

    @property
    def is_empty(self) -> bool:
        return self.rows == 0


@dataclass(frozen=True)
class ColorSettings:
    """
    Tunables for the smooth color mapper.
    Saturation is intentionally above 100; it is clamped during HSB conversion,
    which makes bright regions wash towards white more slowly.
    """
    saturation: float = 125.0
    hue_span: float = 1080.0
    ramp_fraction: float = 0.1
    hue_mode: HueMode = HueMode.LINEAR

    @classmethod
    def full_hue(cls) -> "ColorSettings":
        return cls(ramp_fraction=0.07, hue_mode=HueMode.SQRT)


# Recognized configuration keys -> (section, field)
_FIELD_ALIASES: Dict[str, tuple] = {
    "maxIter": ("params", "max_iter"),
    "max_iter": ("params", "max_iter"),
    "escapeRadiusSquared": ("params", "escape_radius_squared"),
    "escape_radius_squared": ("params", "escape_radius_squared"),
    "cenX": ("params", "center_x"),
    "center_x": ("params", "center_x"),
    "cenY": ("params", "center_y"),
    "center_y": ("params", "center_y"),
    "zoom": ("params", "zoom"),
    "fullWidth": ("params", "full_width"),
    "full_width": ("params", "full_width"),
    "fullHeight": ("params", "full_height"),
    "full_height": ("params", "full_height"),
    "offsetX": ("tile", "offset_x"),
    "offset_x": ("tile", "offset_x"),
    "offsetY": ("tile", "offset_y"),
    "offset_y": ("tile", "offset_y"),
    "width": ("tile", "width"),
    "height": ("tile", "height"),
    "workers": ("root", "workers"),
    "workerCount": ("root", "workers"),
}


@dataclass(frozen=True)
class TileRenderConfig:
    """
    Single configuration value for one tile render.
    Built once before scheduling and read-only afterwards.
    """
    params: RenderParameters
    tile: TileGeometry
    workers: int = field(default_factory=default_worker_count)
    color: ColorSettings = field(default_factory=ColorSettings)

    def __post_init__(self) -> None:
        validate_config(self)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any],
                     color: Optional[ColorSettings] = None) -> "TileRenderConfig":
        """
        Build a config from a flat mapping using either the camelCase field
        names (maxIter, fullWidth, offsetX, ...) or snake_case ones.
        `center` may be given as a mapping with `x`/`y` keys; a nested `tile`
        mapping is flattened the same way.
        """
        sections: Dict[str, Dict[str, Any]] = {"params": {}, "tile": {}, "root": {}}
        flat: Dict[str, Any] = dict(data)

        center = flat.pop("center", None)
        if center is not None:
            if not isinstance(center, Mapping):
                raise ConfigError(f"'center' must be a mapping with x/y, got {type(center).__name__}")
            if "x" in center:
                flat["center_x"] = center["x"]
            if "y" in center:
                flat["center_y"] = center["y"]
        tile = flat.pop("tile", None)
        if tile is not None:
            if not isinstance(tile, Mapping):
                raise ConfigError(f"'tile' must be a mapping, got {type(tile).__name__}")
            flat.update(tile)

        unknown = []
        for key, value in flat.items():
            alias = _FIELD_ALIASES.get(key)
            if alias is None:
                unknown.append(key)
                continue
            section, name = alias
            sections[section][name] = value
        if unknown:
            raise ConfigError(f"Unrecognized configuration field(s): {', '.join(sorted(unknown))}")

        missing = [k for k in ("offset_x", "offset_y", "width", "height") if k not in sections["tile"]]
        if missing:
            raise ConfigError(f"Tile geometry incomplete, missing: {', '.join(missing)}")

        params = RenderParameters(**sections["params"])
        geometry = TileGeometry(**sections["tile"])
        extra: Dict[str, Any] = {}
        if "workers" in sections["root"]:
            extra["workers"] = sections["root"]["workers"]
        if color is not None:
            extra["color"] = color
        return cls(params=params, tile=geometry, **extra)
