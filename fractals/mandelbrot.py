from dataclasses import dataclass
from typing import Dict, Any, List, Tuple

import numpy as np

from fractals.base import Strip, TileRenderConfig
from kernel_sources.registry import load_kernel
import kernel_sources.cpu.mandelbrot  # noqa: F401  (registers the CPU kernels)


@dataclass
class MandelbrotFractal:
    """
    Binds a tile render configuration to the registered strip kernel.
    """
    name: str = "mandelbrot"
    backend: str = "CPU"
    precision: str = "f64"

    def get_kernel(self) -> Dict[str, Any]:
        return load_kernel(self.backend, self.name, "strip", self.precision)

    def build_arg_values(self, config: TileRenderConfig) -> Dict[str, Any]:
        params, tile, color = config.params, config.tile, config.color
        return {
            "offset_x": tile.offset_x,
            "offset_y": tile.offset_y,
            "full_width": params.full_width,
            "full_height": params.full_height,
            "aspect_ratio": params.aspect_ratio,
            "zoom": params.zoom,
            "center_x": params.center_x,
            "center_y": params.center_y,
            "max_iter": params.max_iter,
            "escape_radius_squared": params.escape_radius_squared,
            "saturation": color.saturation,
            "hue_span": color.hue_span,
            "ramp_fraction": color.ramp_fraction,
            "hue_mode": int(color.hue_mode),
        }

    def strip_args(self, meta: Dict[str, Any], scalars: Dict[str, Any],
                   strip: Strip, width: int) -> Tuple[List[Any], np.ndarray]:
        """
        Ordered kernel arguments for one strip, with a fresh RGBA buffer
        covering just the strip's rows.
        """
        ints = set(meta["int_scalars"])
        arg_map: Dict[str, Any] = {
            "start_y": int(strip.start_y),
            "end_y": int(strip.end_y),
            "rgba": np.zeros((strip.rows, width, 4), dtype=np.uint8),
        }
        # Fixed Python types keep numba on a single compiled signature.
        for name in meta["scalars"]:
            val = scalars[name]
            arg_map[name] = int(val) if name in ints else float(val)
        ordered = [arg_map[name] for name in meta["arg_order"]]
        return ordered, arg_map[meta["produces"][0]]
