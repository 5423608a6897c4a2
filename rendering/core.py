from __future__ import annotations
import numpy as np
from typing import Callable, Optional

from fractals.base import Strip, TileRenderConfig
from fractals.mandelbrot import MandelbrotFractal
from rendering.events import StripEvent, TileEvent
from rendering.executor import StripExecutor, TileRenderHandle


class TileRenderer:

    """
    Facade that binds together:
      - the tile render configuration,
      - the fractal (kernel binding),
      - the strip executor
    """

    def __init__(
        self,
        config: TileRenderConfig,
        *,
        executor: Optional[StripExecutor] = None,
        fractal: Optional[MandelbrotFractal] = None,
    ):
        self.config = config
        self.fractal = fractal or MandelbrotFractal()

        # Execution & resource ownership
        self._owns_executor = executor is None
        self.executor = executor or StripExecutor(config.workers, fractal=self.fractal)

    def close(self) -> None:
        if self._owns_executor:
            self.executor.close()

    def __enter__(self) -> "TileRenderer":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ----------------------------
    # Render entry points
    # ----------------------------

    def render_async(
        self,
        on_strip: Optional[Callable[[StripEvent], None]] = None,
        on_complete: Optional[Callable[[TileEvent], None]] = None,
    ) -> TileRenderHandle:
        return self.executor.submit(self.config, on_strip=on_strip, on_complete=on_complete)

    def render(self) -> np.ndarray:
        """Blocking render of the whole tile; (H, W, 4) uint8 RGBA."""
        return self.render_async().wait()


def render_tile(config: TileRenderConfig) -> np.ndarray:
    with TileRenderer(config) as renderer:
        return renderer.render()


def render_tile_serial(config: TileRenderConfig,
                       fractal: Optional[MandelbrotFractal] = None) -> np.ndarray:
    """
    Single-threaded render of the whole tile as one strip, on the calling thread.
    """
    fractal = fractal or MandelbrotFractal()
    meta = fractal.get_kernel()
    strip = Strip(index=0, start_y=0, end_y=config.tile.height)
    args, rgba = fractal.strip_args(meta, fractal.build_arg_values(config),
                                    strip, config.tile.width)
    meta["func"](*args)
    return rgba
