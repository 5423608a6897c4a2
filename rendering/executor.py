from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from typing import Callable, List, Optional

import numpy as np

from fractals.base import Strip, TileGeometry, TileRenderConfig, default_worker_count
from fractals.mandelbrot import MandelbrotFractal
from rendering.events import StripEvent, TileEvent
from rendering.strips import plan_strips

logger = logging.getLogger(__name__)


class StripRenderError(RuntimeError):
    """A strip failed; the tile it belongs to is incomplete and must be re-rendered."""

    def __init__(self, strip: Strip, tile: TileGeometry, cause: BaseException):
        super().__init__(
            f"Strip {strip.index} (tile rows {strip.start_y}-{strip.end_y}) of tile "
            f"{tile.width}x{tile.height} at offset {tile.offset_x},{tile.offset_y} failed: {cause!r}")
        self.strip = strip
        self.tile = tile


def _run_strip(kernel: Callable, args: List, rgba: np.ndarray) -> np.ndarray:
    kernel(*args)
    return rgba


# ---- Async handle --------------------------------------------------------

class TileRenderHandle:
    """
    Tracks the strips of one tile render.

    Each strip reports through its future's done callback: its rows are copied
    into the tile buffer at the strip's offset and the completion counter is
    bumped. The tile is finished once the counter equals the number of
    dispatched (non-empty) strips and on_complete has returned, or as soon as
    any strip or callback fails.
    """

    def __init__(
        self,
        config: TileRenderConfig,
        strips: List[Strip],
        on_strip: Optional[Callable[[StripEvent], None]] = None,
        on_complete: Optional[Callable[[TileEvent], None]] = None,
    ) -> None:
        self.config = config
        self.tile = config.tile
        self.strips = strips
        self.dispatched = sum(1 for s in strips if not s.is_empty)
        self.completed = 0
        self.on_strip = on_strip
        self.on_complete = on_complete

        self._buffer = np.zeros((self.tile.height, self.tile.width, 4), dtype=np.uint8)
        self._lock = threading.Lock()
        self._finished = threading.Event()
        self._error: Optional[StripRenderError] = None
        self._callback_thread: Optional[int] = None
        self._t0 = time.perf_counter()

    def attach(self, strip: Strip, future: Future) -> None:
        future.add_done_callback(lambda fut: self._strip_done(strip, fut))

    def _strip_done(self, strip: Strip, fut: Future) -> None:
        if fut.cancelled():
            cause: Optional[BaseException] = CancelledError()
        else:
            cause = fut.exception()
        if cause is not None:
            self._fail(strip, cause)
            return

        part = fut.result()
        # Strip row ranges are disjoint, so the copy needs no lock.
        self._buffer[strip.start_y:strip.end_y] = part

        # on_strip calls are serialized; once the counter reaches dispatched,
        # every earlier on_strip has already returned.
        with self._lock:
            if self._error is not None:
                return
            self.completed += 1
            finished = self.completed == self.dispatched
            logger.debug("Strip %d/%d completed (tile rows %d-%d)",
                         self.completed, self.dispatched, strip.start_y, strip.end_y)
            if self.on_strip is not None:
                try:
                    self._invoke(self.on_strip,
                                 StripEvent(strip, part, self.completed, self.dispatched))
                except Exception as e:
                    self._callback_failed("on_strip", strip, e)
                    return
        if not finished:
            return

        elapsed = time.perf_counter() - self._t0
        logger.info("Render completed! Duration: %.3fs (tile %dx%d at %d,%d)",
                    elapsed, self.tile.width, self.tile.height,
                    self.tile.offset_x, self.tile.offset_y)
        if self.on_complete is not None:
            try:
                self._invoke(self.on_complete, TileEvent(self.tile, self._buffer, elapsed))
            except Exception as e:
                with self._lock:
                    self._callback_failed("on_complete", strip, e)
                return
        self._finished.set()

    def _invoke(self, callback: Callable, event) -> None:
        self._callback_thread = threading.get_ident()
        try:
            callback(event)
        finally:
            self._callback_thread = None

    def _record_error(self, strip: Strip, cause: BaseException) -> None:
        # Caller holds self._lock.
        if self._error is None:
            err = StripRenderError(strip, self.tile, cause)
            err.__cause__ = cause
            self._error = err
        self._finished.set()

    def _callback_failed(self, name: str, strip: Strip, cause: BaseException) -> None:
        logger.error("%s callback raised for strip %d (tile rows %d-%d)", name,
                     strip.index, strip.start_y, strip.end_y, exc_info=cause)
        self._record_error(strip, cause)

    def _fail(self, strip: Strip, cause: BaseException) -> None:
        logger.error("Strip %d failed (tile rows %d-%d)", strip.index,
                     strip.start_y, strip.end_y, exc_info=cause)
        with self._lock:
            self._record_error(strip, cause)

    # ---- Caller side ----------------------------------------------------

    def done(self) -> bool:
        return self._finished.is_set()

    @property
    def failed(self) -> bool:
        return self._error is not None

    def wait(self, timeout: Optional[float] = None) -> np.ndarray:
        """
        Blocks until every dispatched strip reported and on_complete returned,
        then returns the tile buffer (H, W, 4) uint8. Raises StripRenderError
        if a strip or a callback failed.

        Callbacks must not wait on their own tile; doing so raises RuntimeError.
        """
        if (self._callback_thread == threading.get_ident()
                and not self._finished.is_set()):
            raise RuntimeError("wait() called from a callback of the tile it waits on")
        if not self._finished.wait(timeout):
            raise TimeoutError(
                f"Tile not finished after {timeout}s ({self.completed}/{self.dispatched} strips)")
        if self._error is not None:
            raise self._error
        return self._buffer

    @property
    def result(self) -> np.ndarray:
        return self.wait()


# ---- Executor -----------------------------------------------------------

class StripExecutor:
    """
    Fixed-size pool of strip workers. Each strip is an independent kernel call
    on its own row range; the numba kernels release the GIL so strips run in
    parallel on separate threads.
    """

    def __init__(self, workers: Optional[int] = None,
                 fractal: Optional[MandelbrotFractal] = None) -> None:
        self.workers = int(workers) if workers is not None else default_worker_count()
        if self.workers < 1:
            raise ValueError(f"StripExecutor needs at least one worker, got {self.workers}")
        self.fractal = fractal or MandelbrotFractal()
        self._pool = ThreadPoolExecutor(max_workers=self.workers,
                                        thread_name_prefix="strip-worker")

    def submit(
        self,
        config: TileRenderConfig,
        on_strip: Optional[Callable[[StripEvent], None]] = None,
        on_complete: Optional[Callable[[TileEvent], None]] = None,
    ) -> TileRenderHandle:
        """
        Dispatches every non-empty strip of the tile and returns at once.
        """
        tile = config.tile
        strips = plan_strips(tile.height, config.workers)
        meta = self.fractal.get_kernel()
        scalars = self.fractal.build_arg_values(config)

        handle = TileRenderHandle(config, strips, on_strip=on_strip, on_complete=on_complete)
        logger.info("Rendering tile size=%dx%d, offset=%d,%d in %d strips",
                    tile.width, tile.height, tile.offset_x, tile.offset_y, handle.dispatched)

        for strip in strips:
            if strip.is_empty:
                logger.debug("Strip %d has no rows, skipped", strip.index)
                continue
            args, rgba = self.fractal.strip_args(meta, scalars, strip, tile.width)
            fut = self._pool.submit(_run_strip, meta["func"], args, rgba)
            handle.attach(strip, fut)
        return handle

    def close(self) -> None:
        self._pool.shutdown(wait=True)

    def __enter__(self) -> "StripExecutor":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
