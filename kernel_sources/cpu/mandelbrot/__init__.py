# Importing the strip kernel registers it.
from kernel_sources.cpu.mandelbrot import strip  # noqa: F401
from kernel_sources.cpu.mandelbrot.coords import map_pixel, pixel_scales
from kernel_sources.cpu.mandelbrot.iter import escape_time

__all__ = ["escape_time", "map_pixel", "pixel_scales"]
