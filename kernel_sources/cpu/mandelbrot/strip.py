from numba import njit

from coloring.smooth_escape import shade_pixel
from kernel_sources.cpu.mandelbrot.coords import map_axis, pixel_scales
from kernel_sources.cpu.mandelbrot.iter import escape_time
from kernel_sources.registry import register_kernel


ARG_SCALARS = [
    "offset_x", "offset_y", "full_width", "full_height", "aspect_ratio",
    "zoom", "center_x", "center_y", "max_iter", "escape_radius_squared",
    "saturation", "hue_span", "ramp_fraction", "hue_mode",
]
ARG_INT_SCALARS = {"offset_x", "offset_y", "full_width", "full_height",
                   "max_iter", "hue_mode"}
ARG_BUFFERS_OUT = ["rgba"]

ARG_ORDER = ["start_y", "end_y"] + ARG_SCALARS + ARG_BUFFERS_OUT


# No fastmath: a shared pixel must map to the same c in every tile.
@njit(cache=True, nogil=True)
def _mandelbrot_strip(start_y, end_y,
                      offset_x, offset_y, full_width, full_height, aspect_ratio,
                      zoom, center_x, center_y, max_iter, escape_radius_squared,
                      saturation, hue_span, ramp_fraction, hue_mode,
                      rgba):
    W = rgba.shape[1]
    x_scale, y_scale = pixel_scales(zoom, aspect_ratio, full_width, full_height)
    for y in range(start_y, end_y):
        row = y - start_y
        cy = map_axis(offset_y + y, full_height, y_scale, center_y)
        for x in range(W):
            cx = map_axis(offset_x + x, full_width, x_scale, center_x)
            n, mag2 = escape_time(cx, cy, max_iter, escape_radius_squared)
            r, g, b, a = shade_pixel(n, mag2, max_iter, saturation, hue_span,
                                     ramp_fraction, hue_mode)
            rgba[row, x, 0] = r
            rgba[row, x, 1] = g
            rgba[row, x, 2] = b
            rgba[row, x, 3] = a

register_kernel(
    fractal="mandelbrot",
    op_name="strip",
    backend="CPU",
    precision="f64",
    func=_mandelbrot_strip,
    arg_order=ARG_ORDER,
    scalars=ARG_SCALARS,
    int_scalars=sorted(ARG_INT_SCALARS),
    produces=ARG_BUFFERS_OUT,
)
