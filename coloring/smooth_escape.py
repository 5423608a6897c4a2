import math

from numba import njit

from coloring.hsb import hsb_to_rgb

MIN_MAGNITUDE = 1e-10
LN2 = math.log(2.0)

# Brightness fades to zero over the last tenth of the iteration range.
TAPER_START = 0.9
TAPER_WIDTH = 0.1


@njit(cache=True, nogil=True)
def smooth_iteration(n, zn):
    """
    Continuous iteration count for an escaped point: n + 1 - log2(log2|z|).
    """
    safe_zn = max(zn, MIN_MAGNITUDE)
    nu = math.log(math.log(safe_zn) / LN2) / LN2
    return n + 1.0 - nu


@njit(cache=True, nogil=True)
def smooth_hsb(n, zn, max_iter, saturation, hue_span, ramp_fraction, hue_mode):
    smooth = smooth_iteration(n, zn)
    t = smooth / max_iter

    if hue_mode == 1:
        hue = (math.sqrt(smooth) * hue_span) % 360.0
    else:
        hue = (t * hue_span) % 360.0

    if smooth < max_iter * ramp_fraction:
        brightness = min(100.0, t * 1000.0)
    else:
        brightness = min(100.0, 30.0 + t * 70.0)

    if n > max_iter * TAPER_START:
        brightness *= (max_iter - n) / (max_iter * TAPER_WIDTH)

    return hue, saturation, brightness


@njit(cache=True, nogil=True)
def shade_pixel(n, mag2, max_iter, saturation, hue_span, ramp_fraction, hue_mode):
    """
    RGBA for one escape result. Points that never escaped are opaque black.
    """
    if n >= max_iter:
        return 0, 0, 0, 255
    hue, sat, bright = smooth_hsb(n, math.sqrt(mag2), max_iter,
                                  saturation, hue_span, ramp_fraction, hue_mode)
    r, g, b = hsb_to_rgb(hue, sat, bright)
    return r, g, b, 255
