import math

from numba import njit


@njit(cache=True, nogil=True)
def _to_byte(c):
    # round half up
    return int(math.floor(c * 255.0 + 0.5))


@njit(cache=True, nogil=True)
def hsb_to_rgb(h, s, v):
    """
    HSB (0..360, 0..100, 0..100) to RGB (0..255).
    Saturation and brightness are clamped into range first, so over-driven
    inputs (e.g. saturation 125) are accepted.
    """
    h = h % 360.0
    s = max(0.0, min(100.0, s)) / 100.0
    v = max(0.0, min(100.0, v)) / 100.0

    i = int(math.floor(h / 60.0))
    f = h / 60.0 - i
    p = v * (1.0 - s)
    q = v * (1.0 - s * f)
    t = v * (1.0 - s * (1.0 - f))

    sector = i % 6
    if sector == 0:
        r, g, b = v, t, p
    elif sector == 1:
        r, g, b = q, v, p
    elif sector == 2:
        r, g, b = p, v, t
    elif sector == 3:
        r, g, b = p, q, v
    elif sector == 4:
        r, g, b = t, p, v
    else:
        r, g, b = v, p, q

    return _to_byte(r), _to_byte(g), _to_byte(b)
