from numba import njit


@njit(cache=True, nogil=True)
def escape_time(cx, cy, max_iter, escape_radius_squared):
    """
    Iterates z <- z^2 + c from z = 0, keeping zx^2 and zy^2 around so each
    step costs three multiplications.
    Returns (iterations, |z|^2). iterations == max_iter means c never escaped.
    """
    zx = 0.0
    zy = 0.0
    zx2 = 0.0
    zy2 = 0.0
    n = 0
    while zx2 + zy2 < escape_radius_squared and n < max_iter:
        zy = 2.0 * zx * zy + cy
        zx = zx2 - zy2 + cx
        zx2 = zx * zx
        zy2 = zy * zy
        n += 1
    return n, zx2 + zy2
