from numba import njit


@njit(cache=True, nogil=True)
def pixel_scales(zoom, aspect_ratio, full_width, full_height):
    """
    Complex-plane size of one pixel along x and y. Depends only on the full
    image, never on the tile, so every tile shares the same grid.
    """
    x_scale = (zoom * 2.0 * aspect_ratio) / full_width
    y_scale = (zoom * 2.0) / full_height
    return x_scale, y_scale


@njit(cache=True, nogil=True)
def map_axis(global_pos, full_size, scale, center):
    return (global_pos - full_size / 2.0) * scale + center


@njit(cache=True, nogil=True)
def map_pixel(global_x, global_y, full_width, full_height, aspect_ratio, zoom,
              center_x, center_y):
    x_scale, y_scale = pixel_scales(zoom, aspect_ratio, full_width, full_height)
    cx = map_axis(global_x, full_width, x_scale, center_x)
    cy = map_axis(global_y, full_height, y_scale, center_y)
    return cx, cy
