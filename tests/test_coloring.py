import math

import numpy as np
import pytest

from coloring.hsb import hsb_to_rgb
from coloring.smooth_escape import shade_pixel, smooth_hsb, smooth_iteration
from kernel_sources.cpu.mandelbrot import escape_time


@pytest.mark.parametrize("h, expected", [
    (0.0, (255, 0, 0)),
    (60.0, (255, 255, 0)),
    (120.0, (0, 255, 0)),
    (180.0, (0, 255, 255)),
    (240.0, (0, 0, 255)),
    (300.0, (255, 0, 255)),
    (360.0, (255, 0, 0)),
    (-120.0, (0, 0, 255)),
])
def test_hsb_primary_sectors(h, expected):
    assert hsb_to_rgb(h, 100.0, 100.0) == expected


def test_hsb_clamps_over_driven_saturation():
    for h in (15.0, 95.0, 200.0, 333.0):
        assert hsb_to_rgb(h, 125.0, 80.0) == hsb_to_rgb(h, 100.0, 80.0)


def test_hsb_clamps_brightness():
    assert hsb_to_rgb(30.0, 100.0, -5.0) == (0, 0, 0)
    assert hsb_to_rgb(30.0, 100.0, 250.0) == hsb_to_rgb(30.0, 100.0, 100.0)


def test_hsb_grey_rounds_half_up():
    assert hsb_to_rgb(77.0, 0.0, 50.0) == (128, 128, 128)


def test_smooth_iteration_floors_tiny_magnitude():
    # log(log(1e-10)) is undefined; the floor keeps the call from raising
    value = smooth_iteration(3, 0.0)
    assert isinstance(value, float)


def test_smooth_iteration_at_escape_radius():
    # |z| == 2 -> log2(log2(2)) == 0
    assert smooth_iteration(7, 2.0) == pytest.approx(8.0)
    # |z| == 4 -> nu == 1
    assert smooth_iteration(7, 4.0) == pytest.approx(7.0)


def test_brightness_ramp_and_taper():
    max_iter = 1000
    # early escape: dark ramp
    _, _, dark = smooth_hsb(5, 2.0, max_iter, 125.0, 1080.0, 0.1, 0)
    assert dark == pytest.approx(6.0 / max_iter * 1000.0)
    # mid range: 30 + 70 t
    _, _, mid = smooth_hsb(499, 2.0, max_iter, 125.0, 1080.0, 0.1, 0)
    assert mid == pytest.approx(30.0 + 0.5 * 70.0)
    # near the cap brightness tapers towards zero
    _, _, late = smooth_hsb(990, 2.0, max_iter, 125.0, 1080.0, 0.1, 0)
    untapered = min(100.0, 30.0 + 991.0 / max_iter * 70.0)
    assert late == pytest.approx(untapered * (max_iter - 990) / (max_iter * 0.1))
    assert late < mid


def test_hue_modes():
    hue, sat, _ = smooth_hsb(99, 2.0, 1000, 125.0, 1080.0, 0.1, 0)
    assert hue == pytest.approx((100.0 / 1000.0 * 1080.0) % 360.0)
    assert sat == 125.0
    hue_sqrt, _, _ = smooth_hsb(99, 2.0, 1000, 125.0, 1080.0, 0.07, 1)
    assert hue_sqrt == pytest.approx((math.sqrt(100.0) * 1080.0) % 360.0)


def test_shade_pixel_is_opaque():
    for n in (1, 10, 50, 99):
        assert shade_pixel(n, 5.0, 100, 125.0, 1080.0, 0.1, 0)[3] == 255


def test_smooth_count_is_continuous_across_iteration_bands():
    # The set ends near Re(c) = 0.47, so every sample at Re(c) = 0.5 escapes;
    # walking along Im(c) past the cardioid crosses several iteration bands.
    cx = 0.5
    counts, smooth = [], []
    for cy in np.linspace(0.0, 0.6, 6001):
        n, mag2 = escape_time(cx, float(cy), 10000, 4.0)
        assert n < 10000
        counts.append(n)
        smooth.append(smooth_iteration(n, math.sqrt(mag2)))

    counts = np.array(counts)
    smooth = np.array(smooth)
    band_edges = np.nonzero(np.diff(counts) != 0)[0]
    assert len(band_edges) >= 2

    jumps = np.abs(np.diff(smooth))
    assert jumps[band_edges].max() < 1.0
    assert jumps.max() < 1.0
