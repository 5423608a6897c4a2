import os

import numpy as np
import pytest
from PIL import Image

import main
from fractals.base import RenderParameters, TileGeometry, TileRenderConfig
from rendering.core import render_tile_serial
from utils.image import save_tile, to_image

ARGS = ["--full-size", "24x17", "--grid", "2x3", "--max-iter", "80",
        "--center-x", "-0.5", "--zoom", "1.3", "--workers", "3"]


def test_parse_helpers():
    assert main.parse_size("56000x32000") == (56000, 32000)
    assert main.parse_grid(" 4X4 ") == (4, 4)
    assert main.parse_cell("3,1") == (3, 1)


def test_cli_renders_every_tile_and_mosaic_aligns(tmp_path):
    assert main.main(ARGS + ["--all", "--out", str(tmp_path)]) == 0

    names = sorted(os.listdir(tmp_path))
    assert names == sorted(f"mandelbrot_r{r}_c{c}.png" for r in range(2) for c in range(3))

    params = RenderParameters(max_iter=80, center_x=-0.5, zoom=1.3, full_width=24, full_height=17)
    full = render_tile_serial(TileRenderConfig(params=params, tile=TileGeometry(0, 0, 24, 17), workers=1))

    mosaic = np.zeros_like(full)
    y = 0
    for r in range(2):
        x = 0
        for c in range(3):
            with Image.open(tmp_path / f"mandelbrot_r{r}_c{c}.png") as img:
                assert img.mode == "RGBA"
                part = np.asarray(img)
            h, w = part.shape[:2]
            mosaic[y:y + h, x:x + w] = part
            x += w
        assert x == 24
        y += h
    assert y == 17
    assert np.array_equal(mosaic, full)


def test_cli_single_tile_last_cell_gets_remainder(tmp_path):
    assert main.main(ARGS + ["--tile", "1,2", "--hue-mode", "sqrt", "--out", str(tmp_path)]) == 0
    with Image.open(tmp_path / "mandelbrot_r1_c2.png") as img:
        assert img.size == (8, 9)


@pytest.mark.parametrize("extra", [
    ["--grid", "0x2"],
    ["--tile", "5,0"],
    ["--zoom", "0"],
    ["--max-iter", "0"],
    ["--workers", "0"],
])
def test_cli_invalid_config_exit_code(tmp_path, extra):
    assert main.main(ARGS + extra + ["--out", str(tmp_path)]) == 2
    assert os.listdir(tmp_path) == []


def test_save_tile_creates_directories(tmp_path):
    rgba = np.zeros((3, 5, 4), dtype=np.uint8)
    rgba[..., 0] = 200
    rgba[..., 3] = 255
    path = save_tile(rgba, tmp_path / "a" / "b" / "tile.png")
    with Image.open(path) as img:
        assert img.size == (5, 3)
        assert np.array_equal(np.asarray(img), rgba)


def test_to_image_rejects_non_rgba():
    with pytest.raises(ValueError):
        to_image(np.zeros((3, 5, 3), dtype=np.uint8))
