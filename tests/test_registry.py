import pytest

from fractals.base import RenderParameters, Strip, TileGeometry, TileRenderConfig
from fractals.mandelbrot import MandelbrotFractal
from kernel_sources import list_kernels, load_kernel, register_kernel


def test_strip_kernel_registered_for_cpu():
    assert "strip" in list_kernels("mandelbrot", "cpu", "f64")
    meta = load_kernel("CPU", "mandelbrot", "strip", "f64")
    assert callable(meta["func"])
    assert meta["arg_order"][:2] == ["start_y", "end_y"]
    assert meta["arg_order"][-1] == "rgba"


def test_unknown_kernel_raises_key_error():
    with pytest.raises(KeyError, match="precision='f32'"):
        load_kernel("CPU", "mandelbrot", "strip", "f32")
    assert list_kernels("julia", "CPU", "f64") == []


def test_register_kernel_requires_func_and_arg_order():
    with pytest.raises(KeyError):
        register_kernel("mandelbrot", "broken", "CPU", "f64", arg_order=[])
    with pytest.raises(KeyError):
        register_kernel("mandelbrot", "broken", "CPU", "f64", func=lambda: None)


def test_fractal_binds_every_scalar():
    fractal = MandelbrotFractal()
    meta = fractal.get_kernel()
    cfg = TileRenderConfig(params=RenderParameters(full_width=40, full_height=20),
                           tile=TileGeometry(10, 5, 20, 10), workers=2)
    args, rgba = fractal.strip_args(meta, fractal.build_arg_values(cfg), Strip(1, 5, 10), 20)
    assert len(args) == len(meta["arg_order"])
    assert rgba.shape == (5, 20, 4)
    named = dict(zip(meta["arg_order"], args))
    assert named["offset_x"] == 10 and isinstance(named["offset_x"], int)
    assert named["zoom"] == 1.0 and isinstance(named["zoom"], float)
    assert named["aspect_ratio"] == 2.0
    assert named["rgba"] is rgba
