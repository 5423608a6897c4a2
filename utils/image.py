from __future__ import annotations

import os
from typing import Union

import numpy as np
from PIL import Image


def to_image(rgba: np.ndarray) -> Image.Image:
    if rgba.ndim != 3 or rgba.shape[2] != 4 or rgba.dtype != np.uint8:
        raise ValueError(f"Expected an (H, W, 4) uint8 RGBA buffer, got {rgba.shape} {rgba.dtype}")
    return Image.fromarray(np.ascontiguousarray(rgba))


def save_tile(rgba: np.ndarray, path: Union[str, os.PathLike]) -> str:
    """
    Encodes a tile buffer as an 8-bit RGBA PNG. Returns the written path.
    """
    path = os.fspath(path)
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    to_image(rgba).save(path, "PNG")
    return path
