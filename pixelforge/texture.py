"""Image textures sampled by nearest texel or bilinear filtering."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

MY_PI = 3.1415926
TWO_PI = 2.0 * MY_PI


class Texture:
    """An RGB image addressed by texture coordinates with ``v`` pointing up."""

    def __init__(self, image: np.ndarray) -> None:
        data = np.asarray(image)
        if data.ndim != 3 or data.shape[2] != 3:
            raise ValueError("a texture needs an RGB image of shape (height, width, 3)")
        if data.shape[0] == 0 or data.shape[1] == 0:
            raise ValueError("a texture image must not be empty")
        self._image = data
        self.height, self.width = data.shape[:2]

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "Texture":
        """Load a texture from an image file."""
        with Image.open(path) as img:
            return cls(np.array(img.convert("RGB")))

    def _texel(self, column: int, row: int) -> np.ndarray:
        column = max(0, min(self.width - 1, column))
        row = max(0, min(self.height - 1, row))
        return self._image[row, column].astype(np.float64)

    def get_color(self, u: float, v: float) -> np.ndarray:
        """Colour of the texel nearest to ``(u, v)``, edges clamped."""
        return self._texel(int(u * self.width), int((1 - v) * self.height))

    def get_texel(self, u: int, v: int) -> np.ndarray:
        """Colour at integer column ``u`` and row ``v``, edges clamped."""
        return self._texel(int(u), int(v))

    def get_color_bilinear(self, u: float, v: float) -> np.ndarray:
        """Colour at ``(u, v)`` blended from the four surrounding texels."""
        u_img = u * (self.width - 1)
        v_img = (1 - v) * (self.height - 1)
        u0, u1 = math.floor(u_img), math.ceil(u_img)
        v0, v1 = math.floor(v_img), math.ceil(v_img)
        s = u_img - u0
        t = v_img - v0

        c00 = self.get_texel(u0, v0)
        c01 = self.get_texel(u1, v0)
        c10 = self.get_texel(u0, v1)
        c11 = self.get_texel(u1, v1)

        top = c00 + s * (c01 - c00)
        bottom = c10 + s * (c11 - c10)
        return top + t * (bottom - top)