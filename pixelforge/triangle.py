"""Triangles with per-vertex attributes and the payloads handed to shaders."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

import numpy as np

from .texture import Texture


def _vector(values, size: int) -> np.ndarray:
    arr = np.array(values, dtype=np.float64)
    if arr.shape != (size,):
        raise ValueError(f"expected a vector of {size} components, got shape {arr.shape}")
    return arr


class Triangle:
    """A triangle given by three homogeneous vertices, counter clockwise.

    Each vertex carries a colour, a texture coordinate and a normal.
    """

    def __init__(self) -> None:
        self.v = [np.array([0.0, 0.0, 0.0, 1.0]) for _ in range(3)]
        self.color = [np.zeros(3) for _ in range(3)]
        self.tex_coords = [np.zeros(2) for _ in range(3)]
        self.normal = [np.zeros(3) for _ in range(3)]
        self.tex: Optional[Texture] = None

    def set_vertex(self, ind: int, ver) -> None:
        """Set the homogeneous coordinates of vertex ``ind``."""
        self.v[ind] = _vector(ver, 4)

    def set_normal(self, ind: int, n) -> None:
        """Set the normal of vertex ``ind``."""
        self.normal[ind] = _vector(n, 3)

    def set_color(self, ind: int, r: float, g: float, b: float) -> None:
        """Set the colour of vertex ``ind`` from 0-255 channels, stored in [0, 1]."""
        if any(channel < 0.0 or channel > 255.0 for channel in (r, g, b)):
            raise ValueError("invalid color values")
        self.color[ind] = np.array([r, g, b], dtype=np.float64) / 255.0

    def set_tex_coord(self, ind: int, uv) -> None:
        """Set the texture coordinate of vertex ``ind``."""
        self.tex_coords[ind] = _vector(uv, 2)

    def set_normals(self, normals: Sequence) -> None:
        """Set all three normals at once."""
        if len(normals) != 3:
            raise ValueError("a triangle needs exactly three normals")
        for ind, n in enumerate(normals):
            self.set_normal(ind, n)

    def set_colors(self, colors: Sequence) -> None:
        """Set all three colours at once from 0-255 channels."""
        if len(colors) != 3:
            raise ValueError("a triangle needs exactly three colors")
        for ind, (r, g, b) in enumerate(colors):
            self.set_color(ind, r, g, b)

    def to_vector4(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """The three vertices with their ``w`` component forced to 1."""
        return tuple(np.array([vec[0], vec[1], vec[2], 1.0]) for vec in self.v)


@dataclass
class FragmentShaderPayload:
    """Interpolated attributes of one fragment, passed to a fragment shader."""

    color: np.ndarray = field(default_factory=lambda: np.zeros(3))
    normal: np.ndarray = field(default_factory=lambda: np.zeros(3))
    tex_coords: np.ndarray = field(default_factory=lambda: np.zeros(2))
    diffuse_texture: Optional[Texture] = None
    bump_texture: Optional[Texture] = None
    displacement_texture: Optional[Texture] = None
    view_pos: np.ndarray = field(default_factory=lambda: np.zeros(3))


@dataclass
class VertexShaderPayload:
    """The position handed to a vertex shader."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))