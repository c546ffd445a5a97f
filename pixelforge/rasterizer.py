"""A software rasterizer with a depth buffer and pluggable shaders."""

from __future__ import annotations

import math
from enum import Enum, Flag
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from .texture import Texture
from .triangle import FragmentShaderPayload, Triangle, VertexShaderPayload

FragmentShader = Callable[[FragmentShaderPayload], np.ndarray]
VertexShader = Callable[[VertexShaderPayload], np.ndarray]

_Z_NEAR = 0.1
_Z_FAR = 50.0
_LINE_COLOR = np.array([255.0, 255.0, 255.0])
_TRIANGLE_COLOR = (148.0, 121.0, 92.0)


class Buffers(Flag):
    """Which buffers :meth:`Rasterizer.clear` resets."""

    COLOR = 1
    DEPTH = 2


class Primitive(Enum):
    """Kinds of primitive the rasterizer knows."""

    LINE = 0
    TRIANGLE = 1


def inside_triangle(x: float, y: float, v: Sequence) -> bool:
    """Whether the point ``(x, y)`` lies strictly inside the 2D triangle ``v``."""
    p0, p1, p2 = (np.array([vert[0], vert[1], 1.0]) for vert in v)
    f0 = np.cross(p1, p0)
    f1 = np.cross(p2, p1)
    f2 = np.cross(p0, p2)
    p = np.array([x, y, 1.0])
    return bool(
        np.dot(p, f0) * np.dot(f0, p2) > 0
        and np.dot(p, f1) * np.dot(f1, p0) > 0
        and np.dot(p, f2) * np.dot(f2, p1) > 0
    )


def compute_barycentric_2d(x: float, y: float, v: Sequence) -> Tuple[float, float, float]:
    """Barycentric coordinates of ``(x, y)`` with respect to the 2D triangle ``v``."""
    (x0, y0), (x1, y1), (x2, y2) = ((vert[0], vert[1]) for vert in v)
    c1 = (x * (y1 - y2) + (x2 - x1) * y + x1 * y2 - x2 * y1) / (
        x0 * (y1 - y2) + (x2 - x1) * y0 + x1 * y2 - x2 * y1
    )
    c2 = (x * (y2 - y0) + (x0 - x2) * y + x2 * y0 - x0 * y2) / (
        x1 * (y2 - y0) + (x0 - x2) * y1 + x2 * y0 - x0 * y2
    )
    c3 = (x * (y0 - y1) + (x1 - x0) * y + x0 * y1 - x1 * y0) / (
        x2 * (y0 - y1) + (x1 - x0) * y2 + x0 * y1 - x1 * y0
    )
    return float(c1), float(c2), float(c3)


def _clone(t: Triangle) -> Triangle:
    copy = Triangle()
    copy.v = [vec.copy() for vec in t.v]
    copy.color = [vec.copy() for vec in t.color]
    copy.tex_coords = [vec.copy() for vec in t.tex_coords]
    copy.normal = [vec.copy() for vec in t.normal]
    copy.tex = t.tex
    return copy


class Rasterizer:
    """Draws triangles into a colour buffer, with screen ``y`` pointing up."""

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("width and height must be positive")
        self.width = width
        self.height = height
        self.model = np.eye(4)
        self.view = np.eye(4)
        self.projection = np.eye(4)
        self.frame_buffer = np.zeros((width * height, 3))
        self.depth_buffer = np.zeros(width * height)
        self.diffuse_texture: Optional[Texture] = None
        self.bump_texture: Optional[Texture] = None
        self.displacement_texture: Optional[Texture] = None
        self.vertex_shader: Optional[VertexShader] = None
        self.fragment_shader: Optional[FragmentShader] = None
        self.normal_id = -1
        self._pos_buf: Dict[int, List[np.ndarray]] = {}
        self._ind_buf: Dict[int, List[np.ndarray]] = {}
        self._col_buf: Dict[int, List[np.ndarray]] = {}
        self._nor_buf: Dict[int, List[np.ndarray]] = {}
        self._next_id = 0

    def _new_id(self) -> int:
        ident = self._next_id
        self._next_id += 1
        return ident

    def load_positions(self, positions: Sequence) -> int:
        """Store a list of positions and return its buffer id."""
        ident = self._new_id()
        self._pos_buf[ident] = [np.asarray(p, dtype=np.float64) for p in positions]
        return ident

    def load_indices(self, indices: Sequence) -> int:
        """Store a list of index triples and return its buffer id."""
        ident = self._new_id()
        self._ind_buf[ident] = [np.asarray(i, dtype=np.int64) for i in indices]
        return ident

    def load_colors(self, colors: Sequence) -> int:
        """Store a list of colours and return its buffer id."""
        ident = self._new_id()
        self._col_buf[ident] = [np.asarray(c, dtype=np.float64) for c in colors]
        return ident

    def load_normals(self, normals: Sequence) -> int:
        """Store a list of normals, remember it as the active one and return its id."""
        ident = self._new_id()
        self._nor_buf[ident] = [np.asarray(n, dtype=np.float64) for n in normals]
        self.normal_id = ident
        return ident

    def _index(self, x: int, y: int) -> Optional[int]:
        if 0 <= x < self.width and 1 <= y <= self.height:
            return (self.height - y) * self.width + x
        return None

    def set_pixel(self, point: Sequence[int], color) -> None:
        """Write ``color`` at pixel ``(x, y)``; valid rows run from 1 to ``height``."""
        x, y = int(point[0]), int(point[1])
        ind = self._index(x, y)
        if ind is None:
            raise IndexError(f"pixel {(x, y)} is outside the frame buffer")
        self.frame_buffer[ind] = np.asarray(color, dtype=np.float64)

    def clear(self, buff: Buffers) -> None:
        """Reset the colour buffer to black and/or the depth buffer to infinity."""
        if buff & Buffers.COLOR:
            self.frame_buffer.fill(0.0)
        if buff & Buffers.DEPTH:
            self.depth_buffer.fill(math.inf)

    def draw_line(self, begin: Sequence[float], end: Sequence[float]) -> None:
        """Draw a white line between two screen points with Bresenham's algorithm."""
        x1, y1 = begin[0], begin[1]
        x2, y2 = end[0], end[1]
        dx = int(x2 - x1)
        dy = int(y2 - y1)
        dx1 = abs(dx)
        dy1 = abs(dy)
        px = 2 * dy1 - dx1
        py = 2 * dx1 - dy1
        same_sign = (dx < 0 and dy < 0) or (dx > 0 and dy > 0)

        if dy1 <= dx1:
            if dx >= 0:
                x, y, xe = int(x1), int(y1), int(x2)
            else:
                x, y, xe = int(x2), int(y2), int(x1)
            self.set_pixel((x, y), _LINE_COLOR)
            while x < xe:
                x += 1
                if px < 0:
                    px += 2 * dy1
                else:
                    y += 1 if same_sign else -1
                    px += 2 * (dy1 - dx1)
                self.set_pixel((x, y), _LINE_COLOR)
        else:
            if dy >= 0:
                x, y, ye = int(x1), int(y1), int(y2)
            else:
                x, y, ye = int(x2), int(y2), int(y1)
            self.set_pixel((x, y), _LINE_COLOR)
            while y < ye:
                y += 1
                if py <= 0:
                    py += 2 * dx1
                else:
                    x += 1 if same_sign else -1
                    py += 2 * (dx1 - dy1)
                self.set_pixel((x, y), _LINE_COLOR)

    def draw(self, triangles: Sequence[Triangle]) -> None:
        """Transform, shade and rasterize every triangle into the buffers."""
        if self.fragment_shader is None:
            raise RuntimeError("no fragment shader has been set")
        f1 = (_Z_FAR - _Z_NEAR) / 2.0
        f2 = (_Z_FAR + _Z_NEAR) / 2.0

        model_view = self.view @ self.model
        mvp = self.projection @ model_view
        inv_trans = np.linalg.inv(model_view).T

        for t in triangles:
            new_tri = _clone(t)
            viewspace_pos = [(model_view @ vert)[:3] for vert in t.v]

            for i, vert in enumerate(t.v):
                clip = mvp @ vert
                w = clip[3]
                screen = np.array([
                    0.5 * self.width * (clip[0] / w + 1.0),
                    0.5 * self.height * (clip[1] / w + 1.0),
                    clip[2] / w * f1 + f2,
                    w,
                ])
                new_tri.set_vertex(i, screen)

            for i, n in enumerate(t.normal):
                new_tri.set_normal(i, (inv_trans @ np.append(n, 0.0))[:3])

            for i in range(3):
                new_tri.set_color(i, *_TRIANGLE_COLOR)

            self._rasterize_triangle(new_tri, viewspace_pos)

    def _rasterize_triangle(self, t: Triangle, view_pos: Sequence[np.ndarray]) -> None:
        v = t.to_vector4()
        x_min = math.floor(min(vert[0] for vert in v))
        y_min = math.floor(min(vert[1] for vert in v))
        x_max = math.ceil(max(vert[0] for vert in v))
        y_max = math.ceil(max(vert[1] for vert in v))

        for x in range(x_min, x_max):
            for y in range(y_min, y_max):
                ind = self._index(x, y)
                if ind is None or not inside_triangle(x + 0.5, y + 0.5, t.v):
                    continue
                alpha, beta, gamma = compute_barycentric_2d(x + 0.5, y + 0.5, t.v)
                z = 1.0 / (alpha / v[0][3] + beta / v[1][3] + gamma / v[2][3])
                zp = (
                    alpha * v[0][2] / v[0][3]
                    + beta * v[1][2] / v[1][3]
                    + gamma * v[2][2] / v[2][3]
                ) * z

                payload = FragmentShaderPayload(
                    color=alpha * t.color[0] + beta * t.color[1] + gamma * t.color[2],
                    normal=alpha * t.normal[0] + beta * t.normal[1] + gamma * t.normal[2],
                    tex_coords=(
                        alpha * t.tex_coords[0]
                        + beta * t.tex_coords[1]
                        + gamma * t.tex_coords[2]
                    ),
                    diffuse_texture=self.diffuse_texture,
                    bump_texture=self.bump_texture,
                    view_pos=alpha * view_pos[0] + beta * view_pos[1] + gamma * view_pos[2],
                )
                frag_color = self.fragment_shader(payload)

                if self.depth_buffer[ind] > zp:
                    self.depth_buffer[ind] = zp
                    self.frame_buffer[ind] = np.asarray(frag_color, dtype=np.float64)

    def to_image(self) -> np.ndarray:
        """The colour buffer as a ``(height, width, 3)`` array of bytes, top row first."""
        pixels = np.clip(np.rint(self.frame_buffer), 0, 255).astype(np.uint8)
        return pixels.reshape(self.height, self.width, 3)