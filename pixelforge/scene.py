"""Scene objects, lights and the scene container for the ray tracer."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple, Union

from .vector import (
    K_INFINITY,
    MaterialType,
    Vector2f,
    Vector3f,
    cross_product,
    dot_product,
    lerp,
    normalize,
    solve_quadratic,
)


@dataclass(frozen=True)
class Intersection:
    """Where a ray hit an object: distance, triangle index and barycentric uv."""

    t_near: float
    index: int = 0
    uv: Vector2f = field(default_factory=Vector2f)


class SceneObject(ABC):
    """A renderable surface with Phong and Fresnel material properties."""

    def __init__(self) -> None:
        self.material_type = MaterialType.DIFFUSE_AND_GLOSSY
        self.ior = 1.3
        self.kd = 0.8
        self.ks = 0.2
        self.diffuse_color = Vector3f.uniform(0.2)
        self.specular_exponent = 25.0

    @abstractmethod
    def intersect(self, orig: Vector3f, direction: Vector3f) -> Optional[Intersection]:
        """Return the nearest hit along the ray, or ``None``."""

    @abstractmethod
    def surface_properties(
        self, hit_point: Vector3f, direction: Vector3f, index: int, uv: Vector2f
    ) -> Tuple[Vector3f, Vector2f]:
        """Return the surface normal and texture coordinates at a hit."""

    def eval_diffuse_color(self, st: Vector2f) -> Vector3f:
        """Diffuse colour at texture coordinates ``st``."""
        return self.diffuse_color


class Sphere(SceneObject):
    """A sphere given by its centre and radius."""

    def __init__(self, center: Vector3f, radius: float) -> None:
        super().__init__()
        self.center = center
        self.radius = radius

    @property
    def radius2(self) -> float:
        return self.radius * self.radius

    def intersect(self, orig: Vector3f, direction: Vector3f) -> Optional[Intersection]:
        offset = orig - self.center
        a = dot_product(direction, direction)
        b = 2 * dot_product(direction, offset)
        c = dot_product(offset, offset) - self.radius2
        roots = solve_quadratic(a, b, c)
        if roots is None:
            return None
        t0, t1 = roots
        if t0 < 0:
            t0 = t1
        if t0 < 0:
            return None
        return Intersection(t0)

    def surface_properties(
        self, hit_point: Vector3f, direction: Vector3f, index: int, uv: Vector2f
    ) -> Tuple[Vector3f, Vector2f]:
        return normalize(hit_point - self.center), Vector2f()


def ray_triangle_intersect(
    v0: Vector3f, v1: Vector3f, v2: Vector3f, orig: Vector3f, direction: Vector3f
) -> Optional[Tuple[float, float, float]]:
    """Moller-Trumbore test; returns ``(t, u, v)`` for a hit in front of the origin."""
    e1 = v1 - v0
    e2 = v2 - v0
    s = orig - v0
    s1 = cross_product(direction, e2)
    s2 = cross_product(s, e1)
    det = dot_product(s1, e1)
    if det == 0:
        return None
    co = 1 / det
    t = co * dot_product(s2, e2)
    b1 = co * dot_product(s1, s)
    b2 = co * dot_product(s2, direction)
    if t > 0.0 and b1 > 0.0 and b2 > 0.0 and (1 - b1 - b2) >= 0.0:
        return t, b1, b2
    return None


class MeshTriangle(SceneObject):
    """An indexed triangle mesh with per-vertex texture coordinates."""

    def __init__(
        self,
        vertices: Sequence[Vector3f],
        vertex_index: Sequence[int],
        st_coordinates: Sequence[Vector2f],
        num_triangles: Optional[int] = None,
    ) -> None:
        super().__init__()
        if num_triangles is None:
            num_triangles = len(vertex_index) // 3
        index_count = num_triangles * 3
        if len(vertex_index) < index_count:
            raise ValueError("not enough vertex indices for the triangle count")
        indices = [int(i) for i in vertex_index[:index_count]]
        if any(i < 0 for i in indices):
            raise ValueError("vertex indices must not be negative")
        needed = max(indices, default=-1) + 1
        if len(vertices) < needed or len(st_coordinates) < needed:
            raise ValueError("vertex or texture coordinate list is too short for the indices")
        self.vertices = tuple(vertices[:needed])
        self.vertex_index = tuple(indices)
        self.num_triangles = num_triangles
        self.st_coordinates = tuple(st_coordinates[:needed])

    def _corners(self, index: int) -> Tuple[int, int, int]:
        start = index * 3
        return self.vertex_index[start], self.vertex_index[start + 1], self.vertex_index[start + 2]

    def intersect(self, orig: Vector3f, direction: Vector3f) -> Optional[Intersection]:
        best: Optional[Intersection] = None
        t_near = K_INFINITY
        for k in range(self.num_triangles):
            i0, i1, i2 = self._corners(k)
            hit = ray_triangle_intersect(
                self.vertices[i0], self.vertices[i1], self.vertices[i2], orig, direction
            )
            if hit is not None and hit[0] < t_near:
                t, u, v = hit
                t_near = t
                best = Intersection(t, k, Vector2f(u, v))
        return best

    def surface_properties(
        self, hit_point: Vector3f, direction: Vector3f, index: int, uv: Vector2f
    ) -> Tuple[Vector3f, Vector2f]:
        i0, i1, i2 = self._corners(index)
        v0, v1, v2 = self.vertices[i0], self.vertices[i1], self.vertices[i2]
        e0 = normalize(v1 - v0)
        e1 = normalize(v2 - v1)
        normal = normalize(cross_product(e0, e1))
        st0, st1, st2 = self.st_coordinates[i0], self.st_coordinates[i1], self.st_coordinates[i2]
        st = st0 * (1 - uv.x - uv.y) + st1 * uv.x + st2 * uv.y
        return normal, st

    def eval_diffuse_color(self, st: Vector2f) -> Vector3f:
        scale = 5
        pattern = (math.fmod(st.x * scale, 1) > 0.5) ^ (math.fmod(st.y * scale, 1) > 0.5)
        return lerp(Vector3f(0.815, 0.235, 0.031), Vector3f(0.937, 0.937, 0.231), float(pattern))


@dataclass
class Light:
    """A point light; a plain number for the intensity means the same in every channel."""

    position: Vector3f
    intensity: Union[Vector3f, float]

    def __post_init__(self) -> None:
        if not isinstance(self.intensity, Vector3f):
            self.intensity = Vector3f.uniform(float(self.intensity))


@dataclass
class Scene:
    """Render settings together with the objects and lights to draw."""

    width: int = 1280
    height: int = 960
    fov: float = 90.0
    background_color: Vector3f = field(
        default_factory=lambda: Vector3f(0.235294, 0.67451, 0.843137)
    )
    max_depth: int = 5
    epsilon: float = 0.00001
    _objects: list = field(default_factory=list, init=False, repr=False)
    _lights: list = field(default_factory=list, init=False, repr=False)

    def add(self, item: Union[SceneObject, Light]) -> None:
        """Add an object or a light to the scene."""
        if isinstance(item, SceneObject):
            self._objects.append(item)
        elif isinstance(item, Light):
            self._lights.append(item)
        else:
            raise TypeError(f"cannot add {type(item).__name__} to a scene")

    @property
    def objects(self) -> Tuple[SceneObject, ...]:
        return tuple(self._objects)

    @property
    def lights(self) -> Tuple[Light, ...]:
        return tuple(self._lights)