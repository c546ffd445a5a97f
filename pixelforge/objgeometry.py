"""Geometry types and string helpers used when reading Wavefront OBJ models."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from numbers import Real
from typing import Iterator, List, Sequence, TypeVar

T = TypeVar("T")

_WHITESPACE = " \t"
_TAIL_PATTERN = re.compile(r"[ \t]*[^ \t]+[ \t]+(.*)", re.DOTALL)
_FIRST_TOKEN_PATTERN = re.compile(r"[ \t]*([^ \t]*)", re.DOTALL)
_LEADING_INT_PATTERN = re.compile(r"\s*([+-]?\d+)")


@dataclass(frozen=True, slots=True)
class Vector2:
    """A two component position or texture coordinate."""

    x: float = 0.0
    y: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __add__(self, other: "Vector2") -> "Vector2":
        if not isinstance(other, Vector2):
            return NotImplemented
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector2") -> "Vector2":
        if not isinstance(other, Vector2):
            return NotImplemented
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, other):
        if isinstance(other, Real):
            return Vector2(self.x * other, self.y * other)
        return NotImplemented

    def __rmul__(self, other):
        return self.__mul__(other)


@dataclass(frozen=True, slots=True)
class Vector3:
    """A three component position, normal or colour."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: "Vector3") -> "Vector3":
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vector3") -> "Vector3":
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, other):
        if isinstance(other, Real):
            return Vector3(self.x * other, self.y * other, self.z * other)
        return NotImplemented

    def __rmul__(self, other):
        return self.__mul__(other)

    def __truediv__(self, other):
        if isinstance(other, Real):
            return Vector3(self.x / other, self.y / other, self.z / other)
        return NotImplemented


@dataclass(frozen=True)
class Vertex:
    """A model vertex: position, normal and texture coordinate."""

    position: Vector3 = field(default_factory=Vector3)
    normal: Vector3 = field(default_factory=Vector3)
    texture_coordinate: Vector2 = field(default_factory=Vector2)


@dataclass
class Material:
    """Surface description read from an MTL file."""

    name: str = ""
    ka: Vector3 = field(default_factory=Vector3)
    kd: Vector3 = field(default_factory=Vector3)
    ks: Vector3 = field(default_factory=Vector3)
    ns: float = 0.0
    ni: float = 0.0
    d: float = 0.0
    illum: int = 0
    map_ka: str = ""
    map_kd: str = ""
    map_ks: str = ""
    map_ns: str = ""
    map_d: str = ""
    map_bump: str = ""


@dataclass
class Mesh:
    """A named list of vertices with triangle indices into it and a material."""

    name: str = ""
    vertices: List[Vertex] = field(default_factory=list)
    indices: List[int] = field(default_factory=list)
    material: Material = field(default_factory=Material)


def cross_v3(a: Vector3, b: Vector3) -> Vector3:
    """Cross product of two vectors."""
    return Vector3(
        a.y * b.z - a.z * b.y,
        a.z * b.x - a.x * b.z,
        a.x * b.y - a.y * b.x,
    )


def magnitude_v3(v: Vector3) -> float:
    """Euclidean length of ``v``."""
    return math.sqrt(v.x * v.x + v.y * v.y + v.z * v.z)


def dot_v3(a: Vector3, b: Vector3) -> float:
    """Dot product of two vectors."""
    return a.x * b.x + a.y * b.y + a.z * b.z


def angle_between_v3(a: Vector3, b: Vector3) -> float:
    """Angle in radians between two vectors; NaN when either has zero length."""
    denominator = magnitude_v3(a) * magnitude_v3(b)
    if denominator == 0:
        return math.nan
    cosine = dot_v3(a, b) / denominator
    return math.acos(max(-1.0, min(1.0, cosine)))


def proj_v3(a: Vector3, b: Vector3) -> Vector3:
    """Projection of ``a`` onto the direction of ``b``."""
    length = magnitude_v3(b)
    if length == 0:
        raise ZeroDivisionError("cannot project onto a zero vector")
    bn = b / length
    return bn * dot_v3(a, bn)


def same_side(p1: Vector3, p2: Vector3, a: Vector3, b: Vector3) -> bool:
    """Whether ``p1`` and ``p2`` lie on the same side of the line through ``a`` and ``b``."""
    cp1 = cross_v3(b - a, p1 - a)
    cp2 = cross_v3(b - a, p2 - a)
    return dot_v3(cp1, cp2) >= 0


def gen_tri_normal(t1: Vector3, t2: Vector3, t3: Vector3) -> Vector3:
    """Unnormalised face normal of a triangle."""
    return cross_v3(t2 - t1, t3 - t1)


def in_triangle(point: Vector3, tri1: Vector3, tri2: Vector3, tri3: Vector3) -> bool:
    """Whether ``point`` lies on the triangle.

    The point must be within the prism the triangle outlines and its position
    vector must have no component along the triangle's normal.
    """
    within_prism = (
        same_side(point, tri1, tri2, tri3)
        and same_side(point, tri2, tri1, tri3)
        and same_side(point, tri3, tri1, tri2)
    )
    if not within_prism:
        return False
    normal = gen_tri_normal(tri1, tri2, tri3)
    if magnitude_v3(normal) == 0:
        return False
    return magnitude_v3(proj_v3(point, normal)) == 0


def split(text: str, token: str) -> List[str]:
    """Split ``text`` at ``token``.

    A token directly after another token (or at the very start) yields an
    empty field, and a trailing token does not.
    """
    if not token:
        raise ValueError("split token must not be empty")
    out: List[str] = []
    current = ""
    size = len(token)
    i = 0
    while i < len(text):
        if text[i:i + size] == token:
            if current:
                out.append(current)
                current = ""
                i += size - 1
            else:
                out.append("")
        elif i + size >= len(text):
            current += text[i:i + size]
            out.append(current)
            break
        else:
            current += text[i]
        i += 1
    return out


def tail(text: str) -> str:
    """Everything after the first token and the blanks that follow it, right-trimmed."""
    match = _TAIL_PATTERN.match(text)
    if match is None:
        return ""
    return match.group(1).rstrip(_WHITESPACE)


def first_token(text: str) -> str:
    """The first blank-separated token of ``text``, or an empty string."""
    match = _FIRST_TOKEN_PATTERN.match(text)
    return match.group(1) if match else ""


def get_element(elements: Sequence[T], index: str) -> T:
    """Look up an OBJ index: 1-based when positive, counted from the end when negative."""
    match = _LEADING_INT_PATTERN.match(index)
    if match is None:
        raise ValueError(f"not an index: {index!r}")
    idx = int(match.group(1))
    idx = len(elements) + idx if idx < 0 else idx - 1
    if not 0 <= idx < len(elements):
        raise IndexError(f"index {index!r} is out of range for {len(elements)} elements")
    return elements[idx]