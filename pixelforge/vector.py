"""Small vector types and numeric helpers shared by the ray tracer."""

from __future__ import annotations

import math
import random
import sys
from dataclasses import dataclass
from enum import Enum
from numbers import Real
from typing import Iterator, Optional, TextIO, Tuple

K_INFINITY = 3.4028234663852886e38
PROGRESS_BAR_WIDTH = 70


@dataclass(frozen=True, slots=True)
class Vector3f:
    """An immutable three component vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def uniform(cls, value: float) -> "Vector3f":
        """Return a vector whose three components all equal ``value``."""
        return cls(value, value, value)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: "Vector3f") -> "Vector3f":
        if not isinstance(other, Vector3f):
            return NotImplemented
        return Vector3f(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vector3f") -> "Vector3f":
        if not isinstance(other, Vector3f):
            return NotImplemented
        return Vector3f(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> "Vector3f":
        return Vector3f(-self.x, -self.y, -self.z)

    def __mul__(self, other):
        if isinstance(other, Vector3f):
            return Vector3f(self.x * other.x, self.y * other.y, self.z * other.z)
        if isinstance(other, Real):
            return Vector3f(self.x * other, self.y * other, self.z * other)
        return NotImplemented

    def __rmul__(self, other):
        if isinstance(other, Real):
            return Vector3f(self.x * other, self.y * other, self.z * other)
        return NotImplemented

    def __truediv__(self, other):
        if isinstance(other, Real):
            return Vector3f(self.x / other, self.y / other, self.z / other)
        return NotImplemented

    def __str__(self) -> str:
        return f"{self.x:g}, {self.y:g}, {self.z:g}"


@dataclass(frozen=True, slots=True)
class Vector2f:
    """An immutable two component vector."""

    x: float = 0.0
    y: float = 0.0

    @classmethod
    def uniform(cls, value: float) -> "Vector2f":
        """Return a vector whose two components both equal ``value``."""
        return cls(value, value)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __add__(self, other: "Vector2f") -> "Vector2f":
        if not isinstance(other, Vector2f):
            return NotImplemented
        return Vector2f(self.x + other.x, self.y + other.y)

    def __mul__(self, other):
        if isinstance(other, Real):
            return Vector2f(self.x * other, self.y * other)
        return NotImplemented

    def __rmul__(self, other):
        return self.__mul__(other)


class MaterialType(Enum):
    """How a surface interacts with light."""

    DIFFUSE_AND_GLOSSY = 0
    REFLECTION_AND_REFRACTION = 1
    REFLECTION = 2


def lerp(a: Vector3f, b: Vector3f, t: float) -> Vector3f:
    """Linearly interpolate between ``a`` and ``b``."""
    return a * (1 - t) + b * t


def normalize(v: Vector3f) -> Vector3f:
    """Return ``v`` scaled to unit length; a zero vector is returned unchanged."""
    mag2 = v.x * v.x + v.y * v.y + v.z * v.z
    if mag2 > 0:
        inv_mag = 1 / math.sqrt(mag2)
        return Vector3f(v.x * inv_mag, v.y * inv_mag, v.z * inv_mag)
    return v


def dot_product(a: Vector3f, b: Vector3f) -> float:
    """Dot product of two vectors."""
    return a.x * b.x + a.y * b.y + a.z * b.z


def cross_product(a: Vector3f, b: Vector3f) -> Vector3f:
    """Cross product of two vectors."""
    return Vector3f(
        a.y * b.z - a.z * b.y,
        a.z * b.x - a.x * b.z,
        a.x * b.y - a.y * b.x,
    )


def clamp(lo: float, hi: float, v: float) -> float:
    """Clamp ``v`` into the range [lo, hi]."""
    return max(lo, min(hi, v))


def solve_quadratic(a: float, b: float, c: float) -> Optional[Tuple[float, float]]:
    """Solve ``a*x^2 + b*x + c = 0``.

    Returns the two real roots in ascending order, or ``None`` when there are none.
    """
    discr = b * b - 4 * a * c
    if discr < 0:
        return None
    if discr == 0:
        x0 = x1 = -0.5 * b / a
    else:
        root = math.sqrt(discr)
        q = -0.5 * (b + root) if b > 0 else -0.5 * (b - root)
        x0 = q / a
        x1 = c / q
    if x0 > x1:
        x0, x1 = x1, x0
    return x0, x1


def get_random_float() -> float:
    """Return a uniformly distributed float in [0, 1)."""
    return random.random()


def format_progress(progress: float) -> str:
    """Render a progress bar line for a fraction in [0, 1]."""
    pos = int(PROGRESS_BAR_WIDTH * progress)
    bar = "".join(
        "=" if i < pos else ">" if i == pos else " "
        for i in range(PROGRESS_BAR_WIDTH)
    )
    return f"[{bar}] {int(progress * 100.0)} %\r"


def update_progress(progress: float, stream: Optional[TextIO] = None) -> None:
    """Write the progress bar to ``stream`` (standard output by default)."""
    out = sys.stdout if stream is None else stream
    out.write(format_progress(progress))
    out.flush()