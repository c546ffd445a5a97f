"""Cubic and general Bezier curve drawing onto an RGB canvas."""

from __future__ import annotations

import argparse
import math
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np
from PIL import Image

Point = Tuple[float, float]

CANVAS_SIZE = 700
DEFAULT_OUTPUT = "my_bezier_curve.png"
_RED = 0
_GREEN = 1


def new_canvas(width: int = CANVAS_SIZE, height: int = CANVAS_SIZE) -> np.ndarray:
    """Create a black RGB canvas of the given size."""
    return np.zeros((height, width, 3), dtype=np.uint8)


def _steps(step: float) -> Iterator[float]:
    t = 0.0
    while t <= 1.0:
        yield t
        t += step


def _pixel(canvas: np.ndarray, x: float, y: float) -> Optional[Tuple[int, int]]:
    px, py = int(x), int(y)
    height, width = canvas.shape[:2]
    if 0 <= px < width and 0 <= py < height:
        return px, py
    return None


def naive_bezier(points: Sequence[Point], canvas: np.ndarray) -> None:
    """Draw a cubic curve in red using the Bernstein form directly."""
    if len(points) != 4:
        raise ValueError("naive_bezier needs exactly four control points")
    (x0, y0), (x1, y1), (x2, y2), (x3, y3) = points
    for t in _steps(0.001):
        b0 = (1 - t) ** 3
        b1 = 3 * t * (1 - t) ** 2
        b2 = 3 * t**2 * (1 - t)
        b3 = t**3
        x = b0 * x0 + b1 * x1 + b2 * x2 + b3 * x3
        y = b0 * y0 + b1 * y1 + b2 * y2 + b3 * y3
        pixel = _pixel(canvas, x, y)
        if pixel is not None:
            canvas[pixel[1], pixel[0], _RED] = 255


def factorial(x: int) -> int:
    """Return ``x!``; 0 and 1 both give 1."""
    if x < 0:
        raise ValueError("factorial is undefined for negative numbers")
    return math.factorial(x)


def recursive_bezier(control_points: Sequence[Point], t: float) -> Point:
    """Evaluate the curve at ``t`` with de Casteljau's algorithm."""
    points: List[Point] = [(float(x), float(y)) for x, y in control_points]
    if len(points) < 2:
        raise ValueError("a Bezier curve needs at least two control points")
    while len(points) > 1:
        points = [
            (ax + t * (bx - ax), ay + t * (by - ay))
            for (ax, ay), (bx, by) in zip(points, points[1:])
        ]
    return points[0]


def bezier(control_points: Sequence[Point], canvas: np.ndarray) -> None:
    """Draw the curve in green, softening its edges over neighbouring pixels."""
    for t in _steps(0.0001):
        x, y = recursive_bezier(control_points, t)
        pixel = _pixel(canvas, x, y)
        if pixel is not None:
            canvas[pixel[1], pixel[0], _GREEN] = 255

        floor_x, floor_y = math.floor(x), math.floor(y)
        x_flag = -1 if x - floor_x < 0.5 else 1
        y_flag = -1 if y - floor_y < 0.5 else 1

        nearest = (floor_x + 0.5, floor_y + 0.5)
        side_x = math.floor(x + x_flag) + 0.5
        side_y = math.floor(y + y_flag) + 0.5
        neighbours = ((side_x, floor_y + 0.5), (floor_x + 0.5, side_y), (side_x, side_y))

        nearest_distance = math.hypot(nearest[0] - x, nearest[1] - y)
        for nx, ny in neighbours:
            distance = math.hypot(nx - x, ny - y)
            pixel = _pixel(canvas, nx, ny)
            if pixel is None:
                continue
            current = float(canvas[pixel[1], pixel[0], _GREEN])
            value = max(current, 255.0 * nearest_distance / distance)
            canvas[pixel[1], pixel[0], _GREEN] = min(255, round(value))


def _draw_circle(canvas: np.ndarray, center: Point, radius: float = 3, thickness: float = 3) -> None:
    height, width = canvas.shape[:2]
    ys, xs = np.mgrid[0:height, 0:width]
    distance = np.hypot(xs - center[0], ys - center[1])
    ring = np.abs(distance - radius) <= thickness / 2
    canvas[ring] = 255


def save_canvas(canvas: np.ndarray, path) -> None:
    """Write the canvas to an image file."""
    Image.fromarray(np.ascontiguousarray(canvas)).save(path)


def _parse_point(text: str) -> Point:
    try:
        x_text, y_text = text.split(",")
        return float(x_text), float(y_text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected a point as x,y, got {text!r}") from exc


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Draw a cubic Bezier curve through four control points and save it."""
    parser = argparse.ArgumentParser(description="Draw a cubic Bezier curve.")
    parser.add_argument("points", nargs=4, type=_parse_point, metavar="X,Y")
    parser.add_argument("-o", "--output", default=DEFAULT_OUTPUT)
    parser.add_argument("--naive", action="store_true", help="use the direct cubic formula")
    args = parser.parse_args(argv)

    canvas = new_canvas()
    for point in args.points:
        _draw_circle(canvas, point)
    if args.naive:
        naive_bezier(args.points, canvas)
    else:
        bezier(args.points, canvas)
    save_canvas(canvas, args.output)
    return 0