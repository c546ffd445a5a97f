import numpy as np
import pytest
from PIL import Image

from pixelforge.bezier import (
    bezier,
    factorial,
    main,
    naive_bezier,
    new_canvas,
    recursive_bezier,
    save_canvas,
)

CONTROL = [(100.5, 200.5), (250.0, 50.0), (450.0, 600.0), (600.0, 300.0)]


def test_new_canvas_shape_and_black():
    canvas = new_canvas(40, 30)
    assert canvas.shape == (30, 40, 3)
    assert canvas.dtype == np.uint8
    assert not canvas.any()


def test_factorial_base_cases():
    assert factorial(0) == 1
    assert factorial(1) == 1


@pytest.mark.parametrize("n", range(2, 10))
def test_factorial_recurrence(n):
    assert factorial(n) == n * factorial(n - 1)


def test_factorial_negative_raises():
    with pytest.raises(ValueError):
        factorial(-1)


def test_recursive_bezier_endpoints():
    assert recursive_bezier(CONTROL, 0.0) == pytest.approx(CONTROL[0])
    assert recursive_bezier(CONTROL, 1.0) == pytest.approx(CONTROL[-1])


@pytest.mark.parametrize("t", [0.0, 0.2, 0.5, 0.9])
def test_recursive_bezier_collinear_is_linear(t):
    points = [(0.0, 0.0), (1.0, 1.0), (2.0, 2.0), (3.0, 3.0)]
    x, y = recursive_bezier(points, t)
    assert x == pytest.approx(3 * t)
    assert y == pytest.approx(3 * t)


def test_recursive_bezier_two_points_is_lerp():
    x, y = recursive_bezier([(0.0, 10.0), (20.0, 30.0)], 0.25)
    assert (x, y) == pytest.approx((0.0 + 0.25 * 20.0, 10.0 + 0.25 * 20.0))


def test_recursive_bezier_stays_in_hull():
    xs = [p[0] for p in CONTROL]
    ys = [p[1] for p in CONTROL]
    for i in range(11):
        x, y = recursive_bezier(CONTROL, i / 10)
        assert min(xs) <= x <= max(xs)
        assert min(ys) <= y <= max(ys)


def test_recursive_bezier_too_few_points():
    with pytest.raises(ValueError):
        recursive_bezier([(1.0, 1.0)], 0.5)


def test_naive_bezier_marks_red_only():
    canvas = new_canvas()
    naive_bezier(CONTROL, canvas)
    assert canvas[200, 100, 0] == 255
    assert not canvas[:, :, 1:].any()


def test_naive_bezier_needs_four_points():
    with pytest.raises(ValueError):
        naive_bezier(CONTROL[:3], new_canvas())


def test_bezier_marks_green_with_antialiasing():
    canvas = new_canvas()
    bezier(CONTROL, canvas)
    green = canvas[:, :, 1]
    assert green[200, 100] == 255
    assert ((green > 0) & (green < 255)).any()
    assert not canvas[:, :, 0].any()
    assert not canvas[:, :, 2].any()


def test_bezier_ignores_points_outside_canvas():
    canvas = new_canvas(10, 10)
    bezier([(-50.0, -50.0), (5.0, 5.0), (60.0, 60.0)], canvas)
    assert canvas[5, 5, 1] == 255


def test_save_canvas_round_trip(tmp_path):
    canvas = new_canvas(20, 10)
    canvas[3, 4] = (10, 200, 30)
    path = tmp_path / "out.png"
    save_canvas(canvas, path)
    loaded = np.asarray(Image.open(path))
    assert np.array_equal(loaded, canvas)


def test_main_writes_image(tmp_path):
    path = tmp_path / "curve.png"
    args = [f"{x},{y}" for x, y in CONTROL] + ["--output", str(path)]
    assert main(args) == 0
    image = np.asarray(Image.open(path))
    assert image.shape == (700, 700, 3)
    assert image[200, 100, 1] == 255


def test_main_rejects_bad_point(tmp_path):
    with pytest.raises(SystemExit):
        main(["1,2", "3", "4,5", "6,7", "--output", str(tmp_path / "x.png")])