import math

import pytest

from pixelforge.objgeometry import (
    Material,
    Mesh,
    Vector2,
    Vector3,
    Vertex,
    angle_between_v3,
    cross_v3,
    dot_v3,
    first_token,
    gen_tri_normal,
    get_element,
    in_triangle,
    magnitude_v3,
    proj_v3,
    same_side,
    split,
    tail,
)


def test_vector3_arithmetic_round_trip():
    a = Vector3(1.5, -2.0, 3.0)
    b = Vector3(0.5, 4.0, -1.0)
    assert (a + b) - b == a
    assert (a * 2.0) / 2.0 == a
    assert 2.0 * a == a * 2.0


def test_vector2_arithmetic_round_trip():
    a = Vector2(1.0, 2.0)
    b = Vector2(3.0, -4.0)
    assert (a + b) - b == a
    assert 3 * a == a * 3


def test_defaults_are_empty():
    material = Material()
    assert material.name == ""
    assert material.kd == Vector3()
    assert material.illum == 0
    mesh = Mesh()
    assert mesh.vertices == [] and mesh.indices == []
    assert Vertex().texture_coordinate == Vector2()


def test_cross_is_orthogonal_and_antisymmetric():
    a = Vector3(1.0, 2.0, 3.0)
    b = Vector3(-2.0, 0.5, 4.0)
    c = cross_v3(a, b)
    assert dot_v3(c, a) == pytest.approx(0.0)
    assert dot_v3(c, b) == pytest.approx(0.0)
    assert cross_v3(b, a) == Vector3(-c.x, -c.y, -c.z)


def test_magnitude():
    assert magnitude_v3(Vector3(3.0, 4.0, 0.0)) == pytest.approx(5.0)


def test_angle_between_perpendicular_and_parallel():
    assert angle_between_v3(Vector3(1, 0, 0), Vector3(0, 1, 0)) == pytest.approx(math.pi / 2)
    assert angle_between_v3(Vector3(2, 2, 0), Vector3(1, 1, 0)) == pytest.approx(0.0, abs=1e-6)


def test_angle_between_zero_vector_is_nan():
    result = angle_between_v3(Vector3(), Vector3(1, 0, 0))
    assert str(result) == "nan"


def test_projection_invariants():
    a = Vector3(3.0, -1.0, 2.0)
    b = Vector3(1.0, 2.0, 2.0)
    p = proj_v3(a, b)
    assert magnitude_v3(cross_v3(p, b)) == pytest.approx(0.0, abs=1e-9)
    assert dot_v3(a - p, b) == pytest.approx(0.0, abs=1e-9)


def test_projection_onto_zero_vector_raises():
    with pytest.raises(ZeroDivisionError):
        proj_v3(Vector3(1, 0, 0), Vector3())


def test_same_side():
    a, b = Vector3(0, 0, 0), Vector3(1, 0, 0)
    assert same_side(Vector3(0, 1, 0), Vector3(5, 2, 0), a, b)
    assert not same_side(Vector3(0, 1, 0), Vector3(0, -1, 0), a, b)


def test_gen_tri_normal():
    t1, t2, t3 = Vector3(0, 0, 0), Vector3(1, 0, 0), Vector3(0, 1, 0)
    n = gen_tri_normal(t1, t2, t3)
    assert n == Vector3(0, 0, 1)
    assert dot_v3(n, t2 - t1) == 0
    assert dot_v3(n, t3 - t1) == 0


def test_in_triangle():
    t1, t2, t3 = Vector3(0, 0, 0), Vector3(4, 0, 0), Vector3(0, 4, 0)
    assert in_triangle(Vector3(1, 1, 0), t1, t2, t3)
    assert not in_triangle(Vector3(5, 5, 0), t1, t2, t3)
    assert not in_triangle(Vector3(1, 1, 1), t1, t2, t3)


def test_in_triangle_degenerate_is_false():
    p = Vector3(0, 0, 0)
    assert not in_triangle(Vector3(1, 0, 0), p, Vector3(2, 0, 0), Vector3(3, 0, 0))


@pytest.mark.parametrize(
    "text, token, expected",
    [
        ("1 2 3", " ", ["1", "2", "3"]),
        ("1//3", "/", ["1", "", "3"]),
        ("1/2/3", "/", ["1", "2", "3"]),
        ("7", "/", ["7"]),
        ("a ", " ", ["a"]),
        ("", " ", []),
    ],
)
def test_split(text, token, expected):
    assert split(text, token) == expected


def test_split_empty_token_raises():
    with pytest.raises(ValueError):
        split("abc", "")


@pytest.mark.parametrize(
    "text, expected",
    [
        ("v 1 2 3", "1 2 3"),
        ("  usemtl   red \t", "red"),
        ("o", ""),
        ("o   ", ""),
        ("", ""),
    ],
)
def test_tail(text, expected):
    assert tail(text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("v 1 2 3", "v"),
        ("\t vt 0.5 0.5", "vt"),
        ("f", "f"),
        ("   ", ""),
        ("", ""),
    ],
)
def test_first_token(text, expected):
    assert first_token(text) == expected


def test_get_element_positive_and_negative():
    items = ["a", "b", "c"]
    assert get_element(items, "1") == "a"
    assert get_element(items, "3") == "c"
    assert get_element(items, "-1") == "c"
    assert get_element(items, "-3") == "a"


def test_get_element_errors():
    with pytest.raises(IndexError):
        get_element(["a"], "0")
    with pytest.raises(IndexError):
        get_element(["a"], "2")
    with pytest.raises(ValueError):
        get_element(["a"], "x")