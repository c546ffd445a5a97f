import math

import pytest

from pixelforge.scene import (
    Intersection,
    Light,
    MeshTriangle,
    Scene,
    Sphere,
    ray_triangle_intersect,
)
from pixelforge.vector import MaterialType, Vector2f, Vector3f, dot_product, normalize

FLOOR_VERTS = [
    Vector3f(-5, -3, -6),
    Vector3f(5, -3, -6),
    Vector3f(5, -3, -16),
    Vector3f(-5, -3, -16),
]
FLOOR_INDEX = [0, 1, 3, 1, 2, 3]
FLOOR_ST = [Vector2f(0, 0), Vector2f(1, 0), Vector2f(1, 1), Vector2f(0, 1)]


def _length(v):
    return math.sqrt(dot_product(v, v))


def test_sphere_defaults_from_object():
    sphere = Sphere(Vector3f(0, 0, -5), 1.0)
    assert sphere.material_type is MaterialType.DIFFUSE_AND_GLOSSY
    assert sphere.ior == pytest.approx(1.3)
    assert sphere.kd == pytest.approx(0.8)
    assert sphere.eval_diffuse_color(Vector2f()) == Vector3f.uniform(0.2)


def test_sphere_hit_from_outside_lies_on_surface():
    center = Vector3f(0.5, -0.5, -8)
    sphere = Sphere(center, 1.5)
    orig = Vector3f()
    direction = normalize(center)
    hit = sphere.intersect(orig, direction)
    assert isinstance(hit, Intersection)
    point = orig + direction * hit.t_near
    assert _length(point - center) == pytest.approx(1.5)
    assert hit.t_near < _length(center)


def test_sphere_hit_from_inside_is_radius():
    center = Vector3f(1, 2, 3)
    sphere = Sphere(center, 2.0)
    hit = sphere.intersect(center, Vector3f(0, 0, -1))
    assert hit.t_near == pytest.approx(2.0)


def test_sphere_miss_and_behind():
    sphere = Sphere(Vector3f(0, 0, -5), 1.0)
    assert sphere.intersect(Vector3f(), Vector3f(0, 1, 0)) is None
    assert sphere.intersect(Vector3f(), Vector3f(0, 0, 1)) is None


def test_sphere_normal_points_outward():
    center = Vector3f(0, 0, -5)
    sphere = Sphere(center, 1.0)
    point = Vector3f(0, 0, -4)
    normal, st = sphere.surface_properties(point, Vector3f(0, 0, -1), 0, Vector2f())
    assert _length(normal) == pytest.approx(1.0)
    assert dot_product(normal, point - center) > 0
    assert st == Vector2f()


def test_ray_triangle_barycentrics_reconstruct_hit():
    v0, v1, v2 = Vector3f(-1, -1, -2), Vector3f(1, -1, -2), Vector3f(0, 1, -2)
    orig = Vector3f(0.1, 0.0, 0.0)
    direction = Vector3f(0, 0, -1)
    t, u, v = ray_triangle_intersect(v0, v1, v2, orig, direction)
    hit = orig + direction * t
    rebuilt = v0 * (1 - u - v) + v1 * u + v2 * v
    assert tuple(hit) == pytest.approx(tuple(rebuilt))
    assert t > 0


def test_ray_triangle_miss_and_parallel():
    v0, v1, v2 = Vector3f(-1, -1, -2), Vector3f(1, -1, -2), Vector3f(0, 1, -2)
    assert ray_triangle_intersect(v0, v1, v2, Vector3f(5, 5, 0), Vector3f(0, 0, -1)) is None
    assert ray_triangle_intersect(v0, v1, v2, Vector3f(), Vector3f(1, 0, 0)) is None


def test_mesh_floor_intersection():
    mesh = MeshTriangle(FLOOR_VERTS, FLOOR_INDEX, FLOOR_ST)
    assert mesh.num_triangles == len(FLOOR_INDEX) // 3
    orig = Vector3f()
    direction = normalize(Vector3f(0, -1, -3))
    hit = mesh.intersect(orig, direction)
    point = orig + direction * hit.t_near
    assert point.y == pytest.approx(-3)
    assert hit.index in (0, 1)
    normal, st = mesh.surface_properties(point, direction, hit.index, hit.uv)
    assert _length(normal) == pytest.approx(1.0)
    assert abs(normal.y) == pytest.approx(1.0)
    assert 0.0 <= st.x <= 1.0 and 0.0 <= st.y <= 1.0


def test_mesh_miss():
    mesh = MeshTriangle(FLOOR_VERTS, FLOOR_INDEX, FLOOR_ST)
    assert mesh.intersect(Vector3f(), Vector3f(0, 1, 0)) is None


def test_mesh_checker_pattern_uses_both_colors():
    mesh = MeshTriangle(FLOOR_VERTS, FLOOR_INDEX, FLOOR_ST)
    first = mesh.eval_diffuse_color(Vector2f(0.1, 0.1))
    second = mesh.eval_diffuse_color(Vector2f(0.15, 0.05))
    assert tuple(first) == pytest.approx((0.815, 0.235, 0.031))
    assert tuple(second) == pytest.approx((0.937, 0.937, 0.231))


def test_mesh_rejects_short_vertex_list():
    with pytest.raises(ValueError):
        MeshTriangle(FLOOR_VERTS[:2], FLOOR_INDEX, FLOOR_ST)


def test_mesh_rejects_short_index_list():
    with pytest.raises(ValueError):
        MeshTriangle(FLOOR_VERTS, FLOOR_INDEX[:4], FLOOR_ST, num_triangles=2)


def test_light_scalar_intensity_becomes_uniform():
    light = Light(Vector3f(-20, 70, 20), 0.5)
    assert light.intensity == Vector3f.uniform(0.5)


def test_scene_add_sorts_items():
    scene = Scene(640, 480)
    sphere = Sphere(Vector3f(0, 0, -5), 1.0)
    light = Light(Vector3f(0, 10, 0), Vector3f.uniform(1.0))
    scene.add(sphere)
    scene.add(light)
    assert scene.objects == (sphere,)
    assert scene.lights == (light,)
    assert (scene.width, scene.height) == (640, 480)
    assert scene.max_depth == 5


def test_scene_add_rejects_other_types():
    with pytest.raises(TypeError):
        Scene().add("not an object")