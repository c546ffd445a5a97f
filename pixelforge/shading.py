"""Transformation matrices, fragment shaders and the rasterizer command."""

from __future__ import annotations

import argparse
import math
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence

import numpy as np
from PIL import Image

from .objgeometry import Mesh
from .objloader import Loader
from .rasterizer import Buffers, Rasterizer
from .texture import MY_PI, Texture
from .triangle import FragmentShaderPayload, Triangle, VertexShaderPayload

DEFAULT_OUTPUT = "output.png"
DEFAULT_MODEL = "models/spot/spot_triangulated_good.obj"
DEFAULT_DIFFUSE_TEXTURE = "spot_texture.png"
DEFAULT_BUMP_TEXTURE = "hmap.jpg"
DEFAULT_ANGLE = 140.0
DEFAULT_SIZE = 700

_KA = np.array([0.005, 0.005, 0.005])
_KS = np.array([0.7937, 0.7937, 0.7937])
_AMBIENT_INTENSITY = np.array([10.0, 10.0, 10.0])
_EYE_POS = np.array([0.0, 0.0, 10.0])
_SHININESS = 150.0
_KH = 0.2
_KN = 0.1


@dataclass(frozen=True)
class PointLight:
    """A point light with a position and an RGB intensity."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    intensity: np.ndarray = field(default_factory=lambda: np.zeros(3))


_LIGHTS = (
    PointLight(np.array([20.0, 20.0, 20.0]), np.array([500.0, 500.0, 500.0])),
    PointLight(np.array([-20.0, 20.0, 0.0]), np.array([500.0, 500.0, 500.0])),
)


def _normalized(v: np.ndarray) -> np.ndarray:
    v = np.asarray(v, dtype=np.float64)
    norm = np.linalg.norm(v)
    return v / norm if norm > 0 else v


def get_view_matrix(eye_pos: Sequence[float]) -> np.ndarray:
    """Matrix moving the camera at ``eye_pos`` to the origin."""
    view = np.eye(4)
    view[:3, 3] = -np.asarray(eye_pos, dtype=np.float64)[:3]
    return view


def get_model_matrix(angle: float) -> np.ndarray:
    """Rotation by ``angle`` degrees about the y axis after a uniform 2.5 scale."""
    rad = angle * MY_PI / 180.0
    c, s = math.cos(rad), math.sin(rad)
    rotation = np.array([
        [c, 0.0, s, 0.0],
        [0.0, 1.0, 0.0, 0.0],
        [-s, 0.0, c, 0.0],
        [0.0, 0.0, 0.0, 1.0],
    ])
    scale = np.diag([2.5, 2.5, 2.5, 1.0])
    translate = np.eye(4)
    return translate @ rotation @ scale


def _perspective(eye_fov: float, aspect_ratio: float, z_near: float, z_far: float) -> np.ndarray:
    n, f = -z_near, -z_far
    top = math.tan(eye_fov * MY_PI / 180.0 / 2.0) * z_near
    bottom = -top
    right = top * aspect_ratio
    left = -right

    ortho_trans = np.array([
        [1.0, 0.0, 0.0, -(right + left) / 2],
        [0.0, 1.0, 0.0, -(top + bottom) / 2],
        [0.0, 0.0, 1.0, -(n + f) / 2],
        [0.0, 0.0, 0.0, 1.0],
    ])
    ortho_scale = np.diag([2 / (right - left), 2 / (top - bottom), 2 / (n - f), 1.0])
    persp2ortho = np.array([
        [n, 0.0, 0.0, 0.0],
        [0.0, n, 0.0, 0.0],
        [0.0, 0.0, n + f, -n * f],
        [0.0, 0.0, 1.0, 0.0],
    ])
    flip_z = np.diag([1.0, 1.0, -1.0, 1.0])
    return flip_z @ ortho_scale @ ortho_trans @ persp2ortho


def get_projection_matrix(
    eye_fov: float, aspect_ratio: float, z_near: float, z_far: float
) -> np.ndarray:
    """Perspective projection looking down -z; near and far are positive distances."""
    return _perspective(eye_fov, aspect_ratio, z_near, z_far)


def get_flipped_projection_matrix(
    eye_fov: float, aspect_ratio: float, z_near: float, z_far: float
) -> np.ndarray:
    """Perspective projection built from negated near and far planes.

    The planes are turned into coordinates on the -z axis before the frustum
    is squashed into an orthographic box, which yields the same matrix as
    :func:`get_projection_matrix`.
    """
    near_coord, far_coord = -z_near, -z_far
    return _perspective(eye_fov, aspect_ratio, -near_coord, -far_coord)


def vertex_shader(payload: VertexShaderPayload) -> np.ndarray:
    """Pass the position through unchanged."""
    return payload.position


def normal_fragment_shader(payload: FragmentShaderPayload) -> np.ndarray:
    """Colour a fragment by its normal mapped from [-1, 1] to [0, 255]."""
    color = (_normalized(payload.normal) + 1.0) / 2.0
    return color * 255.0


def reflect(vec: Sequence[float], axis: Sequence[float]) -> np.ndarray:
    """Unit reflection of ``vec`` about ``axis``."""
    vec = np.asarray(vec, dtype=np.float64)
    axis = np.asarray(axis, dtype=np.float64)
    costheta = float(np.dot(vec, axis))
    return _normalized(2 * costheta * axis - vec)


def _blinn_phong(
    kd: np.ndarray,
    point: np.ndarray,
    normal: np.ndarray,
    lights: Iterable[PointLight] = _LIGHTS,
) -> np.ndarray:
    result = np.zeros(3)
    for light in lights:
        to_light = light.position - point
        r2 = float(np.dot(to_light, to_light))
        l = _normalized(to_light)
        v = _normalized(_EYE_POS - point)
        h = _normalized(l + v)
        cosd = max(0.0, float(np.dot(normal, l)))
        coss = max(0.0, float(np.dot(normal, h))) ** _SHININESS
        ambient = _KA * _AMBIENT_INTENSITY
        diffuse = kd * (light.intensity / r2 * cosd)
        specular = _KS * (light.intensity / r2 * coss)
        result = result + ambient + diffuse + specular
    return result * 255.0


def texture_fragment_shader(payload: FragmentShaderPayload) -> np.ndarray:
    """Blinn-Phong shading with the diffuse colour taken from the diffuse texture."""
    texture_color = np.zeros(3)
    if payload.diffuse_texture is not None:
        u, v = payload.tex_coords[0], payload.tex_coords[1]
        texture_color = payload.diffuse_texture.get_color_bilinear(u, v)
    kd = np.asarray(texture_color, dtype=np.float64) / 255.0
    return _blinn_phong(kd, np.asarray(payload.view_pos, dtype=np.float64),
                        np.asarray(payload.normal, dtype=np.float64))


def phong_fragment_shader(payload: FragmentShaderPayload) -> np.ndarray:
    """Blinn-Phong shading; requires a diffuse texture."""
    if payload.diffuse_texture is None:
        raise ValueError("the phong shader needs a diffuse texture")
    u, v = payload.tex_coords[0], payload.tex_coords[1]
    kd = payload.diffuse_texture.get_color_bilinear(u, v) / 255.0
    return _blinn_phong(kd, np.asarray(payload.view_pos, dtype=np.float64),
                        np.asarray(payload.normal, dtype=np.float64))


def _perturbed_normal(payload: FragmentShaderPayload) -> tuple:
    """Return the bumped normal and the height sampled at the fragment."""
    bump = payload.bump_texture
    if bump is None:
        raise ValueError("this shader needs a bump texture")
    n = np.asarray(payload.normal, dtype=np.float64)
    x, y, z = n
    with np.errstate(divide="ignore", invalid="ignore"):
        root = np.sqrt(x * x + z * z)
        t = np.array([x * y / root, root, z * y / root])
    t = _normalized(t)
    b = _normalized(np.cross(n, t))
    tbn = np.column_stack((t, b, n))

    u, v = float(payload.tex_coords[0]), float(payload.tex_coords[1])
    height = float(np.linalg.norm(bump.get_color(u, v)))
    uc = float(np.linalg.norm(bump.get_color(u + 1.0 / bump.width, v))) - height
    vc = float(np.linalg.norm(bump.get_color(u, v + 1.0 / bump.height))) - height

    du = _KH * _KN * uc
    dv = _KH * _KN * vc
    ln = _normalized(np.array([-du, -dv, 1.0]))
    return _normalized(tbn @ ln), height


def displacement_fragment_shader(payload: FragmentShaderPayload) -> np.ndarray:
    """Shade after moving the point along its normal by the bump height."""
    normal, height = _perturbed_normal(payload)
    n = np.asarray(payload.normal, dtype=np.float64)
    point = np.asarray(payload.view_pos, dtype=np.float64) + _KN * n * height
    kd = np.asarray(payload.color, dtype=np.float64)
    return _blinn_phong(kd, point, normal)


def bump_fragment_shader(payload: FragmentShaderPayload) -> np.ndarray:
    """Shade with the normal perturbed by the bump texture's gradient."""
    normal, _ = _perturbed_normal(payload)
    kd = np.asarray(payload.color, dtype=np.float64)
    return _blinn_phong(kd, np.asarray(payload.view_pos, dtype=np.float64), normal)


def triangles_from_meshes(meshes: Iterable[Mesh]) -> List[Triangle]:
    """Group each mesh's vertex list into triangles."""
    triangles: List[Triangle] = []
    for mesh in meshes:
        if len(mesh.vertices) % 3:
            raise ValueError(
                f"mesh {mesh.name!r} has {len(mesh.vertices)} vertices, not a multiple of 3"
            )
        for start in range(0, len(mesh.vertices), 3):
            triangle = Triangle()
            for j, vertex in enumerate(mesh.vertices[start:start + 3]):
                p, n, tc = vertex.position, vertex.normal, vertex.texture_coordinate
                triangle.set_vertex(j, (p.x, p.y, p.z, 1.0))
                triangle.set_normal(j, (n.x, n.y, n.z))
                triangle.set_tex_coord(j, (tc.x, tc.y))
            triangles.append(triangle)
    return triangles


SHADERS: Dict[str, Callable[[FragmentShaderPayload], np.ndarray]] = {
    "texture": texture_fragment_shader,
    "normal": normal_fragment_shader,
    "phong": phong_fragment_shader,
    "bump": bump_fragment_shader,
    "displacement": displacement_fragment_shader,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Rasterize a shaded OBJ model and save the image."""
    parser = argparse.ArgumentParser(description="Rasterize a shaded OBJ model.")
    parser.add_argument("output", nargs="?", default=DEFAULT_OUTPUT)
    parser.add_argument("shader", nargs="?", choices=sorted(SHADERS), default=None)
    parser.add_argument("--model", default=DEFAULT_MODEL)
    parser.add_argument("--diffuse-texture", default=None)
    parser.add_argument("--bump-texture", default=None)
    parser.add_argument("--angle", type=float, default=DEFAULT_ANGLE)
    parser.add_argument("--size", type=int, default=DEFAULT_SIZE)
    args = parser.parse_args(argv)
    if args.size <= 0:
        parser.error("size must be positive")

    model_dir = Path(args.model).parent
    diffuse_path = args.diffuse_texture or model_dir / DEFAULT_DIFFUSE_TEXTURE
    bump_path = args.bump_texture or model_dir / DEFAULT_BUMP_TEXTURE

    loader = Loader()
    if not loader.load_file(args.model):
        print(f"nothing could be loaded from {args.model}", file=sys.stderr)
        return 1
    triangles = triangles_from_meshes(loader.loaded_meshes)

    rasterizer = Rasterizer(args.size, args.size)
    rasterizer.diffuse_texture = Texture.from_file(diffuse_path)
    rasterizer.bump_texture = Texture.from_file(bump_path)

    shader_name = args.shader or "displacement"
    if args.shader is not None:
        print(f"Rasterizing using the {shader_name} shader")
    rasterizer.vertex_shader = vertex_shader
    rasterizer.fragment_shader = SHADERS[shader_name]

    rasterizer.clear(Buffers.COLOR | Buffers.DEPTH)
    rasterizer.model = get_model_matrix(args.angle)
    rasterizer.view = get_view_matrix(_EYE_POS)
    rasterizer.projection = get_projection_matrix(45.0, 1.0, 0.1, 50.0)
    rasterizer.draw(triangles)

    Image.fromarray(rasterizer.to_image()).save(args.output)
    return 0