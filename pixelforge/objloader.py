"""Reading Wavefront OBJ models and their MTL material libraries."""

from __future__ import annotations

import copy
import os
import re
from pathlib import Path
from typing import List, Optional, Sequence, TextIO, Union

from .objgeometry import (
    Material,
    Mesh,
    Vector2,
    Vector3,
    Vertex,
    cross_v3,
    first_token,
    get_element,
    in_triangle,
    split,
    tail,
)

PathLike = Union[str, Path]

_OUTPUT_EVERY_NTH = 1000
_FLOAT_PATTERN = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)
_INT_PATTERN = re.compile(r"\s*([+-]?\d+)")
_MAP_FIELDS = {
    "map_Ka": "map_ka",
    "map_Kd": "map_kd",
    "map_Ks": "map_ks",
    "map_Ns": "map_ns",
    "map_d": "map_d",
    "map_Bump": "map_bump",
    "map_bump": "map_bump",
    "bump": "map_bump",
}


def _parse_float(text: str) -> float:
    match = _FLOAT_PATTERN.match(text)
    if match is None:
        raise ValueError(f"not a number: {text!r}")
    return float(match.group(1))


def _parse_int(text: str) -> int:
    match = _INT_PATTERN.match(text)
    if match is None:
        raise ValueError(f"not an integer: {text!r}")
    return int(match.group(1))


def _floats(line: str, count: int) -> List[float]:
    parts = split(tail(line), " ")
    if len(parts) < count:
        raise ValueError(f"expected {count} values in {line!r}")
    return [_parse_float(part) for part in parts[:count]]


def _fraction(value: float) -> float:
    magnitude = abs(value)
    return magnitude - float(int(magnitude)) if magnitude != float("inf") else magnitude


def gen_vertices_from_raw_obj(
    positions: Sequence[Vector3],
    tcoords: Sequence[Vector2],
    normals: Sequence[Vector3],
    line: str,
) -> List[Vertex]:
    """Build the vertices of one ``f`` line from the position, texture and normal lists.

    Faces without normals get the cross product of their first two edges as normal.
    """
    result: List[Vertex] = []
    current = Vertex()
    no_normal = False

    for corner in split(tail(line), " "):
        parts = split(corner, "/")
        if len(parts) == 1:
            current = Vertex(get_element(positions, parts[0]), current.normal, Vector2(0, 0))
            no_normal = True
        elif len(parts) == 2:
            current = Vertex(
                get_element(positions, parts[0]),
                current.normal,
                get_element(tcoords, parts[1]),
            )
            no_normal = True
        elif len(parts) == 3 and parts[1] == "":
            current = Vertex(
                get_element(positions, parts[0]),
                get_element(normals, parts[2]),
                Vector2(0, 0),
            )
        elif len(parts) == 3:
            current = Vertex(
                get_element(positions, parts[0]),
                get_element(normals, parts[2]),
                get_element(tcoords, parts[1]),
            )
        else:
            continue
        result.append(current)

    if no_normal:
        if len(result) < 3:
            raise ValueError(f"a face needs at least three vertices: {line!r}")
        a = result[0].position - result[1].position
        b = result[2].position - result[1].position
        normal = cross_v3(a, b)
        result = [Vertex(v.position, normal, v.texture_coordinate) for v in result]
    return result


def _emit(indices: List[int], vertices: Sequence[Vertex], *corners: Vector3) -> None:
    for j, vertex in enumerate(vertices):
        for corner in corners:
            if vertex.position == corner:
                indices.append(j)


def vertex_triangulation(vertices: Sequence[Vertex]) -> List[int]:
    """Split a polygon into triangles by ear clipping; returns indices into ``vertices``."""
    if len(vertices) < 3:
        return []
    if len(vertices) == 3:
        return [0, 1, 2]

    indices: List[int] = []
    remaining = list(vertices)

    while True:
        progressed = False
        i = 0
        while i < len(remaining):
            prev = remaining[i - 1].position
            cur = remaining[i].position
            nxt = remaining[(i + 1) % len(remaining)].position

            if len(remaining) == 3:
                _emit(indices, vertices, cur, prev, nxt)
                remaining.clear()
                progressed = True
                break

            if len(remaining) == 4:
                _emit(indices, vertices, cur, prev, nxt)
                other = next(
                    (
                        v.position
                        for v in remaining
                        if v.position not in (cur, prev, nxt)
                    ),
                    Vector3(),
                )
                _emit(indices, vertices, prev, nxt, other)
                remaining.clear()
                progressed = True
                break

            occupied = any(
                in_triangle(v.position, prev, cur, nxt)
                and v.position not in (prev, cur, nxt)
                for v in vertices
            )
            if occupied:
                i += 1
                continue

            _emit(indices, vertices, cur, prev, nxt)
            for j, vertex in enumerate(remaining):
                if vertex.position == cur:
                    del remaining[j]
                    break
            progressed = True
            i = 0

        if not indices or not remaining or not progressed:
            break
    return indices


class Loader:
    """Loads meshes, vertices, indices and materials from OBJ files."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.loaded_meshes: List[Mesh] = []
        self.loaded_vertices: List[Vertex] = []
        self.loaded_indices: List[int] = []
        self.loaded_materials: List[Material] = []
        self._stream = stream

    def _say(self, text: str) -> None:
        if self._stream is not None:
            self._stream.write(text)

    def load_file(self, path: PathLike) -> bool:
        """Load an ``.obj`` file; returns whether anything was loaded.

        Raises ``ValueError`` for a path without the ``.obj`` suffix and
        ``OSError`` when the file cannot be opened.
        """
        path_text = os.fspath(path)
        if not path_text.endswith(".obj"):
            raise ValueError(f"not an .obj file: {path_text!r}")

        with open(path_text, encoding="utf-8", errors="replace") as handle:
            self.loaded_meshes.clear()
            self.loaded_vertices.clear()
            self.loaded_indices.clear()

            positions: List[Vector3] = []
            tcoords: List[Vector2] = []
            normals: List[Vector3] = []
            vertices: List[Vertex] = []
            indices: List[int] = []
            material_names: List[str] = []
            listening = False
            mesh_name = ""
            indicator = _OUTPUT_EVERY_NTH

            for raw in handle:
                line = raw.rstrip("\n")
                token = first_token(line)

                indicator = (indicator + 1) % _OUTPUT_EVERY_NTH
                if indicator == 1 and mesh_name:
                    material = f"\t| material: {material_names[-1]}" if material_names else ""
                    self._say(
                        f"\r- {mesh_name}\t| vertices > {len(positions)}"
                        f"\t| texcoords > {len(tcoords)}\t| normals > {len(normals)}"
                        f"\t| triangles > {len(vertices) // 3}{material}"
                    )

                if token in ("o", "g") or line.startswith("g"):
                    if listening and indices and vertices:
                        self.loaded_meshes.append(Mesh(mesh_name, list(vertices), list(indices)))
                        vertices.clear()
                        indices.clear()
                        mesh_name = tail(line)
                    else:
                        mesh_name = tail(line) if token in ("o", "g") else "unnamed"
                    listening = True
                    self._say("\n")
                    indicator = 0

                if token == "v":
                    positions.append(Vector3(*_floats(line, 3)))
                elif token == "vt":
                    u, v = _floats(line, 2)
                    tcoords.append(Vector2(_fraction(u), _fraction(v)))
                elif token == "vn":
                    normals.append(Vector3(*_floats(line, 3)))
                elif token == "f":
                    face = gen_vertices_from_raw_obj(positions, tcoords, normals, line)
                    vertices.extend(face)
                    self.loaded_vertices.extend(face)
                    for index in vertex_triangulation(face):
                        indices.append(len(vertices) - len(face) + index)
                        self.loaded_indices.append(len(self.loaded_vertices) - len(face) + index)
                elif token == "usemtl":
                    material_names.append(tail(line))
                    if indices and vertices:
                        self.loaded_meshes.append(
                            Mesh(f"{mesh_name}_2", list(vertices), list(indices))
                        )
                        vertices.clear()
                        indices.clear()
                    indicator = 0
                elif token == "mtllib":
                    parts = split(path_text, "/")
                    prefix = "".join(part + "/" for part in parts[:-1]) if len(parts) != 1 else ""
                    material_path = prefix + tail(line)
                    self._say(f"\n- find materials in: {material_path}\n")
                    if material_path.endswith(".mtl"):
                        try:
                            self.load_materials(material_path)
                        except OSError:
                            pass

            self._say("\n")
            if indices and vertices:
                self.loaded_meshes.append(Mesh(mesh_name, list(vertices), list(indices)))

        for mesh, name in zip(self.loaded_meshes, material_names):
            match = next((m for m in self.loaded_materials if m.name == name), None)
            if match is not None:
                mesh.material = copy.copy(match)

        return bool(self.loaded_meshes or self.loaded_vertices or self.loaded_indices)

    def load_materials(self, path: PathLike) -> bool:
        """Append the materials of an ``.mtl`` file to :attr:`loaded_materials`.

        Raises ``ValueError`` for a path without the ``.mtl`` suffix and
        ``OSError`` when the file cannot be opened.
        """
        path_text = os.fspath(path)
        if not path_text.endswith(".mtl"):
            raise ValueError(f"not an .mtl file: {path_text!r}")

        with open(path_text, encoding="utf-8", errors="replace") as handle:
            current = Material()
            listening = False
            for raw in handle:
                line = raw.rstrip("\n")
                token = first_token(line)
                if token == "newmtl":
                    if listening:
                        self.loaded_materials.append(current)
                        current = Material()
                    listening = True
                    current.name = tail(line) if len(line) > 7 else "none"
                elif token in ("Ka", "Kd", "Ks"):
                    parts = split(tail(line), " ")
                    if len(parts) == 3:
                        setattr(current, token.lower(), Vector3(*map(_parse_float, parts)))
                elif token == "Ns":
                    current.ns = _parse_float(tail(line))
                elif token == "Ni":
                    current.ni = _parse_float(tail(line))
                elif token == "d":
                    current.d = _parse_float(tail(line))
                elif token == "illum":
                    current.illum = _parse_int(tail(line))
                elif token in _MAP_FIELDS:
                    setattr(current, _MAP_FIELDS[token], tail(line))
            self.loaded_materials.append(current)
        return bool(self.loaded_materials)