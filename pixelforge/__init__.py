"""Small software renderers: Bezier curves, ray-tracing scene geometry and a triangle rasterizer."""

__version__ = "0.1.0"

__all__ = [
    "bezier",
    "objgeometry",
    "objloader",
    "rasterizer",
    "scene",
    "shading",
    "texture",
    "triangle",
    "vector",
]