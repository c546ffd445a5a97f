# pixelforge

Small software renderers written in plain Python with NumPy and Pillow:

- **Bezier curves** (`pixelforge.bezier`): evaluates a curve from its control
  points with de Casteljau's algorithm and draws it, with softened edges,
  onto an RGB canvas.
- **Ray-tracing scene geometry** (`pixelforge.vector`, `pixelforge.scene`):
  vector types, spheres and indexed triangle meshes with ray intersection,
  surface normals and texture coordinates, material settings, point lights
  and a `Scene` container.
- **Triangle rasterizer** (`pixelforge.objgeometry`, `pixelforge.objloader`,
  `pixelforge.texture`, `pixelforge.triangle`, `pixelforge.rasterizer`,
  `pixelforge.shading`): loads Wavefront OBJ/MTL models, applies
  model/view/projection transforms, fills triangles with a depth buffer and
  runs normal, texture, Blinn-Phong, bump or displacement fragment shaders.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Command-line tools

### pixelforge-bezier

Draws a cubic Bezier curve through four control points on a 700x700 canvas,
marks each control point with a small white circle, and saves the image.

```
pixelforge-bezier 100,600 200,100 500,100 600,600 -o curve.png
```

- four positional points, each written as `X,Y`
- `-o`, `--output`: the image file to write (default `my_bezier_curve.png`)
- `--naive`: draw with the direct cubic formula in red instead of
  de Casteljau's algorithm in green

### pixelforge-rasterize

Rasterizes an OBJ model with a fragment shader and writes the image.

```
pixelforge-rasterize output.png phong --model models/spot/spot_triangulated_good.obj
```

- `output`: the image file to write (default `output.png`)
- `shader`: one of `bump`, `displacement`, `normal`, `phong`, `texture`
  (default `displacement`)
- `--model`: the `.obj` file (default `models/spot/spot_triangulated_good.obj`)
- `--diffuse-texture`, `--bump-texture`: texture images; by default
  `spot_texture.png` and `hmap.jpg` next to the model. Both are loaded
  whichever shader is chosen.
- `--angle`: rotation of the model about the y axis in degrees (default 140)
- `--size`: width and height of the image in pixels (default 700)

## Using the library

### Vectors

```python
from pixelforge.vector import Vector3f, normalize, dot_product, cross_product

a = Vector3f(1, 0, 0)
b = Vector3f(0, 1, 0)
print(cross_product(a, b))          # 0, 0, 1
print(dot_product(a, b))            # 0
print(normalize(Vector3f(3, 0, 4))) # 0.6, 0, 0.8
```

`solve_quadratic` returns the two real roots in ascending order or `None`;
`format_progress` and `update_progress` draw a text progress bar.

### Scene geometry

```python
from pixelforge.scene import Light, MeshTriangle, Scene, Sphere
from pixelforge.vector import MaterialType, Vector2f, Vector3f

scene = Scene(width=320, height=240)
sphere = Sphere(Vector3f(0, 0, -5), 1)
sphere.material_type = MaterialType.REFLECTION
scene.add(sphere)
scene.add(Light(Vector3f(-20, 70, 20), 0.5))

hit = sphere.intersect(Vector3f(0, 0, 0), Vector3f(0, 0, -1))
print(hit.t_near)  # 4.0
```

`intersect` returns an `Intersection` (distance, triangle index and
barycentric `uv`) or `None`; `surface_properties` gives the normal and
texture coordinates at a hit, and `MeshTriangle.eval_diffuse_color` returns
a checkerboard colour.

### Rasterizing

`Loader.load_file` reads an `.obj` file (and any `.mtl` library it
references) into meshes; `triangles_from_meshes` turns them into
`Triangle`s; a `Rasterizer` with a fragment shader such as
`phong_fragment_shader` draws them, and `Rasterizer.to_image` returns the
frame buffer as an image array. Textures are loaded with
`Texture.from_file` and sampled by nearest texel (`Texture.get_color`) or
bilinearly (`Texture.get_color_bilinear`).

## What the package does not do

The scene module describes what a ray tracer would draw and can intersect
single rays with it, but the package has no function that shades rays
through a `Scene` (reflection, refraction, shadows) or turns it into an
image, and no command for it. Neither command opens a window: curves and
rasterized models are only written to image files.