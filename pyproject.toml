[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pixelforge"
version = "0.1.0"
description = "Small software renderers: Bezier curves, ray-tracing scene geometry and a shaded triangle rasterizer"
requires-python = ">=3.10"
keywords = [
    "graphics",
    "rendering",
    "ray tracing",
    "rasterization",
    "bezier",
    "obj",
    "shading",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
    "Topic :: Multimedia :: Graphics",
    "Topic :: Education",
]
dependencies = [
    "numpy",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
pixelforge-bezier = "pixelforge.bezier:main"
pixelforge-rasterize = "pixelforge.shading:main"

[tool.hatch.build.targets.wheel]
packages = ["pixelforge"]

[tool.hatch.build.targets.sdist]
include = ["pixelforge", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
