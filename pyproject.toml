[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "runic"
version = "0.1.0"
description = "Ray tracing building blocks: vectors, rays, a camera, small random generators, console variables and image encoders"
requires-python = ">=3.10"
dependencies = []
keywords = ["ray tracing", "rendering", "camera", "png", "bmp", "tga", "hdr", "jpeg", "config"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["runic"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
