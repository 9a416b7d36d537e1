[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gluttony"
version = "0.1.0"
description = "Camera math, BVH construction, events and input handling for a small ray-tracing renderer"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["bvh", "camera", "ray tracing", "input mapping", "events", "3d"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["gluttony"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
