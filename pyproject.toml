[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "femmesh"
version = "0.1.0"
description = "Gmsh triangle mesh reading, finite-element mesh construction, point lookup, interpolation and rendering"
requires-python = ">=3.10"
keywords = ["fem", "finite elements", "mesh", "gmsh", "triangulation", "interpolation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
    "Topic :: Scientific/Engineering :: Visualization",
]
dependencies = [
    "numpy",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["femmesh"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
