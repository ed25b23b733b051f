"""Triangle meshes for finite-element work: Gmsh input, mesh building, lookup, interpolation and drawing."""

__version__ = "0.1.0"

__all__ = [
    "color_scale",
    "concrete_mesh",
    "config",
    "draw",
    "gmsh",
    "interpolator",
    "io",
    "stopwatch",
    "triangle_lookup",
    "trimesh",
]