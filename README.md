# femmesh

A library for two-dimensional triangle meshes in finite-element work:

- `femmesh.gmsh` reads Gmsh 4 ASCII `.msh` files. `parse_gmsh(path)` returns a
  `Gmsh` object with node, element, entity and physical-name sections;
  `section_text`, `parse_node_section`, `parse_element_section`,
  `parse_entity_section` and `parse_physics_section` parse the parts on their
  own. `dump_points_and_elements_2d` and `dump_physical_groups` write the data
  out as tab-separated text files. Malformed input raises `GmshError`
  (a `ValueError`).
- `femmesh.io.parse_triangle_gmsh(source)` takes a `Gmsh` object or a file path
  and returns a `femmesh.trimesh.TriangleMesh`: corner nodes, triangles, physical
  group names, and border segments attached to the triangle side that runs in
  the same direction (`TRIANGLE_SIDES`).
- `femmesh.concrete_mesh.create_mesh(tri_mesh, element)` builds a
  `ConcreteMesh` for a given element type, adding shared side nodes, interior
  nodes and per-element `AffineTransform`s with their inverses.
  `ConcreteMesh.element(i)` and `ConcreteMesh.border_element(i)` return node ids
  and points; `find_group_id(name)` returns a group index or `None`.
- `femmesh.triangle_lookup.TriangleLookup(mesh, h)` places the triangles on a
  grid of cells of about `h` and finds the triangle holding a point:
  `lookup(x, y, hint=None)` returns a `LookupResult` (triangle id and reference
  coordinates) or `None`. `self_check_segments()` returns a list of problems
  found, empty when the grid is consistent.
- `femmesh.interpolator.Interpolator(mesh, h)` evaluates a field given by one
  value per node: `set_values(values)`, then `interpolate(x, y)` (returns
  `None` outside the mesh; raises `RuntimeError` if no values were set).
  `get_range()` returns the covered rectangle.
- `femmesh.draw` renders to `numpy` arrays of shape `(height, width, 3)` and
  type `uint8`: `draw_mesh` (triangles, border arrows coloured by group,
  numbered nodes), `draw_values` (a scalar field through a colour scale) and
  `draw_cfd` (a pressure field with velocity vectors on a regular grid).
  Channels are written in the order of the colour tuples; the fixed colours
  used for lines, borders and nodes are given in blue-green-red order.
- `femmesh.color_scale.SimpleColorScale(min_value, max_value, colors)` is a
  piecewise-linear colour ramp, clamped at both ends; subclass
  `AbstractColorScale` for other mappings.
- `femmesh.config.ConfigParser` reads `key = value` text, and
  `femmesh.stopwatch.Stopwatch` measures elapsed milliseconds.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Example

`create_mesh` needs an element description matching the
`femmesh.concrete_mesh.ElementLike` protocol: `num_nodes`, `pts_per_side`,
`internal_nodes`, `discards_corner_nodes` and `value(x, y, values)`. A linear
triangle looks like this:

```python
from femmesh.io import parse_triangle_gmsh
from femmesh.concrete_mesh import create_mesh
from femmesh.interpolator import Interpolator
from femmesh.color_scale import SimpleColorScale
from femmesh.draw import draw_values


class LinearTriangle:
    num_nodes = 3
    pts_per_side = 2
    internal_nodes = ()
    discards_corner_nodes = False

    def value(self, x, y, values):
        return (1 - x - y) * values[0] + x * values[1] + y * values[2]


tri_mesh = parse_triangle_gmsh("channel.msh")
mesh = create_mesh(tri_mesh, LinearTriangle())

interp = Interpolator(mesh, 0.05)
interp.set_values([node.x for node in mesh.nodes])

scale = SimpleColorScale(0.0, 1.0, [(255, 0, 0), (0, 0, 255)])
image = draw_values(interp, scale, 200.0)
```

To save an image with Pillow, reverse the channels if the colours were given
in blue-green-red order: `PIL.Image.fromarray(image[..., ::-1]).save("out.png")`.

## Configuration

One `key = value` per line; empty lines, lines starting with `#` and lines
without exactly one `=` are skipped, and a repeated key replaces the earlier
value:

```python
from femmesh.config import ConfigParser

config = ConfigParser()
with open("solver.cfg") as stream:
    config.populate(stream)
iterations = config.parse("max_iters", int)  # None if missing or not a number
```

`populate` also takes a string or any iterable of lines. For `int` and `float`
the leading number of the value is used.

## What it does not do

- It ships no finite-element types: the element passed to `create_mesh` is
  supplied by the caller.
- It assembles no matrices and solves no systems; it only prepares meshes,
  looks up points, interpolates and draws.
- It has no command-line program; it is used as a library.