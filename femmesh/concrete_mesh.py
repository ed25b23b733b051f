"""Meshes for concrete finite elements, built from element-agnostic triangle meshes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional, Protocol, Sequence

from .trimesh import TRIANGLE_SIDES, Point, TriangleMesh


@dataclass(frozen=True)
class AffineTransform:
    """The map p -> A p + t with A = [[a, b], [c, d]] and t = (tx, ty)."""

    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    tx: float = 0.0
    ty: float = 0.0

    @classmethod
    def from_reference_triangle(cls, corners: Sequence[Point]) -> "AffineTransform":
        """Map the reference triangle (0,0), (1,0), (0,1) onto the given corners."""
        if len(corners) != 3:
            raise ValueError(f"Expected 3 corners, got {len(corners)}")
        p0, p1, p2 = corners
        return cls(
            a=p1.x - p0.x,
            b=p2.x - p0.x,
            c=p1.y - p0.y,
            d=p2.y - p0.y,
            tx=p0.x,
            ty=p0.y,
        )

    def apply(self, point: Point) -> Point:
        """Return the image of point."""
        return Point(
            self.a * point.x + self.b * point.y + self.tx,
            self.c * point.x + self.d * point.y + self.ty,
        )

    def __call__(self, point: Point) -> Point:
        return self.apply(point)

    def inverse(self) -> "AffineTransform":
        """Return the inverse map; raises ValueError if the map is singular."""
        det = self.a * self.d - self.b * self.c
        if det == 0:
            raise ValueError("Affine transform is not invertible")
        a = self.d / det
        b = -self.b / det
        c = -self.c / det
        d = self.a / det
        return AffineTransform(
            a=a,
            b=b,
            c=c,
            d=d,
            tx=-(a * self.tx + b * self.ty),
            ty=-(c * self.tx + d * self.ty),
        )


class ElementLike(Protocol):
    """What a mesh needs to know about its reference element."""

    @property
    def num_nodes(self) -> int:
        """Number of nodes of one element."""

    @property
    def pts_per_side(self) -> int:
        """Number of nodes on one side, corners included."""

    @property
    def internal_nodes(self) -> Sequence[Point]:
        """Nodes strictly inside the reference triangle."""

    @property
    def discards_corner_nodes(self) -> bool:
        """True if the triangle corners are not nodes of the element."""

    def value(self, x: float, y: float, values: Sequence[float]) -> float:
        """Interpolate node values at the reference point (x, y)."""


class BorderElementOrder(IntEnum):
    """Layout of one record in ConcreteMesh.border_elements."""

    TRIANGLE_ELEMENT = 0
    SIDE = 1
    GROUP = 2
    PTS_START = 3


@dataclass
class ConcreteMesh:
    """A mesh whose nodes are those of a concrete element type.

    elements holds num_elements records of element_size node ids, in the
    node order of the base element. border_elements holds records of
    border_element_size + 3 ints laid out as in BorderElementOrder.
    """

    base_element: ElementLike
    nodes: list[Point] = field(default_factory=list)
    num_elements: int = 0
    elements: list[int] = field(default_factory=list)
    element_transforms: list[AffineTransform] = field(default_factory=list)
    inv_element_transforms: list[AffineTransform] = field(default_factory=list)
    groups: list[str] = field(default_factory=list)
    num_border_elements: int = 0
    border_elements: list[int] = field(default_factory=list)

    @property
    def element_size(self) -> int:
        return self.base_element.num_nodes

    @property
    def border_element_size(self) -> int:
        return self.base_element.pts_per_side

    def element(self, element_id: int) -> tuple[list[int], list[Point]]:
        """Return the node ids and node points of an element."""
        if not 0 <= element_id < self.num_elements:
            raise IndexError(f"Element {element_id} out of range")
        size = self.element_size
        ids = self.elements[element_id * size : (element_id + 1) * size]
        return ids, [self.nodes[i] for i in ids]

    def border_element(self, border_id: int) -> tuple[int, int, int, list[int], list[Point]]:
        """Return (triangle id, side, group, node ids, node points) of a border element."""
        if not 0 <= border_id < self.num_border_elements:
            raise IndexError(f"Border element {border_id} out of range")
        n_pts = self.border_element_size
        step = BorderElementOrder.PTS_START + n_pts
        record = self.border_elements[border_id * step : (border_id + 1) * step]
        ids = record[BorderElementOrder.PTS_START :]
        return (
            record[BorderElementOrder.TRIANGLE_ELEMENT],
            record[BorderElementOrder.SIDE],
            record[BorderElementOrder.GROUP],
            ids,
            [self.nodes[i] for i in ids],
        )

    def find_group_id(self, name: str) -> Optional[int]:
        """Return the index of the named group, or None if there is none."""
        try:
            return self.groups.index(name)
        except ValueError:
            return None


def create_mesh(tri_mesh: TriangleMesh, base_element: ElementLike) -> ConcreteMesh:
    """Build the mesh of base_element over the triangles of tri_mesh.

    Side nodes are shared between neighbouring triangles; internal nodes
    belong to one triangle each.
    """
    nodes = list(tri_mesh.nodes)
    n_vertices = len(nodes)

    # For each vertex, the sides to higher-numbered vertices and their extra node ids
    graph: list[dict[int, list[int]]] = [{} for _ in range(n_vertices)]
    for corner_ids in tri_mesh.elements:
        for a in range(3):
            pa, pb = corner_ids[a], corner_ids[(a + 1) % 3]
            if pa == pb:
                raise ValueError(f"Degenerate side with repeated node {pa}")
            if not (0 <= pa < n_vertices and 0 <= pb < n_vertices):
                raise IndexError(f"Side ({pa}, {pb}) refers to a missing node")
            lo, hi = min(pa, pb), max(pa, pb)
            graph[lo].setdefault(hi, [])

    pts_per_side = base_element.pts_per_side
    extra_per_side = max(0, pts_per_side - 2)
    if extra_per_side > 0:
        h = 1.0 / (extra_per_side + 1)
        for id_from, sides in enumerate(graph):
            start = nodes[id_from]
            for id_to, extra_ids in sides.items():
                end = nodes[id_to]
                for k in range(1, extra_per_side + 1):
                    w = k * h
                    comp = 1.0 - w
                    extra_ids.append(len(nodes))
                    nodes.append(Point(comp * start.x + w * end.x, comp * start.y + w * end.y))

    def side_extra_ids(id_a: int, id_b: int) -> list[int]:
        if id_a < id_b:
            ids = graph[id_a].get(id_b)
            ordered = ids
        else:
            ids = graph[id_b].get(id_a)
            ordered = None if ids is None else ids[::-1]
        if ordered is None or len(ordered) != extra_per_side:
            raise ValueError(f"Side ({id_a}, {id_b}) is not part of the mesh")
        return list(ordered)

    nodes_per_element = base_element.num_nodes
    internal = list(base_element.internal_nodes)
    side_step = max(0, pts_per_side - 1)

    if base_element.discards_corner_nodes:
        nodes = []

    elements: list[int] = []
    transforms: list[AffineTransform] = []
    inverses: list[AffineTransform] = []
    for corner_ids in tri_mesh.elements:
        corners = [tri_mesh.nodes[i] for i in corner_ids]
        transform = AffineTransform.from_reference_triangle(corners)
        transforms.append(transform)
        inverses.append(transform.inverse())

        ids = [0] * nodes_per_element
        if side_step > 0:
            for c, corner in enumerate(corner_ids):
                ids[c * side_step] = corner
        if extra_per_side > 0:
            for a in range(3):
                start = a * side_step + 1
                ids[start : start + extra_per_side] = side_extra_ids(
                    corner_ids[a], corner_ids[(a + 1) % 3]
                )
        if internal:
            base = 3 * side_step
            for k, ref_point in enumerate(internal):
                ids[base + k] = len(nodes)
                nodes.append(transform(ref_point))
        elements.extend(ids)

    step = pts_per_side + BorderElementOrder.PTS_START
    border: list[int] = []
    for src in tri_mesh.border_elements:
        corner_ids = tri_mesh.elements[src.element]
        side = TRIANGLE_SIDES[src.side]
        id_a = corner_ids[side.start]
        id_b = corner_ids[side.end]

        record = [0] * step
        record[BorderElementOrder.TRIANGLE_ELEMENT] = src.element
        record[BorderElementOrder.SIDE] = src.side
        record[BorderElementOrder.GROUP] = src.group
        if step > BorderElementOrder.PTS_START:
            record[BorderElementOrder.PTS_START] = id_a
            record[-1] = id_b
            if extra_per_side > 0:
                first = BorderElementOrder.PTS_START + 1
                record[first : first + extra_per_side] = side_extra_ids(id_a, id_b)
        border.extend(record)

    return ConcreteMesh(
        base_element=base_element,
        nodes=nodes,
        num_elements=len(tri_mesh.elements),
        elements=elements,
        element_transforms=transforms,
        inv_element_transforms=inverses,
        groups=list(tri_mesh.groups),
        num_border_elements=len(tri_mesh.border_elements),
        border_elements=border,
    )