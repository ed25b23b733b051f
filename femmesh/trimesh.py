"""Element-agnostic triangle meshes: corner nodes, triangles, groups and borders."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Point:
    """A point in the plane."""

    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class TriangleSide:
    """A directed side of a triangle, given as indices of its corners."""

    start: int
    end: int


# Every directed side of a triangle; a border element refers to an index here.
TRIANGLE_SIDES: tuple[TriangleSide, ...] = (
    TriangleSide(0, 1),
    TriangleSide(1, 0),
    TriangleSide(1, 2),
    TriangleSide(2, 1),
    TriangleSide(2, 0),
    TriangleSide(0, 2),
)


@dataclass
class BorderElement:
    """A border segment lying on one side of a triangle."""

    element: int
    """Index of the triangle the segment belongs to."""
    side: int
    """Index into TRIANGLE_SIDES."""
    group: int
    """Physical group of the segment."""


@dataclass
class TriangleMesh:
    """Triangles with three nodes at their vertices.

    This is a prototype mesh from which meshes for concrete elements are built.
    """

    nodes: list[Point] = field(default_factory=list)
    elements: list[tuple[int, int, int]] = field(default_factory=list)
    groups: list[str] = field(default_factory=list)
    border_elements: list[BorderElement] = field(default_factory=list)