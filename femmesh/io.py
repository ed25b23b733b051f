"""Conversion of parsed Gmsh data into element-agnostic triangle meshes."""

from __future__ import annotations

import os
from dataclasses import dataclass
from itertools import pairwise
from typing import Iterable, Protocol, TypeVar, Union

from .gmsh import CurveEntity, Gmsh, GmshError, parse_gmsh
from .trimesh import TRIANGLE_SIDES, BorderElement, Point, TriangleMesh


class _HasId(Protocol):
    id: int


_T = TypeVar("_T", bound=_HasId)


@dataclass
class _Edge:
    end: int
    group: int
    claimed: bool = False


def _sorted_by_id(items: Iterable[_T]) -> list[_T]:
    return sorted(items, key=lambda item: item.id)


def _ids_contiguous(items: list[_T]) -> bool:
    return all(b.id == a.id + 1 for a, b in pairwise(items))


def _entity_groups(entities: Iterable[CurveEntity], offset: int) -> dict[int, int]:
    """Map entity tags to group indices, using each entity's first physical tag."""
    return {e.tag: e.physical_tags[0] - offset for e in entities if e.physical_tags}


def parse_triangle_gmsh(source: Union[Gmsh, str, os.PathLike]) -> TriangleMesh:
    """Build a triangle mesh from parsed Gmsh data or from a Gmsh file path.

    Two-point elements become border segments, three-point elements become
    triangles. Every border segment is attached to the triangle side that
    runs in the same direction.
    """
    gmsh = source if isinstance(source, Gmsh) else parse_gmsh(source)

    src_nodes = _sorted_by_id(gmsh.node_section.nodes)
    src_elements = _sorted_by_id(gmsh.element_section.elements)
    src_groups = _sorted_by_id(gmsh.physics_section.names)

    if not _ids_contiguous(src_nodes):
        raise GmshError("Node IDs are not contiguous")
    if not _ids_contiguous(src_elements):
        raise GmshError("Element IDs are not contiguous")
    if not _ids_contiguous(src_groups):
        raise GmshError("Physical group IDs are not contiguous")
    if not src_nodes:
        raise GmshError("No nodes in mesh")
    if not src_groups:
        raise GmshError("No physical groups in mesh")

    node_offset = src_nodes[0].id
    group_offset = src_groups[0].id
    num_nodes = len(src_nodes)

    result = TriangleMesh()
    result.nodes = [Point(node.x, node.y) for node in src_nodes]
    result.groups = [group.name for group in src_groups]

    # Only curves carry the groups of the one-dimensional borders; other
    # entity kinds reuse the same tags.
    entity2group = _entity_groups(gmsh.entity_section.curves, group_offset)

    def node_index(node_id: int) -> int:
        index = node_id - node_offset
        if not 0 <= index < num_nodes:
            raise GmshError(f"Element refers to unknown node {node_id}")
        return index

    edges: list[list[_Edge]] = [[] for _ in range(num_nodes)]
    num_border = 0
    for elem in src_elements:
        if len(elem.points) != 2:
            continue
        num_border += 1
        start, end = (node_index(p) for p in elem.points)
        edges[start].append(_Edge(end=end, group=entity2group.get(elem.entity, 0)))

    for elem in src_elements:
        if len(elem.points) != 3:
            continue
        a, b, c = (node_index(p) for p in elem.points)
        result.elements.append((a, b, c))

    if len(result.elements) + num_border != len(src_elements):
        raise GmshError("Not all elements have been parsed")

    for element_index, pts in enumerate(result.elements):
        for side_index, side in enumerate(TRIANGLE_SIDES):
            start = pts[side.start]
            end = pts[side.end]
            edge = next((e for e in edges[start] if e.end == end), None)
            if edge is None:
                continue
            edge.claimed = True
            result.border_elements.append(
                BorderElement(element=element_index, side=side_index, group=edge.group)
            )

    return result