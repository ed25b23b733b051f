import pytest

from femmesh.gmsh import (
    CurveEntity,
    ElementSection,
    EntitySection,
    Gmsh,
    GmshError,
    NodeSection,
    ParsedElement,
    ParsedNode,
    PhysicalName,
    PhysicsSection,
    SurfaceEntity,
)
from femmesh.io import parse_triangle_gmsh
from femmesh.trimesh import TRIANGLE_SIDES, BorderElement, Point


def _square_gmsh() -> Gmsh:
    nodes = [
        ParsedNode(id=3, x=1.0, y=1.0),
        ParsedNode(id=1, x=0.0, y=0.0),
        ParsedNode(id=2, x=1.0, y=0.0),
        ParsedNode(id=4, x=0.0, y=1.0),
    ]
    elements = [
        ParsedElement(id=1, entity=1, points=[1, 2]),
        ParsedElement(id=2, entity=2, points=[2, 3]),
        ParsedElement(id=3, entity=3, points=[3, 4]),
        ParsedElement(id=4, entity=4, points=[4, 1]),
        ParsedElement(id=5, entity=1, points=[1, 2, 3]),
        ParsedElement(id=6, entity=1, points=[1, 3, 4]),
    ]
    curves = [
        CurveEntity(tag=1, physical_tags=[1], bounding_points=[1, 2]),
        CurveEntity(tag=2, physical_tags=[2], bounding_points=[2, 3]),
        CurveEntity(tag=3, physical_tags=[2], bounding_points=[3, 4]),
        CurveEntity(tag=4, physical_tags=[2], bounding_points=[4, 1]),
    ]
    surfaces = [SurfaceEntity(tag=1, bounding_curves=[1, 2, 3, 4])]
    names = [PhysicalName(1, 2, "walls"), PhysicalName(1, 1, "bottom")]
    return Gmsh(
        node_section=NodeSection(nodes),
        element_section=ElementSection(elements),
        physics_section=PhysicsSection(names),
        entity_section=EntitySection(curves=curves, surfaces=surfaces),
    )


SQUARE_FILE = """$PhysicalNames
2
1 1 "bottom"
1 2 "walls"
$EndPhysicalNames
$Entities
0 4 1 0
1 0 0 0 1 0 0 1 1 2 1 2
2 1 0 0 1 1 0 1 2 2 2 3
3 0 1 0 1 1 0 1 2 2 3 4
4 0 0 0 0 1 0 1 2 2 4 1
1 0 0 0 1 1 0 0 4 1 2 3 4
$EndEntities
$Nodes
1 4 1 4
2 1 0 4
1
2
3
4
0 0 0
1 0 0
1 1 0
0 1 0
$EndNodes
$Elements
5 6 1 6
1 1 1 1
1 1 2
1 2 1 1
2 2 3
1 3 1 1
3 3 4
1 4 1 1
4 4 1
2 1 2 2
5 1 2 3
6 1 3 4
$EndElements
"""


def test_nodes_sorted_and_zero_based():
    mesh = parse_triangle_gmsh(_square_gmsh())
    assert mesh.nodes == [Point(0.0, 0.0), Point(1.0, 0.0), Point(1.0, 1.0), Point(0.0, 1.0)]
    assert mesh.elements == [(0, 1, 2), (0, 2, 3)]
    assert mesh.groups == ["bottom", "walls"]


def test_border_elements_assigned_to_sides():
    mesh = parse_triangle_gmsh(_square_gmsh())
    assert mesh.border_elements == [
        BorderElement(element=0, side=0, group=0),
        BorderElement(element=0, side=2, group=1),
        BorderElement(element=1, side=2, group=1),
        BorderElement(element=1, side=4, group=1),
    ]


def test_border_sides_match_segments():
    mesh = parse_triangle_gmsh(_square_gmsh())
    segments = {(0, 1), (1, 2), (2, 3), (3, 0)}
    found = set()
    for border in mesh.border_elements:
        tri = mesh.elements[border.element]
        side = TRIANGLE_SIDES[border.side]
        found.add((tri[side.start], tri[side.end]))
    assert found == segments


def test_reading_from_file_matches_in_memory(tmp_path):
    path = tmp_path / "square.msh"
    path.write_text(SQUARE_FILE, encoding="utf-8")
    from_file = parse_triangle_gmsh(path)
    from_memory = parse_triangle_gmsh(_square_gmsh())
    assert from_file == from_memory


def test_non_contiguous_nodes_rejected():
    gmsh = _square_gmsh()
    gmsh.node_section.nodes[0].id = 7
    with pytest.raises(GmshError, match="Node IDs"):
        parse_triangle_gmsh(gmsh)


def test_non_contiguous_elements_rejected():
    gmsh = _square_gmsh()
    gmsh.element_section.elements[-1].id = 10
    with pytest.raises(GmshError, match="Element IDs"):
        parse_triangle_gmsh(gmsh)


def test_non_contiguous_groups_rejected():
    gmsh = _square_gmsh()
    gmsh.physics_section.names[0].id = 5
    with pytest.raises(GmshError, match="Physical group IDs"):
        parse_triangle_gmsh(gmsh)


def test_unsupported_element_rejected():
    gmsh = _square_gmsh()
    gmsh.element_section.elements.append(ParsedElement(id=7, entity=1, points=[1, 2, 3, 4]))
    with pytest.raises(GmshError, match="Not all elements"):
        parse_triangle_gmsh(gmsh)


def test_missing_file_raises(tmp_path):
    with pytest.raises(GmshError):
        parse_triangle_gmsh(tmp_path / "missing.msh")