"""Reading of Gmsh 4 ASCII mesh files."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Sequence


class GmshError(ValueError):
    """Raised when a mesh file cannot be read or is malformed."""


@dataclass
class SectionedText:
    """Text split into named sections; the unnamed section has id 0."""

    name2id: dict[str, int] = field(default_factory=dict)
    names: list[str] = field(default_factory=list)
    content: list[str] = field(default_factory=list)

    def content_of(self, name: str) -> Optional[str]:
        """Return the text of the section with the given name, or None."""
        section_id = self.name2id.get(name)
        if section_id is None:
            return None
        return self.content[section_id]


@dataclass
class ParsedNode:
    id: int = 0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass
class NodeSection:
    nodes: list[ParsedNode] = field(default_factory=list)


@dataclass
class ParsedElement:
    id: int = 0
    entity: int = 0
    points: list[int] = field(default_factory=list)


@dataclass
class ElementSection:
    elements: list[ParsedElement] = field(default_factory=list)


@dataclass
class PhysicalName:
    dimension: int
    id: int
    name: str


@dataclass
class PhysicsSection:
    names: list[PhysicalName] = field(default_factory=list)


@dataclass
class PointEntity:
    tag: int = 0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    physical_tags: list[int] = field(default_factory=list)


@dataclass
class CurveEntity:
    tag: int = 0
    min_x: float = 0.0
    min_y: float = 0.0
    min_z: float = 0.0
    max_x: float = 0.0
    max_y: float = 0.0
    max_z: float = 0.0
    physical_tags: list[int] = field(default_factory=list)
    bounding_points: list[int] = field(default_factory=list)


@dataclass
class SurfaceEntity:
    tag: int = 0
    min_x: float = 0.0
    min_y: float = 0.0
    min_z: float = 0.0
    max_x: float = 0.0
    max_y: float = 0.0
    max_z: float = 0.0
    physical_tags: list[int] = field(default_factory=list)
    bounding_curves: list[int] = field(default_factory=list)


@dataclass
class VolumeEntity:
    tag: int = 0
    min_x: float = 0.0
    min_y: float = 0.0
    min_z: float = 0.0
    max_x: float = 0.0
    max_y: float = 0.0
    max_z: float = 0.0
    physical_tags: list[int] = field(default_factory=list)
    bounding_surfaces: list[int] = field(default_factory=list)


@dataclass
class EntitySection:
    points: list[PointEntity] = field(default_factory=list)
    curves: list[CurveEntity] = field(default_factory=list)
    surfaces: list[SurfaceEntity] = field(default_factory=list)
    volumes: list[VolumeEntity] = field(default_factory=list)


@dataclass
class Gmsh:
    node_section: NodeSection = field(default_factory=NodeSection)
    element_section: ElementSection = field(default_factory=ElementSection)
    physics_section: PhysicsSection = field(default_factory=PhysicsSection)
    entity_section: EntitySection = field(default_factory=EntitySection)


def section_text(stream: Iterable[str]) -> SectionedText:
    """Split lines into sections delimited by "$Name" ... "$EndName" markers.

    Empty lines are dropped. Text outside any section goes to the unnamed
    section "", which always exists with id 0.
    """
    result = SectionedText(name2id={"": 0}, names=[""])
    parts: list[list[str]] = [[]]
    current = 0
    for raw in stream:
        line = raw.rstrip("\n")
        if not line:
            continue
        if line.startswith("$"):
            if line.startswith("$End"):
                current = 0
            else:
                name = line[1:]
                if name not in result.name2id:
                    result.name2id[name] = len(parts)
                    result.names.append(name)
                    parts.append([])
                current = result.name2id[name]
            continue
        parts[current].append(line + "\n")
    result.content = ["".join(p) for p in parts]
    return result


def _parse_line(line: str, *types: Callable[[str], object]) -> Optional[tuple]:
    """Convert the leading whitespace-separated tokens of a line, or return None."""
    tokens = line.split()
    if len(tokens) < len(types):
        return None
    try:
        return tuple(convert(token) for convert, token in zip(types, tokens))
    except ValueError:
        return None


def _parse_next(lines: Iterator[str], *types: Callable[[str], object]) -> Optional[tuple]:
    line = next(lines, None)
    if line is None:
        return None
    return _parse_line(line, *types)


def _leading_ints(tokens: Sequence[str]) -> list[int]:
    """Read integers from the start of tokens until one fails to convert."""
    values = []
    for token in tokens:
        try:
            values.append(int(token))
        except ValueError:
            break
    return values


def parse_node_section(text: str) -> NodeSection:
    """Parse the body of a $Nodes section."""
    lines = iter(text.splitlines())
    header = _parse_next(lines, int, int, int, int)
    if header is None:
        raise GmshError("Failed to parse header for Nodes")
    num_blocks = header[0]

    result = NodeSection()
    for block in range(num_blocks):
        info = _parse_next(lines, int, int, int, int)
        if info is None:
            raise GmshError(f"Failed to parse entity info with ID{block}")
        count = info[3]

        block_nodes = []
        for j in range(count):
            parsed = _parse_next(lines, int)
            if parsed is None:
                raise GmshError(f"Failed to parse node #{j}'s tag from entity info with ID{block}")
            block_nodes.append(ParsedNode(id=parsed[0]))
        for j, node in enumerate(block_nodes):
            parsed = _parse_next(lines, float, float, float)
            if parsed is None:
                raise GmshError(f"Failed to parse node #{j}'s coords from entity info with ID{block}")
            node.x, node.y, node.z = parsed
        result.nodes.extend(block_nodes)
    return result


def parse_element_section(text: str) -> ElementSection:
    """Parse the body of an $Elements section."""
    lines = iter(text.splitlines())
    header = _parse_next(lines, int, int, int, int)
    if header is None:
        raise GmshError("Failed to parse header for Elements")
    num_blocks = header[0]

    result = ElementSection()
    for block in range(num_blocks):
        info = _parse_next(lines, int, int, int, int)
        if info is None:
            raise GmshError(f"Failed to parse element block info with ID{block}")
        _, entity_tag, _, count = info

        for j in range(count):
            line = next(lines, None)
            if line is None:
                raise GmshError(f"Missing element #{j} in block with ID{block}")
            tokens = line.split()
            ids = _leading_ints(tokens)
            if not ids:
                raise GmshError(f"Failed to parse tag of element #{j} in block with ID{block}")
            result.elements.append(ParsedElement(id=ids[0], entity=entity_tag, points=ids[1:]))
    return result


def parse_physics_section(text: str) -> PhysicsSection:
    """Parse the body of a $PhysicalNames section; quotes around names are removed."""
    lines = iter(text.splitlines())
    header = _parse_next(lines, int)
    if header is None:
        raise GmshError("Failed to parse number of names in PhysicalSection")

    result = PhysicsSection()
    for _ in range(header[0]):
        parsed = _parse_next(lines, int, int, str)
        if parsed is None:
            raise GmshError("Failed to parse line from physics section")
        dim, tag, name = parsed
        if len(name) < 2:
            raise GmshError("Name too short")
        result.names.append(PhysicalName(dimension=dim, id=tag, name=name[1:-1]))
    return result


def _parse_bounded_entity(line: Optional[str]) -> Optional[tuple[int, list[float], list[int], list[int]]]:
    if line is None:
        return None
    tokens = line.split()
    if len(tokens) < 7:
        return None
    try:
        tag = int(tokens[0])
        box = [float(t) for t in tokens[1:7]]
    except ValueError:
        return None
    rest = iter(tokens[7:])

    def read_list() -> Optional[list[int]]:
        try:
            count = int(next(rest))
            return [int(next(rest)) for _ in range(count)]
        except (StopIteration, ValueError):
            return None

    physical = read_list()
    if physical is None:
        return None
    bounding = read_list()
    if bounding is None:
        return None
    return tag, box, physical, bounding


def parse_entity_section(text: str) -> EntitySection:
    """Parse the body of an $Entities section."""
    lines = iter(text.splitlines())
    header = _parse_next(lines, int, int, int, int)
    if header is None:
        raise GmshError("Failed to parse entities header")
    num_points, num_curves, num_surfaces, num_volumes = header

    result = EntitySection()
    for _ in range(num_points):
        line = next(lines, None)
        parsed = None if line is None else _parse_line(line, int, float, float, float, int)
        if parsed is None:
            raise GmshError("Failed to parse point")
        tag, x, y, z, num_tags = parsed
        tags = _leading_ints(line.split()[5:])
        if num_tags != len(tags):
            raise GmshError("Point's physical tags have an incorrect size")
        result.points.append(PointEntity(tag=tag, x=x, y=y, z=z, physical_tags=tags))

    kinds = (
        (num_curves, CurveEntity, "bounding_points", result.curves, "curve"),
        (num_surfaces, SurfaceEntity, "bounding_curves", result.surfaces, "surface"),
        (num_volumes, VolumeEntity, "bounding_surfaces", result.volumes, "volume"),
    )
    for count, cls, bounding_name, target, label in kinds:
        for _ in range(count):
            parsed = _parse_bounded_entity(next(lines, None))
            if parsed is None:
                raise GmshError(f"Failed to parse {label}")
            tag, box, physical, bounding = parsed
            target.append(
                cls(
                    tag,
                    *box,
                    physical_tags=physical,
                    **{bounding_name: bounding},
                )
            )
    return result


def _format_number(value: float) -> str:
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text


def dump_points_and_elements_2d(
    prefix: str, nodes: Iterable[ParsedNode], elements: Iterable[ParsedElement]
) -> None:
    """Write nodes, border segments and triangles, sorted by id, to text files.

    The files are "<prefix>nodes.txt", "<prefix>borders.txt" and
    "<prefix>elements.txt", with tab-separated columns.
    """
    sorted_nodes = sorted(nodes, key=lambda n: n.id)
    sorted_elements = sorted(elements, key=lambda e: e.id)

    with open(f"{prefix}nodes.txt", "w", encoding="utf-8") as node_file:
        for node in sorted_nodes:
            node_file.write(f"{node.id}\t{_format_number(node.x)}\t{_format_number(node.y)}\n")

    with open(f"{prefix}borders.txt", "w", encoding="utf-8") as borders, open(
        f"{prefix}elements.txt", "w", encoding="utf-8"
    ) as triangles:
        for element in sorted_elements:
            points = "".join(f"\t{p}" for p in element.points)
            if len(element.points) == 2:
                borders.write(f"{element.entity}\t{element.id}{points}\n")
            elif len(element.points) == 3:
                triangles.write(f"{element.id}{points}\n")


def dump_physical_groups(file_name: str, phys: PhysicsSection) -> None:
    """Write "<id>\\t<name>" for every physical name."""
    with open(file_name, "w", encoding="utf-8") as file:
        for name in phys.names:
            file.write(f"{name.id}\t{name.name}\n")


def parse_gmsh(mesh_file_name: str | Path) -> Gmsh:
    """Read a Gmsh 4 ASCII file with Nodes, Elements, Entities and PhysicalNames."""
    try:
        with open(mesh_file_name, encoding="utf-8") as file:
            sectioned = section_text(file)
    except OSError as exc:
        raise GmshError(f"Failed to open mesh file [{mesh_file_name}]") from exc

    nodes_text = sectioned.content_of("Nodes")
    if nodes_text is None:
        raise GmshError("No Nodes section!")
    elements_text = sectioned.content_of("Elements")
    if elements_text is None:
        raise GmshError("No Elements section!")

    result = Gmsh()
    result.node_section = parse_node_section(nodes_text)
    result.element_section = parse_element_section(elements_text)

    entities_text = sectioned.content_of("Entities")
    if entities_text is None:
        raise GmshError("No Entities section!")
    result.entity_section = parse_entity_section(entities_text)

    phys_text = sectioned.content_of("PhysicalNames")
    if phys_text is None:
        raise GmshError("No physical section!")
    result.physics_section = parse_physics_section(phys_text)

    return result