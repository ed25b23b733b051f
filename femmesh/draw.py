"""Rendering of meshes and fields into BGR-ordered 8-bit images."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np
from PIL import Image, ImageDraw

from .color_scale import AbstractColorScale
from .concrete_mesh import ConcreteMesh
from .interpolator import Interpolator
from .triangle_lookup import TriangleLookup
from .trimesh import Point

_BORDER_PX = 100

_TRIANGLE_COLOR = (0, 0, 255)
_BORDER_COLORS = (
    (0, 255, 0),
    (255, 0, 0),
    (255, 0, 255),
    (0, 255, 255),
    (255, 255, 0),
    (0, 128, 0),
    (128, 0, 0),
    (128, 0, 128),
)
_NODE_COLOR = (128, 128, 128)
_TEXT_COLOR = (255, 255, 255)
_VELOCITY_COLOR = (255, 255, 255)


def _pixel(color: Sequence[float]) -> tuple[int, int, int]:
    return tuple(min(255, max(0, int(c))) for c in color[:3])  # type: ignore[return-value]


def _arrowed_line(
    draw: ImageDraw.ImageDraw,
    a: tuple[int, int],
    b: tuple[int, int],
    color: tuple[int, int, int],
    thickness: int,
    tip_length: float,
) -> None:
    draw.line([a, b], fill=color, width=thickness)
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    tip = math.hypot(dx, dy) * tip_length
    angle = math.atan2(dy, dx)
    for sign in (1.0, -1.0):
        p = (
            round(b[0] + tip * math.cos(angle + sign * math.pi / 4)),
            round(b[1] + tip * math.sin(angle + sign * math.pi / 4)),
        )
        draw.line([p, b], fill=color, width=thickness)


def _circle(draw: ImageDraw.ImageDraw, center: tuple[int, int], radius: int, color) -> None:
    x, y = center
    draw.ellipse([x - radius, y - radius, x + radius, y + radius], fill=color)


def draw_mesh(mesh: ConcreteMesh, scale: float) -> np.ndarray:
    """Draw triangles, border segments (as arrows, coloured by group) and numbered nodes."""
    if not mesh.nodes:
        raise ValueError("Mesh has no nodes to draw")
    min_x = min(p.x for p in mesh.nodes)
    max_x = max(p.x for p in mesh.nodes)
    min_y = min(p.y for p in mesh.nodes)
    max_y = max(p.y for p in mesh.nodes)

    def to_px(p: Point) -> tuple[int, int]:
        return (int(_BORDER_PX + scale * (p.x - min_x)), int(_BORDER_PX + scale * (p.y - min_y)))

    width = int(2 * _BORDER_PX + (max_x - min_x) * scale)
    height = int(2 * _BORDER_PX + (max_y - min_y) * scale)
    image = Image.new("RGB", (width, height))
    draw = ImageDraw.Draw(image)

    refs = (Point(0, 0), Point(0, 1), Point(1, 0))
    for transform in mesh.element_transforms[: mesh.num_elements]:
        corners = [to_px(transform(r)) for r in refs]
        for k in range(3):
            draw.line([corners[k], corners[(k + 1) % 3]], fill=_TRIANGLE_COLOR)

    for i in range(mesh.num_border_elements):
        _, _, group, _, points = mesh.border_element(i)
        color = _BORDER_COLORS[group % len(_BORDER_COLORS)]
        pixels = [to_px(p) for p in points]
        for a, b in zip(pixels, pixels[1:]):
            length = math.hypot(a[0] - b[0], a[1] - b[1])
            if length == 0:
                continue
            _arrowed_line(draw, a, b, color, 2, 10 / length)

    for i, node in enumerate(mesh.nodes):
        pt = to_px(node)
        _circle(draw, pt, 2, _NODE_COLOR)
        draw.text(pt, str(i), fill=_TEXT_COLOR)

    return np.array(image, dtype=np.uint8)


def draw_values(interpolator: Interpolator, color_scale: AbstractColorScale, scale: float) -> np.ndarray:
    """Colour every pixel covered by the mesh with the interpolated value."""
    rng = interpolator.get_range()
    width = int(rng.width * scale + 1)
    height = int(rng.height * scale + 1)
    result = np.zeros((height, width, 3), dtype=np.uint8)

    inv_s = 1.0 / scale
    for iy in range(height):
        y = (height - 1 - iy) * inv_s + rng.min_y
        for ix in range(width):
            x = ix * inv_s + rng.min_x
            value = interpolator.interpolate(x, y)
            if value is None:
                continue
            result[iy, ix] = _pixel(color_scale(value))
    return result


def _frange(start: float, stop: float, step: float):
    value = start
    while value <= stop:
        yield value
        value += step


def draw_cfd(
    triangle_lookup: TriangleLookup,
    pressure_scale: AbstractColorScale,
    img_scale: float,
    velocity_scale: float,
    velocity_step: float,
    velocity_mesh: ConcreteMesh,
    pressure_mesh: ConcreteMesh,
    velocity_xy: Sequence[float],
    pressure: Sequence[float],
) -> np.ndarray:
    """Colour the pressure field and overlay velocity vectors on a regular grid.

    velocity_xy holds all x components followed by all y components.
    """
    if velocity_step <= 0:
        raise ValueError(f"Bad velocity step [{velocity_step}]")
    num_velocity = len(velocity_mesh.nodes)
    if len(velocity_xy) != 2 * num_velocity:
        raise ValueError(
            f"Expected {2 * num_velocity} velocity components, got {len(velocity_xy)}"
        )
    if len(pressure) != len(pressure_mesh.nodes):
        raise ValueError(
            f"Expected {len(pressure_mesh.nodes)} pressure values, got {len(pressure)}"
        )

    tl = triangle_lookup
    width = 2 * ((int(tl.width * img_scale + 0.5) + 1) // 2)
    height = 2 * ((int(tl.height * img_scale + 0.5) + 1) // 2)
    scale = width / tl.width
    inv_s = 1.0 / scale

    vx = list(velocity_xy[:num_velocity])
    vy = list(velocity_xy[num_velocity:])

    result = np.zeros((height, width, 3), dtype=np.uint8)
    pressure_element = pressure_mesh.base_element
    last = 0
    for iy in range(height):
        y = (height - 1 - iy) * inv_s + tl.min_y
        for ix in range(width):
            x = ix * inv_s + tl.min_x
            found = tl.lookup(x, y, last)
            if found is None:
                continue
            last = found.triangle_id
            ids, _ = pressure_mesh.element(found.triangle_id)
            local = [pressure[j] for j in ids]
            value = pressure_element.value(found.local_x, found.local_y, local)
            result[iy, ix] = _pixel(pressure_scale(value))

    image = Image.fromarray(result, "RGB")
    draw = ImageDraw.Draw(image)

    def to_img(x: float, y: float) -> tuple[int, int]:
        return (
            int((x - tl.min_x) * scale + 0.5),
            int(height - 1 - ((y - tl.min_y) * scale + 0.5)),
        )

    velocity_element = velocity_mesh.base_element
    max_x = tl.min_x + tl.width
    max_y = tl.min_y + tl.height
    half = velocity_step / 2
    for y in _frange(tl.min_y + half, max_y - half, velocity_step):
        for x in _frange(tl.min_x + half, max_x - half, velocity_step):
            found = tl.lookup(x, y, last)
            if found is None:
                continue
            last = found.triangle_id
            ids, _ = velocity_mesh.element(found.triangle_id)
            dx = velocity_element.value(found.local_x, found.local_y, [vx[j] for j in ids])
            dy = velocity_element.value(found.local_x, found.local_y, [vy[j] for j in ids])
            origin = to_img(x, y)
            target = to_img(x + velocity_scale * dx, y + velocity_scale * dy)
            _circle(draw, origin, 1, _VELOCITY_COLOR)
            draw.line([origin, target], fill=_VELOCITY_COLOR)

    return np.array(image, dtype=np.uint8)