"""Locating the mesh triangle that contains a point."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .concrete_mesh import ConcreteMesh
from .trimesh import Point

_INSIDE_TOLERANCE = 1e-4


@dataclass(frozen=True)
class LookupResult:
    """A triangle and the reference coordinates of a point inside it."""

    triangle_id: int
    local_x: float
    local_y: float


class TriangleLookup:
    """Grid of square-ish segments over the mesh, each listing the triangles it touches."""

    def __init__(self, mesh: ConcreteMesh, h: float) -> None:
        if h <= 0:
            raise ValueError(f"Bad segment size [{h}]")
        if mesh.num_elements == 0:
            raise ValueError("Mesh has no elements")
        self.mesh = mesh

        refs = (Point(0, 0), Point(1, 0), Point(0, 1))
        rects = []
        for transform in mesh.element_transforms:
            corners = [transform(r) for r in refs]
            xs = [c.x for c in corners]
            ys = [c.y for c in corners]
            rects.append((min(xs), min(ys), max(xs), max(ys)))
        boxes = np.array(rects, dtype=float)
        rect_min_x, rect_min_y, rect_max_x, rect_max_y = boxes.T

        self.min_x = float(rect_min_x.min())
        self.min_y = float(rect_min_y.min())
        self.width = float(rect_max_x.max()) - self.min_x
        self.height = float(rect_max_y.max()) - self.min_y

        self.cols = max(1, math.ceil(self.width / h))
        self.rows = max(1, math.ceil(self.height / h))
        self.segm_width = self.width / self.cols
        self.segm_height = self.height / self.rows

        tol = h * 0.01
        self.segment_elements: list[list[int]] = []
        for i in range(self.cols * self.rows):
            iy, ix = divmod(i, self.cols)
            seg_x = self.min_x + ix * self.segm_width
            seg_y = self.min_y + iy * self.segm_height
            outside = (
                (rect_max_x + tol < seg_x)
                | (rect_max_y + tol < seg_y)
                | (seg_x + self.segm_width < rect_min_x - tol)
                | (seg_y + self.segm_height < rect_min_y - tol)
            )
            self.segment_elements.append(np.nonzero(~outside)[0].tolist())

    def self_check_segments(self) -> list[str]:
        """Check that every element node maps to a segment listing that element.

        Returns a description of each problem found; empty when all is well.
        """
        problems = []
        for i in range(self.mesh.num_elements):
            _, points = self.mesh.element(i)
            for k, p in enumerate(points):
                seg = self.segment_id(p.x, p.y)
                if seg is None:
                    problems.append(f"Element {i}, point {k} ({p.x}, {p.y}): no segment ID")
                elif i not in self.segment_elements[seg]:
                    problems.append(
                        f"Element {i}, point {k} ({p.x}, {p.y}): element ID not present "
                        f"in stored element for segment {seg}"
                    )
        return problems

    def segment_id(self, x: float, y: float) -> Optional[int]:
        """Return the index of the segment holding (x, y), or None outside the grid."""
        x1 = x - self.min_x
        y1 = y - self.min_y
        if x1 < 0 or x1 > self.width or y1 < 0 or y1 > self.height:
            return None
        ix = min(int(x1 / self.segm_width) if self.segm_width else 0, self.cols - 1)
        iy = min(int(y1 / self.segm_height) if self.segm_height else 0, self.rows - 1)
        return iy * self.cols + ix

    def test_triangle(self, triangle_id: int, x: float, y: float) -> Optional[LookupResult]:
        """Return the reference coordinates of (x, y) if it lies in the triangle."""
        if not 0 <= triangle_id < self.mesh.num_elements:
            raise IndexError(f"Triangle {triangle_id} out of range")
        ref = self.mesh.inv_element_transforms[triangle_id](Point(x, y))
        tol = _INSIDE_TOLERANCE
        if (
            ref.x < -tol
            or ref.x > 1 + tol
            or ref.y < -tol
            or ref.y > 1 + tol
            or ref.x + ref.y > 1 + tol
        ):
            return None
        return LookupResult(triangle_id, ref.x, ref.y)

    def lookup(self, x: float, y: float, hint: Optional[int] = None) -> Optional[LookupResult]:
        """Find the triangle holding (x, y), trying the hinted triangle first."""
        if x < self.min_x or y < self.min_y or x > self.min_x + self.width or y > self.min_y + self.height:
            return None

        if hint is not None and 0 <= hint < self.mesh.num_elements:
            found = self.test_triangle(hint, x, y)
            if found is not None:
                return found

        seg = self.segment_id(x, y)
        if seg is None:
            return None
        for element_id in self.segment_elements[seg]:
            found = self.test_triangle(element_id, x, y)
            if found is not None:
                return found
        return None