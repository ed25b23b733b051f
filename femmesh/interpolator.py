"""Interpolation of node values over a mesh at arbitrary points."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from .concrete_mesh import ConcreteMesh
from .triangle_lookup import TriangleLookup


@dataclass(frozen=True)
class InterpolatorRange:
    """The bounding rectangle of the interpolated region."""

    min_x: float
    min_y: float
    width: float
    height: float


class Interpolator:
    """Evaluates a field given by its node values at any point of a mesh."""

    def __init__(self, mesh: ConcreteMesh, h: float) -> None:
        if h <= 0:
            raise ValueError(f"Bad segment size [{h}]")
        self.lookup = TriangleLookup(mesh, h)
        self.mesh = mesh
        self.element = mesh.base_element
        self._values: Optional[list[float]] = None
        self._last_element_id: Optional[int] = None

    def interpolate(self, x: float, y: float) -> Optional[float]:
        """Return the field value at (x, y), or None outside the mesh."""
        if self._values is None:
            raise RuntimeError("No values have been set")
        found = self.lookup.lookup(x, y, self._last_element_id)
        if found is None:
            return None
        self._last_element_id = found.triangle_id
        ids, _ = self.mesh.element(found.triangle_id)
        local = [self._values[i] for i in ids]
        return self.element.value(found.local_x, found.local_y, local)

    def set_values(self, values: Sequence[float]) -> None:
        """Set one value per mesh node."""
        expected = len(self.mesh.nodes)
        if len(values) != expected:
            raise ValueError(
                f"Expected values to be of length {expected}, but got {len(values)} instead"
            )
        self._values = [float(v) for v in values]

    def get_range(self) -> InterpolatorRange:
        """Return the rectangle covered by the mesh."""
        return InterpolatorRange(
            min_x=self.lookup.min_x,
            min_y=self.lookup.min_y,
            width=self.lookup.width,
            height=self.lookup.height,
        )