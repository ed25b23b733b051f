"""Mapping of scalar values to colours."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

Color = tuple[float, ...]


class AbstractColorScale(ABC):
    """Maps a scalar to a colour."""

    @abstractmethod
    def __call__(self, x: float) -> Color:
        """Return the colour for x."""


class SimpleColorScale(AbstractColorScale):
    """Piecewise-linear colour ramp over [min_value, max_value].

    The colours are spread evenly over the range; values outside it are
    clamped to the end colours.
    """

    def __init__(self, min_value: float, max_value: float, colors: Sequence[Sequence[float]]) -> None:
        if min_value >= max_value:
            raise ValueError("Bad min/max")
        if len(colors) < 2:
            raise ValueError("No colors")
        self.min_value = float(min_value)
        self.max_value = float(max_value)
        self.colors: tuple[Color, ...] = tuple(tuple(float(c) for c in color) for color in colors)

    def __call__(self, x: float) -> Color:
        n = len(self.colors)
        clamped = min(max(x, self.min_value), self.max_value)
        position = (n - 1) * (clamped - self.min_value) / (self.max_value - self.min_value)
        index = min(int(position), n - 2)
        k = position - index
        low = self.colors[index]
        high = self.colors[index + 1]
        return tuple((1.0 - k) * a + k * b for a, b in zip(low, high))