"""Vec2: immutable 2D vector used for positions, targets and directions."""

from __future__ import annotations

import math
from dataclasses import dataclass

# Vectors shorter than this normalize to zero instead of blowing up
EPSILON = 1e-12


@dataclass(frozen=True, slots=True)
class Vec2:
    """A 2D float vector."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> Vec2:
        return Vec2(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def length(self) -> float:
        """Euclidean length."""
        return math.hypot(self.x, self.y)

    def distance(self, other: Vec2) -> float:
        """Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def normalize(self) -> Vec2:
        """Unit vector in the same direction, or the zero vector if degenerate."""
        mag = self.length()
        if mag < EPSILON:
            return ZERO
        return Vec2(self.x / mag, self.y / mag)

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


ZERO = Vec2(0.0, 0.0)
ORIGIN = ZERO
