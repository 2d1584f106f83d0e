"""Points and displacement vectors in the raster's geographic plane."""

import math
from typing import NamedTuple


class NonFiniteCoordinateError(ValueError):
    """Raised when a coordinate is NaN or infinite."""


class Vec2(NamedTuple):
    """A 2D displacement."""

    x: float
    y: float

    def length_squared(self) -> float:
        return self.x * self.x + self.y * self.y

    def dot(self, other: "Vec2") -> float:
        return self.x * other.x + self.y * other.y

    def scaled(self, factor: float) -> "Vec2":
        return Vec2(self.x * factor, self.y * factor)


class Point(NamedTuple):
    """A 2D point (x is longitude, y is latitude once reprojected)."""

    x: float
    y: float

    def __sub__(self, other: "Point") -> Vec2:
        return Vec2(self.x - other.x, self.y - other.y)

    def translated(self, offset: Vec2) -> "Point":
        return Point(self.x + offset.x, self.y + offset.y)

    def distance_squared(self, other: "Point") -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy

    def distance(self, other: "Point") -> float:
        return math.sqrt(self.distance_squared(other))

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)


def require_finite(point: Point, what: str = "coordinate") -> Point:
    """Return ``point`` unchanged, or raise if either component is NaN/inf."""
    if not point.is_finite():
        raise NonFiniteCoordinateError(f"Non-finite {what}: ({point.x}, {point.y})")
    return point
