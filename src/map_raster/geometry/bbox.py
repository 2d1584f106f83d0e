"""Axis-aligned bounding boxes used as quadtree keys and query windows."""

from collections.abc import Iterable
from dataclasses import dataclass

from map_raster.geometry.point import Point


@dataclass(frozen=True)
class Bbox:
    """An axis-aligned rectangle with min corner ``a`` and max corner ``b``.

    ``a.x <= b.x`` and ``a.y <= b.y`` is assumed by every method but never
    checked.
    """

    a: Point
    b: Point

    @classmethod
    def of_points(cls, points: Iterable[Point]) -> "Bbox":
        """Componentwise min/max over ``points``.

        Raises:
            ValueError: if ``points`` is empty.
        """
        pts = list(points)
        if not pts:
            raise ValueError("Cannot compute the bounding box of no points")
        xs = [p.x for p in pts]
        ys = [p.y for p in pts]
        return cls(Point(min(xs), min(ys)), Point(max(xs), max(ys)))

    @classmethod
    def around(cls, center: Point, half_width: float) -> "Bbox":
        """Square window of ``2 * half_width`` centered on ``center``."""
        return cls(
            Point(center.x - half_width, center.y - half_width),
            Point(center.x + half_width, center.y + half_width),
        )

    @property
    def width(self) -> float:
        return self.b.x - self.a.x

    @property
    def height(self) -> float:
        return self.b.y - self.a.y

    def contains(self, point: Point) -> bool:
        """Inclusive on all four edges."""
        return self.a.x <= point.x <= self.b.x and self.a.y <= point.y <= self.b.y

    def overlaps(self, other: "Bbox") -> bool:
        """True when the rectangles share at least one point (touching counts)."""
        return not (
            self.b.x < other.a.x
            or self.a.x > other.b.x
            or self.b.y < other.a.y
            or self.a.y > other.b.y
        )

    def split(self) -> tuple["Bbox", "Bbox", "Bbox", "Bbox"]:
        """Quarter the box.

        Returns:
            (min-x/min-y, max-x/min-y, min-x/max-y, max-x/max-y) quadrants
        """
        mid_x = self.a.x + self.width / 2.0
        mid_y = self.a.y + self.height / 2.0
        return (
            Bbox(Point(self.a.x, self.a.y), Point(mid_x, mid_y)),
            Bbox(Point(mid_x, self.a.y), Point(self.b.x, mid_y)),
            Bbox(Point(self.a.x, mid_y), Point(mid_x, self.b.y)),
            Bbox(Point(mid_x, mid_y), Point(self.b.x, self.b.y)),
        )
