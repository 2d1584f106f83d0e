"""Lines, line segments and polygons with the predicates the raster needs."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from functools import cached_property
from typing import NamedTuple

from map_raster.geometry.bbox import Bbox
from map_raster.geometry.point import Point


class Line(NamedTuple):
    """An infinite line in general form ``a*x + b*y + c = 0``."""

    a: float
    b: float
    c: float

    def side(self, point: Point) -> float:
        """Signed value of the line equation at ``point``.

        Zero on the line; the sign tells which half-plane the point is in.
        """
        return self.a * point.x + self.b * point.y + self.c


@dataclass(frozen=True)
class LineSegment:
    """A segment between two endpoints."""

    a: Point
    b: Point

    @cached_property
    def line(self) -> Line:
        return Line(
            a=self.b.y - self.a.y,
            b=self.a.x - self.b.x,
            c=self.b.x * self.a.y - self.a.x * self.b.y,
        )

    @cached_property
    def bbox(self) -> Bbox:
        return Bbox(
            Point(min(self.a.x, self.b.x), min(self.a.y, self.b.y)),
            Point(max(self.a.x, self.b.x), max(self.a.y, self.b.y)),
        )

    def length_squared(self) -> float:
        return self.a.distance_squared(self.b)

    def intersects_line(self, line: Line) -> bool:
        """False only when both endpoints lie strictly on the same side of ``line``."""
        d1 = line.side(self.a)
        d2 = line.side(self.b)
        if d1 > 0.0 and d2 > 0.0:
            return False
        if d1 < 0.0 and d2 < 0.0:
            return False
        return True

    def intersects_segment(self, other: "LineSegment") -> bool:
        """Closed intersection test: touching endpoints count as intersecting."""
        return self.intersects_line(other.line) and other.intersects_line(self.line)

    def crosses_segment(self, other: "LineSegment") -> bool:
        """Half-open intersection test used for ray casting.

        A zero side value counts as the non-negative side, so a ray passing
        exactly through a shared vertex is crossed by only one of the two
        edges meeting there (or by neither when the boundary just touches it).
        """
        return _straddles(self, other.line) and _straddles(other, self.line)

    def distance_squared_to_point(self, point: Point) -> float:
        """Squared distance from ``point`` to the nearest point of the segment."""
        length_sq = self.length_squared()
        if length_sq == 0.0:
            return self.a.distance_squared(point)

        direction = self.b - self.a
        t = (point - self.a).dot(direction) / length_sq
        t = max(0.0, min(1.0, t))
        projection = self.a.translated(direction.scaled(t))
        return point.distance_squared(projection)


def _straddles(segment: LineSegment, line: Line) -> bool:
    return (line.side(segment.a) >= 0.0) != (line.side(segment.b) >= 0.0)


def polygon_edges(vertices: Sequence[Point]) -> tuple[LineSegment, ...]:
    """Consecutive vertex pairs plus the closing edge from last back to first."""
    edges = [LineSegment(vertices[i - 1], vertices[i]) for i in range(1, len(vertices))]
    edges.append(LineSegment(vertices[-1], vertices[0]))
    return tuple(edges)


@dataclass(frozen=True)
class Polygon:
    """A simple polygon given by its vertex ring.

    The ring does not need to repeat its first vertex; the closing edge is
    always added. Edges and bounding box are computed once on construction.
    Self-intersecting or zero-area rings are accepted as-is and give
    whatever the crossing count gives.
    """

    vertices: tuple[Point, ...]
    edges: tuple[LineSegment, ...] = field(init=False, repr=False, compare=False)
    bbox: Bbox = field(init=False, repr=False, compare=False)

    def __init__(self, vertices: Iterable[Point | tuple[float, float]]) -> None:
        ring = tuple(Point(float(v[0]), float(v[1])) for v in vertices)
        if not ring:
            raise ValueError("Polygon needs at least one vertex")
        object.__setattr__(self, "vertices", ring)
        object.__setattr__(self, "edges", polygon_edges(ring))
        object.__setattr__(self, "bbox", Bbox.of_points(ring))

    def contains_point(self, point: Point) -> bool:
        """Crossing-number test.

        Casts a segment from one unit below/left of the bounding box's min
        corner to ``point`` and counts the edges it crosses; odd means inside.
        """
        if not self.bbox.contains(point):
            return False

        ray = LineSegment(Point(self.bbox.a.x - 1.0, self.bbox.a.y - 1.0), point)
        crossings = sum(1 for edge in self.edges if edge.crosses_segment(ray))
        return crossings % 2 == 1
