"""Planar geometry primitives and predicates."""

from map_raster.geometry.bbox import Bbox
from map_raster.geometry.point import NonFiniteCoordinateError, Point, Vec2, require_finite
from map_raster.geometry.shapes import Line, LineSegment, Polygon, polygon_edges

__all__ = [
    "Bbox",
    "Line",
    "LineSegment",
    "NonFiniteCoordinateError",
    "Point",
    "Polygon",
    "Vec2",
    "polygon_edges",
    "require_finite",
]
