"""Conversion of GeoJSON-like features and elevation grids into raster inputs.

Nothing here reads files or talks to the network: callers hand in already
decoded feature dicts (``{"geometry": {...}, "properties": {...}}``) and
numpy arrays, and get back the geometry types the rasterizer indexes.
"""

import logging
import math
from collections.abc import Callable, Iterable, Mapping
from typing import Any

import numpy as np
import shapely
from numpy.typing import NDArray
from shapely.errors import GEOSException, TopologicalError
from shapely.geometry import (
    LineString,
    MultiLineString,
    MultiPolygon,
    shape,
)
from shapely.geometry import Polygon as ShapelyPolygon
from shapely.geometry.base import BaseGeometry

from map_raster.geometry import Bbox, LineSegment, Point, Polygon
from map_raster.raster.types import HeightPoint

logger = logging.getLogger(__name__)

# Elevation given to features that carry no height property at all
DEFAULT_ELEVATION = 10_000

# Grid cell value -> fixed-point tile height
DEFAULT_GRID_SCALE = 350.0 / 2.0

_SUPPORTED_TYPES = {
    "Point",
    "MultiPoint",
    "LineString",
    "MultiLineString",
    "Polygon",
    "MultiPolygon",
}

Feature = Mapping[str, Any]


def feature_elevation(properties: Mapping[str, Any] | None) -> int:
    """Elevation of a feature from its properties.

    Prefers ``korkeusarvo`` (contour height), then ``syvyysarvo`` (depth,
    scaled by 100), then ``pohjankorkeus`` (base height).
    """
    props = properties or {}
    if props.get("korkeusarvo") is not None:
        return int(props["korkeusarvo"])
    if props.get("syvyysarvo") is not None:
        return int(props["syvyysarvo"]) * 100
    if props.get("pohjankorkeus") is not None:
        return int(props["pohjankorkeus"])
    return DEFAULT_ELEVATION


def _to_shapely(geometry: Mapping[str, Any] | None) -> BaseGeometry | None:
    """Parse a GeoJSON-like geometry dict, or None if unusable."""
    if not geometry:
        return None
    geom_type = geometry.get("type")
    if geom_type not in _SUPPORTED_TYPES:
        logger.debug("Skipping unsupported geometry type=%s", geom_type)
        return None
    try:
        geom = shape(geometry)
    except (GEOSException, TopologicalError, ValueError) as e:
        logger.warning("Failed to parse geometry type=%s: %s", geom_type, e)
        return None
    if geom.is_empty:
        return None
    return geom


def _ring_points(coords: Iterable[tuple[float, ...]]) -> list[Point]:
    points = [Point(float(c[0]), float(c[1])) for c in coords]
    # Rings repeat their first vertex; the polygon closes itself.
    if len(points) > 1 and points[0] == points[-1]:
        points.pop()
    return points


def _polygon_rings(geom: ShapelyPolygon) -> list[list[Point]]:
    rings = [_ring_points(geom.exterior.coords)]
    rings.extend(_ring_points(interior.coords) for interior in geom.interiors)
    return [ring for ring in rings if ring]


def polygons_from_geometry(geometry: Mapping[str, Any] | None) -> list[Polygon]:
    """One ``Polygon`` per ring of a Polygon or MultiPolygon geometry.

    Interior rings become polygons of their own, so a courtyard is filled
    like the building around it.
    """
    geom = _to_shapely(geometry)
    if isinstance(geom, ShapelyPolygon):
        parts = [geom]
    elif isinstance(geom, MultiPolygon):
        parts = list(geom.geoms)
    else:
        return []
    return [Polygon(ring) for part in parts for ring in _polygon_rings(part)]


def _chain_segments(points: list[Point]) -> list[LineSegment]:
    return [LineSegment(points[i], points[i + 1]) for i in range(len(points) - 1)]


def segments_from_geometry(geometry: Mapping[str, Any] | None) -> list[LineSegment]:
    """Consecutive vertex pairs of line strings, or of polygon boundaries."""
    geom = _to_shapely(geometry)
    if geom is None:
        return []

    if isinstance(geom, LineString):
        lines = [geom]
    elif isinstance(geom, MultiLineString):
        lines = list(geom.geoms)
    elif isinstance(geom, (ShapelyPolygon, MultiPolygon)):
        boundary = geom.boundary
        lines = list(boundary.geoms) if isinstance(boundary, MultiLineString) else [boundary]
    else:
        return []

    segments: list[LineSegment] = []
    for line in lines:
        points = [Point(float(c[0]), float(c[1])) for c in line.coords]
        segments.extend(_chain_segments(points))
    return segments


def road_segments(features: Iterable[Feature]) -> list[LineSegment]:
    return [seg for f in features for seg in segments_from_geometry(f.get("geometry"))]


def lake_polygons(features: Iterable[Feature]) -> list[Polygon]:
    return [poly for f in features for poly in polygons_from_geometry(f.get("geometry"))]


def building_polygons(features: Iterable[Feature]) -> list[Polygon]:
    return [poly for f in features for poly in polygons_from_geometry(f.get("geometry"))]


def height_samples_from_features(features: Iterable[Feature]) -> list[HeightPoint]:
    """Every vertex of every feature, carrying the feature's elevation.

    Suited to contour lines and spot heights.
    """
    samples: list[HeightPoint] = []
    for feature in features:
        geom = _to_shapely(feature.get("geometry"))
        if geom is None:
            continue
        height = feature_elevation(feature.get("properties"))
        for x, y in shapely.get_coordinates(geom):
            samples.append(HeightPoint(height=height, coords=Point(float(x), float(y))))
    return samples


def height_samples_from_grid(
    values: NDArray[np.floating[Any]],
    extent: Bbox,
    scale: float = DEFAULT_GRID_SCALE,
    to_geographic: Callable[[Point], Point] | None = None,
    nodata: float | None = None,
) -> list[HeightPoint]:
    """Turn a gridded elevation model into height samples.

    Row ``r`` of ``values`` sits at ``extent.a.y + r / rows * extent.height``
    and column ``c`` at ``extent.a.x + c / cols * extent.width``, in the
    grid's own projected coordinates. ``to_geographic`` maps that point into
    the raster's coordinate space (identity when omitted).

    Args:
        values: 2D elevation array, rows along y and columns along x
        extent: Projected rectangle covered by the array
        scale: Multiplier applied before truncating to a fixed-point height
        to_geographic: Optional coordinate conversion
        nodata: Cell value to skip, in addition to NaN/inf

    Returns:
        One HeightPoint per usable cell
    """
    grid = np.asarray(values, dtype=np.float64)
    if grid.ndim != 2:
        raise ValueError(f"Elevation grid must be 2D, got shape {grid.shape}")

    rows, cols = grid.shape
    samples: list[HeightPoint] = []
    skipped = 0

    for col in range(cols):
        x = extent.a.x + (col / cols) * extent.width
        for row in range(rows):
            value = float(grid[row, col])
            if not math.isfinite(value) or (nodata is not None and value == nodata):
                skipped += 1
                continue
            point = Point(x, extent.a.y + (row / rows) * extent.height)
            if to_geographic is not None:
                point = to_geographic(point)
            samples.append(HeightPoint(height=int(value * scale), coords=point))

    if skipped:
        logger.info("Skipped %d empty cells of a %dx%d elevation grid", skipped, rows, cols)
    return samples
