"""Land-use classification of a single tile.

Sources are tried in a fixed order and the first one that claims the tile
wins: lakes, then buildings, then roads, then the nearest class point.
A tile inside both a lake and a building is always WATER.
"""

import math
from collections.abc import Sequence

from map_raster.geometry import Bbox, LineSegment, NonFiniteCoordinateError, Point, Polygon
from map_raster.index import Quadtree
from map_raster.raster.types import ClassPoint, RasterConfig, Shape, TileClass


class TileClassifier:
    """Resolves the class of tile coordinates against prebuilt indices."""

    def __init__(
        self,
        lakes: Sequence[Polygon],
        shapes: Quadtree[Shape],
        class_points: Quadtree[ClassPoint],
        config: RasterConfig,
    ) -> None:
        self.lakes = lakes
        self.shapes = shapes
        self.class_points = class_points
        self.config = config
        self._road_distance_sq = config.road_distance ** 2

    def classify(self, point: Point) -> TileClass:
        window = Bbox.around(point, self.config.class_search_half_width)

        # Lakes are scanned linearly, not indexed.
        if any(lake.contains_point(point) for lake in self.lakes):
            return TileClass.WATER

        nearby = self.shapes.items_overlapping(window)

        if any(
            shape.tile_class is TileClass.BUILDING
            and isinstance(shape.geometry, Polygon)
            and shape.geometry.contains_point(point)
            for shape in nearby
        ):
            return TileClass.BUILDING

        if any(
            shape.tile_class is TileClass.ROAD
            and isinstance(shape.geometry, LineSegment)
            and shape.geometry.distance_squared_to_point(point) < self._road_distance_sq
            for shape in nearby
        ):
            return TileClass.ROAD

        return self._nearest_class_point(point, window)

    def _nearest_class_point(self, point: Point, window: Bbox) -> TileClass:
        candidates: list[tuple[float, ClassPoint]] = []
        for class_point in self.class_points.items_overlapping(window):
            distance_sq = class_point.coords.distance_squared(point)
            if math.isnan(distance_sq):
                raise NonFiniteCoordinateError(
                    f"Cannot order class point at {class_point.coords} by distance to {point}"
                )
            if distance_sq < self.config.class_point_epsilon_sq:
                candidates.append((distance_sq, class_point))

        if not candidates:
            return TileClass.EMPTY

        # Stable sort: equidistant points keep index order.
        candidates.sort(key=lambda pair: pair[0])
        return candidates[0][1].tile_class
