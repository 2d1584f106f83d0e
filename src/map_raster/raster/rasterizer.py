"""Builds the spatial indices and fills the tile grid."""

import logging
import time
from collections.abc import Iterable, Sequence
from typing import Any

import numpy as np

from map_raster.geometry import LineSegment, Polygon, require_finite
from map_raster.index import Quadtree, average_height, max_height
from map_raster.raster.classifier import TileClassifier
from map_raster.raster.heights import build_height_map
from map_raster.raster.types import (
    ClassPoint,
    HeightPoint,
    RasterConfig,
    RasterMap,
    Shape,
    TileClass,
    TileGrid,
)

logger = logging.getLogger(__name__)


def _check_polygon(polygon: Polygon, what: str) -> Polygon:
    for vertex in polygon.vertices:
        require_finite(vertex, f"{what} vertex")
    return polygon


class Rasterizer:
    """Turns height samples and classified shapes into a ``RasterMap``.

    Every tile is computed independently from the indices, so the result
    only depends on the inputs and the config, never on tile order.
    """

    def __init__(self, config: RasterConfig | None = None) -> None:
        self.config = config or RasterConfig()

    def index_heights(self, samples: Iterable[HeightPoint]) -> Quadtree[HeightPoint]:
        """Index height samples; samples outside the index bounds are dropped."""
        index: Quadtree[HeightPoint] = Quadtree(self.config.index_bounds)
        offered = 0
        for sample in samples:
            require_finite(sample.coords, "height sample")
            offered += 1
            index.insert(sample)

        stored = index.count_points()
        if stored < offered:
            logger.warning(
                "Dropped %d of %d height samples outside the index bounds",
                offered - stored, offered,
            )
        logger.debug("Height index: %s", index.stats())
        return index

    def index_shapes(
        self,
        roads: Iterable[LineSegment],
        buildings: Iterable[Polygon],
    ) -> Quadtree[Shape]:
        """Index road segments and building polygons in one tree."""
        index: Quadtree[Shape] = Quadtree(self.config.index_bounds)
        dropped = {TileClass.ROAD: 0, TileClass.BUILDING: 0}
        offered = {TileClass.ROAD: 0, TileClass.BUILDING: 0}

        shapes: list[Shape] = []
        for road in roads:
            require_finite(road.a, "road endpoint")
            require_finite(road.b, "road endpoint")
            shapes.append(Shape(road, TileClass.ROAD))
        for building in buildings:
            shapes.append(Shape(_check_polygon(building, "building"), TileClass.BUILDING))

        for shape in shapes:
            offered[shape.tile_class] += 1
            if not index.insert(shape):
                dropped[shape.tile_class] += 1

        for tile_class, count in dropped.items():
            if count:
                logger.warning(
                    "Dropped %d of %d %s shapes outside the index bounds",
                    count, offered[tile_class], tile_class.value.lower(),
                )
        logger.debug("Shape index: %s", index.stats())
        return index

    def index_class_points(self, points: Iterable[ClassPoint]) -> Quadtree[ClassPoint]:
        index: Quadtree[ClassPoint] = Quadtree(self.config.index_bounds)
        for point in points:
            require_finite(point.coords, "class point")
            index.insert(point)
        return index

    def rasterize(
        self,
        height_samples: Iterable[HeightPoint],
        roads: Iterable[LineSegment],
        lakes: Sequence[Polygon],
        buildings: Sequence[Polygon],
        class_points: Iterable[ClassPoint] = (),
    ) -> RasterMap:
        """Build the indices and compute every tile.

        Args:
            height_samples: Elevation samples in the raster's coordinate space
            roads: Road centerline segments
            lakes: Lake polygons (scanned linearly, not indexed)
            buildings: Building polygons, also passed through to the result
            class_points: Optional pinned classes for the nearest-point fallback

        Returns:
            RasterMap with the tile grid and the building polygons
        """
        cfg = self.config
        size = cfg.map_size
        logger.info("Rasterizing %dx%d tile map", size, size)

        t0 = time.perf_counter()

        height_index = self.index_heights(height_samples)
        lakes = [_check_polygon(lake, "lake") for lake in lakes]
        buildings = list(buildings)
        shape_index = self.index_shapes(roads, buildings)
        class_index = self.index_class_points(class_points)

        t_index = time.perf_counter()

        heights = build_height_map(height_index, cfg)
        logger.info(
            "Had %d data points with max height of %d (quadrant average %d)",
            height_index.count_points(),
            max_height(height_index.root),
            average_height(height_index.root),
        )

        t_heights = time.perf_counter()

        classifier = TileClassifier(lakes, shape_index, class_index, cfg)
        classes = np.zeros((size, size), dtype=np.uint8)
        for row in range(size):
            for col in range(size):
                classes[row, col] = classifier.classify(cfg.tile_coordinate(row, col)).code

        t_classes = time.perf_counter()

        logger.info(
            "[Raster] phase timings: index=%.1fms heights=%.1fms classes=%.1fms total=%.1fms",
            (t_index - t0) * 1000,
            (t_heights - t_index) * 1000,
            (t_classes - t_heights) * 1000,
            (t_classes - t0) * 1000,
        )

        return RasterMap(
            grid=TileGrid(heights=heights, classes=classes),
            buildings=buildings,
            config=cfg,
        )


def rasterize_map(
    height_samples: Iterable[HeightPoint],
    roads: Iterable[LineSegment],
    lakes: Sequence[Polygon],
    buildings: Sequence[Polygon],
    class_points: Iterable[ClassPoint] = (),
    config_overrides: dict[str, Any] | None = None,
) -> RasterMap:
    """Convenience function to rasterize with a default config.

    Args:
        height_samples, roads, lakes, buildings, class_points: see
            ``Rasterizer.rasterize``
        config_overrides: Optional RasterConfig parameter overrides

    Returns:
        RasterMap for the inputs
    """
    config = RasterConfig(**(config_overrides or {}))
    return Rasterizer(config).rasterize(height_samples, roads, lakes, buildings, class_points)
