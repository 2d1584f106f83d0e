"""Per-tile elevation from the height-sample quadtree."""

import logging

import numpy as np
from numpy.typing import NDArray

from map_raster.geometry import Bbox, Point
from map_raster.index import Quadtree
from map_raster.index.quadtree import trunc_div
from map_raster.raster.types import HeightPoint, RasterConfig

logger = logging.getLogger(__name__)


def resolve_height(index: Quadtree[HeightPoint], center: Point, half_width: float) -> int:
    """Mean elevation of the samples held by leaves near ``center``.

    Every sample of every leaf overlapping the search window counts, not
    only the ones inside the window. Returns 0 when no leaf has samples,
    which is indistinguishable from a real zero elevation.
    """
    found = index.items_overlapping(Bbox.around(center, half_width))
    if not found:
        return 0
    return trunc_div(sum(sample.height for sample in found), len(found))


def build_height_map(index: Quadtree[HeightPoint], config: RasterConfig) -> NDArray[np.int64]:
    """Fill a ``map_size x map_size`` array with resolved tile heights."""
    size = config.map_size
    heights = np.zeros((size, size), dtype=np.int64)

    for row in range(size):
        for col in range(size):
            heights[row, col] = resolve_height(
                index,
                config.tile_coordinate(row, col),
                config.height_search_half_width,
            )

    if heights.size:
        logger.info(
            "Wrote %d tiles, average height %.2f, max height %d",
            heights.size, float(heights.mean()), int(heights.max()),
        )
    return heights
