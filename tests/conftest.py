"""Pytest configuration and fixtures for rasterizer tests."""

import pytest

from map_raster.geometry import Bbox, Point, Polygon
from map_raster.raster.types import RasterConfig


@pytest.fixture
def square():
    """Square with corners (0,0) and (4,4), ring not closed."""
    return Polygon([(0, 0), (4, 0), (4, 4), (0, 4)])


@pytest.fixture
def small_config():
    """4x4 grid over x in [0, 4), y in (0, 4] with unit tile spacing.

    Tile (row, col) sits at x = col, y = 4 - row.
    """
    return RasterConfig(
        map_size=4,
        lon_min=0.0,
        lat_max=4.0,
        span=4.0,
        height_search_half_width=0.5,
        class_search_half_width=0.5,
        road_distance=0.3,
        class_point_epsilon_sq=0.1,
        index_bounds=Bbox(Point(-100.0, -100.0), Point(100.0, 100.0)),
    )
