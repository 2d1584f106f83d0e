"""Rasterizer configuration."""

import logging
import sys

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Settings loaded from ``MAP_RASTER_*`` environment variables."""

    # Output grid
    map_size: int = 512

    # Unzoomed view: west edge, north edge and side length in degrees
    view_lon_min: float = 23.745
    view_lat_max: float = 61.515
    view_span: float = 0.05
    zoom: float = 0.5

    # Search windows and thresholds (degrees)
    height_search_half_width: float = 0.00003
    class_search_half_width: float = 0.00001
    road_distance: float = 0.00001
    class_point_epsilon_sq: float = 0.0000001

    # Quadtree root rectangle
    index_min_x: float = 23.0
    index_min_y: float = 60.0
    index_max_x: float = 24.0
    index_max_y: float = 62.0

    # Logging
    log_level: str = "info"

    class Config:
        env_prefix = "MAP_RASTER_"
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()


def setup_logging(level_name: str | None = None) -> None:
    """Configure root logging for command-line use of the rasterizer."""
    level = getattr(logging, (level_name or settings.log_level).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )
