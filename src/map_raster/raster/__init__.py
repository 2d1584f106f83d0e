"""Rasterization of height samples and map shapes into a tile grid."""

from map_raster.raster.classifier import TileClassifier
from map_raster.raster.features import (
    building_polygons,
    feature_elevation,
    height_samples_from_features,
    height_samples_from_grid,
    lake_polygons,
    polygons_from_geometry,
    road_segments,
    segments_from_geometry,
)
from map_raster.raster.heights import build_height_map, resolve_height
from map_raster.raster.rasterizer import Rasterizer, rasterize_map
from map_raster.raster.types import (
    HEIGHT_SCALE,
    ClassPoint,
    HeightPoint,
    RasterConfig,
    RasterMap,
    Shape,
    Tile,
    TileClass,
    TileGrid,
)

__all__ = [
    "HEIGHT_SCALE",
    "ClassPoint",
    "HeightPoint",
    "RasterConfig",
    "RasterMap",
    "Rasterizer",
    "Shape",
    "Tile",
    "TileClass",
    "TileClassifier",
    "TileGrid",
    "build_height_map",
    "building_polygons",
    "feature_elevation",
    "height_samples_from_features",
    "height_samples_from_grid",
    "lake_polygons",
    "polygons_from_geometry",
    "rasterize_map",
    "resolve_height",
    "road_segments",
    "segments_from_geometry",
]
