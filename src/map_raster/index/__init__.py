"""Spatial indexing for height samples and map shapes."""

from map_raster.index.quadtree import (
    MAX_DEPTH,
    SPLIT_THRESHOLD,
    Indexable,
    Interior,
    Leaf,
    Quadtree,
    average_height,
    count_points,
    find_box_for,
    find_boxes_overlapping,
    insert,
    iter_leaves,
    max_height,
)

__all__ = [
    "Indexable",
    "Interior",
    "Leaf",
    "MAX_DEPTH",
    "Quadtree",
    "SPLIT_THRESHOLD",
    "average_height",
    "count_points",
    "find_box_for",
    "find_boxes_overlapping",
    "insert",
    "iter_leaves",
    "max_height",
]
