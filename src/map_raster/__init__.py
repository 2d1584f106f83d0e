"""Quadtree-indexed rasterization of elevation samples and map features."""

__version__ = "0.1.0"
