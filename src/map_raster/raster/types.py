"""Type definitions for map rasterization."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, ClassVar, NamedTuple

import numpy as np
from numpy.typing import NDArray

from map_raster.config import Settings
from map_raster.geometry import Bbox, LineSegment, Point, Polygon

# Tile heights are fixed-point; divide by this to get display units.
HEIGHT_SCALE = 10_000


class TileClass(StrEnum):
    """Land-use class of a tile."""

    WATER = "WATER"
    BUILDING = "BUILDING"
    ROAD = "ROAD"
    EMPTY = "EMPTY"

    @property
    def code(self) -> int:
        return TILE_CLASSES.index(self)

    @classmethod
    def from_code(cls, code: int) -> "TileClass":
        return TILE_CLASSES[code]


TILE_CLASSES: tuple[TileClass, ...] = tuple(TileClass)


class Tile(NamedTuple):
    """One grid cell."""

    height: int
    tile_class: TileClass


@dataclass(frozen=True)
class HeightPoint:
    """An elevation sample (fixed-point integer height) at a coordinate."""

    exclusive: ClassVar[bool] = True

    height: int
    coords: Point

    def fits_into(self, bbox: Bbox) -> bool:
        return bbox.contains(self.coords)


@dataclass(frozen=True)
class ClassPoint:
    """A tile class pinned to a coordinate, used by the nearest-point fallback."""

    exclusive: ClassVar[bool] = True

    tile_class: TileClass
    coords: Point

    def fits_into(self, bbox: Bbox) -> bool:
        return bbox.contains(self.coords)


@dataclass(frozen=True)
class Shape:
    """A classified segment or polygon, indexed by bounding-box overlap."""

    geometry: LineSegment | Polygon
    tile_class: TileClass

    @property
    def bbox(self) -> Bbox:
        return self.geometry.bbox

    def fits_into(self, bbox: Bbox) -> bool:
        return bbox.overlaps(self.geometry.bbox)


@dataclass
class RasterConfig:
    """Parameters of one rasterization run.

    The defaults reproduce the Tampere view the map viewer was built for:
    a 0.025 degree square rendered at 512 x 512 tiles.
    """

    # Output grid is map_size x map_size tiles
    map_size: int = 512

    # Geographic extent: x grows east from lon_min, y shrinks south from lat_max
    lon_min: float = 23.7575
    lat_max: float = 61.5025
    span: float = 0.025

    # Half-widths of the per-tile search windows
    height_search_half_width: float = 0.00003
    class_search_half_width: float = 0.00001

    # A tile is ROAD when closer than this to a road segment
    road_distance: float = 0.00001

    # Squared distance under which a class point may claim a tile
    class_point_epsilon_sq: float = 0.0000001

    # Root rectangle of every quadtree
    index_bounds: Bbox = field(
        default_factory=lambda: Bbox(Point(23.0, 60.0), Point(24.0, 62.0))
    )

    @classmethod
    def from_settings(cls, settings: Settings) -> "RasterConfig":
        """Derive the zoomed view from environment settings.

        The zoomed square keeps the center of the configured view.
        """
        span = settings.view_span * settings.zoom
        margin = (settings.view_span - span) * 0.5
        return cls(
            map_size=settings.map_size,
            lon_min=settings.view_lon_min + margin,
            lat_max=settings.view_lat_max - margin,
            span=span,
            height_search_half_width=settings.height_search_half_width,
            class_search_half_width=settings.class_search_half_width,
            road_distance=settings.road_distance,
            class_point_epsilon_sq=settings.class_point_epsilon_sq,
            index_bounds=Bbox(
                Point(settings.index_min_x, settings.index_min_y),
                Point(settings.index_max_x, settings.index_max_y),
            ),
        )

    def tile_coordinate(self, row: int, col: int) -> Point:
        """Geographic coordinate of a tile's corner sample."""
        return Point(
            self.lon_min + self.span * (col / self.map_size),
            self.lat_max - self.span * (row / self.map_size),
        )

    def to_tile_coords(self, x: float, y: float) -> tuple[float, float]:
        """Fractional ``(col, row)`` of a geographic coordinate."""
        col = ((x - self.lon_min) / self.span) * self.map_size
        row = ((y - self.lat_max) / -self.span) * self.map_size
        return col, row


@dataclass
class TileGrid:
    """Square row-major grid of tile heights and classes.

    Both arrays are made read-only on construction.
    """

    heights: NDArray[np.int64]
    classes: NDArray[np.uint8]

    def __post_init__(self) -> None:
        self.heights = np.array(self.heights, dtype=np.int64)
        self.classes = np.array(self.classes, dtype=np.uint8)
        if self.heights.ndim != 2 or self.heights.shape[0] != self.heights.shape[1]:
            raise ValueError(f"Tile grid must be square, got shape {self.heights.shape}")
        if self.heights.shape != self.classes.shape:
            raise ValueError(
                f"Height and class grids differ: {self.heights.shape} vs {self.classes.shape}"
            )
        self.heights.setflags(write=False)
        self.classes.setflags(write=False)

    @property
    def size(self) -> int:
        return self.heights.shape[0]

    def tile(self, row: int, col: int) -> Tile:
        return Tile(
            height=int(self.heights[row, col]),
            tile_class=TileClass.from_code(int(self.classes[row, col])),
        )

    def rows(self) -> list[list[Tile]]:
        return [[self.tile(r, c) for c in range(self.size)] for r in range(self.size)]

    def height_map(self) -> NDArray[np.float64]:
        """Heights converted out of fixed point."""
        return self.heights / HEIGHT_SCALE

    def class_map(self) -> list[list[str]]:
        return [[TILE_CLASSES[code].value for code in row] for row in self.classes.tolist()]


@dataclass
class RasterMap:
    """Result of a rasterization run."""

    grid: TileGrid
    buildings: list[Polygon]
    config: RasterConfig

    def to_tile_coords(self, x: float, y: float) -> tuple[float, float]:
        return self.config.to_tile_coords(x, y)

    def to_dict(self) -> list[Any]:
        """Convert to the ``[height_map, class_map]`` pair the map viewer loads.

        The viewer reads the pair positionally, so this is a two-element list
        rather than a keyed mapping.
        """
        return [self.grid.height_map().tolist(), self.grid.class_map()]
