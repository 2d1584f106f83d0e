"""Tests for turning decoded features and elevation grids into raster inputs."""

import math

import numpy as np
import pytest

from map_raster.geometry import Bbox, LineSegment, Point, Polygon
from map_raster.raster import (
    HeightPoint,
    building_polygons,
    feature_elevation,
    height_samples_from_features,
    height_samples_from_grid,
    lake_polygons,
    polygons_from_geometry,
    road_segments,
    segments_from_geometry,
)
from map_raster.raster.features import DEFAULT_ELEVATION

SQUARE_RING = [[0, 0], [4, 0], [4, 4], [0, 4], [0, 0]]
HOLE_RING = [[1, 1], [1, 3], [3, 3], [3, 1], [1, 1]]


def _feature(geometry, **properties):
    return {"type": "Feature", "geometry": geometry, "properties": properties}


class TestFeatureElevation:
    """Tests for reading a feature's elevation from its properties."""

    def test_contour_height_first(self):
        """Contour height wins over depth and base height."""
        assert feature_elevation({"korkeusarvo": 120, "syvyysarvo": 3, "pohjankorkeus": 7}) == 120

    def test_depth_is_scaled(self):
        """Depth is multiplied by 100."""
        assert feature_elevation({"syvyysarvo": 3, "pohjankorkeus": 7}) == 300

    def test_base_height(self):
        """Base height is used when nothing else is set."""
        assert feature_elevation({"pohjankorkeus": 7}) == 7

    def test_null_properties_are_skipped(self):
        """Null property values fall through to the next key."""
        assert feature_elevation({"korkeusarvo": None, "pohjankorkeus": 7}) == 7

    def test_default(self):
        """Features without any height get the default elevation."""
        assert feature_elevation({}) == DEFAULT_ELEVATION
        assert feature_elevation(None) == DEFAULT_ELEVATION


class TestPolygonsFromGeometry:
    """Tests for splitting polygon geometries into rings."""

    def test_closing_vertex_dropped(self):
        """The repeated closing vertex is not kept."""
        polygons = polygons_from_geometry({"type": "Polygon", "coordinates": [SQUARE_RING]})

        assert polygons == [Polygon([(0, 0), (4, 0), (4, 4), (0, 4)])]

    def test_each_ring_is_its_own_polygon(self):
        """Interior rings become separate polygons."""
        polygons = polygons_from_geometry({"type": "Polygon", "coordinates": [SQUARE_RING, HOLE_RING]})

        assert len(polygons) == 2
        assert polygons[1].bbox == Bbox(Point(1, 1), Point(3, 3))
        # The hole is filled too.
        assert any(p.contains_point(Point(2, 2)) for p in polygons)

    def test_multipolygon(self):
        """Every part of a MultiPolygon contributes its rings."""
        other = [[10, 10], [12, 10], [12, 12], [10, 10]]
        polygons = polygons_from_geometry(
            {"type": "MultiPolygon", "coordinates": [[SQUARE_RING], [other]]}
        )

        assert len(polygons) == 2
        assert len(polygons[1].vertices) == 3

    @pytest.mark.parametrize(
        "geometry",
        [
            None,
            {"type": "Point", "coordinates": [1, 2]},
            {"type": "LineString", "coordinates": [[0, 0], [1, 1]]},
            {"type": "GeometryCollection", "geometries": []},
            {"type": "Polygon", "coordinates": []},
        ],
    )
    def test_non_polygons_give_nothing(self, geometry):
        """Missing, empty and non-polygon geometries yield no polygons."""
        assert polygons_from_geometry(geometry) == []

    def test_broken_geometry_is_skipped(self):
        """Geometry shapely cannot build is skipped."""
        assert polygons_from_geometry({"type": "Polygon", "coordinates": [[[0, 0], [1, 1]]]}) == []


class TestSegmentsFromGeometry:
    """Tests for splitting line geometries into segments."""

    def test_linestring_vertex_pairs(self):
        """A line string gives one segment per vertex pair."""
        segments = segments_from_geometry(
            {"type": "LineString", "coordinates": [[0, 0], [1, 0], [1, 2]]}
        )

        assert segments == [
            LineSegment(Point(0, 0), Point(1, 0)),
            LineSegment(Point(1, 0), Point(1, 2)),
        ]

    def test_multilinestring(self):
        """Every part of a MultiLineString is split."""
        segments = segments_from_geometry(
            {"type": "MultiLineString", "coordinates": [[[0, 0], [1, 0]], [[5, 5], [6, 6], [7, 5]]]}
        )
        assert len(segments) == 3

    def test_polygon_boundary(self):
        """A polygon's exterior ring becomes closed segments."""
        segments = segments_from_geometry({"type": "Polygon", "coordinates": [SQUARE_RING]})

        assert len(segments) == 4
        assert segments[0] == LineSegment(Point(0, 0), Point(4, 0))

    def test_polygon_with_hole_boundary(self):
        """Interior rings add their own segments."""
        segments = segments_from_geometry({"type": "Polygon", "coordinates": [SQUARE_RING, HOLE_RING]})
        assert len(segments) == 8

    def test_point_gives_nothing(self):
        """Points have no segments."""
        assert segments_from_geometry({"type": "Point", "coordinates": [1, 2]}) == []


class TestFeatureCollections:
    """Tests for flattening lists of features."""

    def test_road_segments(self):
        """Road features flatten into one segment list."""
        roads = road_segments(
            [
                _feature({"type": "LineString", "coordinates": [[0, 0], [1, 0], [2, 0]]}),
                _feature(None),
                _feature({"type": "LineString", "coordinates": [[5, 5], [5, 6]]}),
            ]
        )
        assert len(roads) == 3

    def test_lakes_and_buildings(self):
        """Lakes and buildings share the polygon conversion."""
        features = [
            _feature({"type": "Polygon", "coordinates": [SQUARE_RING]}),
            _feature({"type": "Point", "coordinates": [9, 9]}),
        ]

        assert lake_polygons(features) == building_polygons(features)
        assert len(lake_polygons(features)) == 1

    def test_height_samples_from_features(self):
        """Every vertex carries its feature's elevation."""
        samples = height_samples_from_features(
            [
                _feature({"type": "LineString", "coordinates": [[0, 0], [1, 1]]}, korkeusarvo=55),
                _feature({"type": "Point", "coordinates": [3, 4]}, syvyysarvo=2),
                _feature({"type": "Point", "coordinates": [7, 7]}),
            ]
        )

        assert samples == [
            HeightPoint(55, Point(0, 0)),
            HeightPoint(55, Point(1, 1)),
            HeightPoint(200, Point(3, 4)),
            HeightPoint(DEFAULT_ELEVATION, Point(7, 7)),
        ]


class TestHeightSamplesFromGrid:
    """Tests for turning an elevation grid into height samples."""

    EXTENT = Bbox(Point(0.0, 0.0), Point(20.0, 10.0))

    def test_cell_positions_and_scale(self):
        """Cells are placed over the extent and scaled."""
        values = np.array([[1.0, 2.0], [3.0, 4.0]])
        samples = height_samples_from_grid(values, self.EXTENT, scale=10.0)

        # Columns outer, rows inner.
        assert samples == [
            HeightPoint(10, Point(0.0, 0.0)),
            HeightPoint(30, Point(0.0, 5.0)),
            HeightPoint(20, Point(10.0, 0.0)),
            HeightPoint(40, Point(10.0, 5.0)),
        ]

    def test_default_scale_truncates(self):
        """The default scale truncates toward zero."""
        samples = height_samples_from_grid(np.array([[1.0]]), self.EXTENT)
        assert samples[0].height == 175

        samples = height_samples_from_grid(np.array([[-0.01]]), self.EXTENT)
        assert samples[0].height == -1

    def test_empty_cells_skipped(self):
        """NaN, infinite and nodata cells give no sample."""
        values = np.array([[math.nan, 2.0], [-9999.0, math.inf]])
        samples = height_samples_from_grid(values, self.EXTENT, scale=1.0, nodata=-9999.0)

        assert samples == [HeightPoint(2, Point(10.0, 0.0))]

    def test_to_geographic(self):
        """The coordinate conversion is applied to every cell."""
        samples = height_samples_from_grid(
            np.array([[1.0, 1.0]]),
            self.EXTENT,
            scale=1.0,
            to_geographic=lambda p: Point(p.x / 10.0, p.y + 60.0),
        )
        assert [s.coords for s in samples] == [Point(0.0, 60.0), Point(1.0, 60.0)]

    def test_rejects_non_2d(self):
        """Only 2D grids are accepted."""
        with pytest.raises(ValueError, match="2D"):
            height_samples_from_grid(np.zeros(4), self.EXTENT)
