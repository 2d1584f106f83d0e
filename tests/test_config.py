"""Tests for map_raster.config settings and their mapping onto RasterConfig."""

import logging

import pytest

from map_raster import config as config_module
from map_raster.config import Settings, setup_logging
from map_raster.geometry import Bbox, Point
from map_raster.raster import RasterConfig


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self):
        """Defaults describe the 512 tile view at half zoom."""
        settings = Settings(_env_file=None)

        assert settings.map_size == 512
        assert settings.zoom == 0.5
        assert settings.view_span == 0.05
        assert settings.log_level == "info"

    def test_env_override(self, monkeypatch):
        """Prefixed environment variables override defaults."""
        monkeypatch.setenv("MAP_RASTER_MAP_SIZE", "64")
        monkeypatch.setenv("MAP_RASTER_ZOOM", "1.0")

        settings = Settings(_env_file=None)

        assert settings.map_size == 64
        assert settings.zoom == 1.0

    def test_env_without_prefix_is_ignored(self, monkeypatch):
        """Unprefixed variables are not read."""
        monkeypatch.setenv("MAP_SIZE", "64")
        assert Settings(_env_file=None).map_size == 512

    def test_env_file(self, tmp_path):
        """Values are read from a .env file."""
        env_file = tmp_path / ".env"
        env_file.write_text("MAP_RASTER_ROAD_DISTANCE=0.5\n")

        assert Settings(_env_file=env_file).road_distance == 0.5


class TestRasterConfigFromSettings:
    """Tests for deriving a RasterConfig from settings."""

    def test_default_settings_match_default_config(self):
        """Default settings give the default raster config."""
        derived = RasterConfig.from_settings(Settings(_env_file=None))
        default = RasterConfig()

        assert derived.map_size == default.map_size
        assert derived.lon_min == pytest.approx(default.lon_min)
        assert derived.lat_max == pytest.approx(default.lat_max)
        assert derived.span == pytest.approx(default.span)
        assert derived.road_distance == default.road_distance
        assert derived.class_point_epsilon_sq == default.class_point_epsilon_sq
        assert derived.index_bounds == default.index_bounds

    def test_zoom_keeps_view_center(self):
        """Zooming shrinks the view around its center."""
        settings = Settings(
            _env_file=None,
            view_lon_min=10.0,
            view_lat_max=20.0,
            view_span=4.0,
            zoom=0.25,
        )
        derived = RasterConfig.from_settings(settings)

        assert derived.span == pytest.approx(1.0)
        assert derived.lon_min == pytest.approx(11.5)
        assert derived.lat_max == pytest.approx(18.5)

    def test_index_bounds_from_settings(self):
        """Index bounds come from the four settings fields."""
        settings = Settings(_env_file=None, index_min_x=-1, index_min_y=-2, index_max_x=3, index_max_y=4)

        assert RasterConfig.from_settings(settings).index_bounds == Bbox(Point(-1, -2), Point(3, 4))


class TestSetupLogging:
    """Tests for root logging configuration."""

    @pytest.fixture
    def basic_config_calls(self, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
        return calls

    def test_explicit_level(self, basic_config_calls):
        """An explicit level name is used."""
        setup_logging("debug")

        assert basic_config_calls[0]["level"] == logging.DEBUG
        assert "%(name)s" in basic_config_calls[0]["format"]

    def test_level_from_settings(self, basic_config_calls, monkeypatch):
        """Without an argument the configured level is used."""
        monkeypatch.setattr(config_module.settings, "log_level", "warning")
        setup_logging()

        assert basic_config_calls[0]["level"] == logging.WARNING

    def test_unknown_level_falls_back_to_info(self, basic_config_calls):
        """Unknown level names fall back to INFO."""
        setup_logging("chatty")

        assert basic_config_calls[0]["level"] == logging.INFO
