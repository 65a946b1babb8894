"""Unit tests for the settings configuration module."""

import logging
from zoneinfo import ZoneInfo

import pytest
import yaml
from pydantic import ValidationError

from calcraft.config.settings import CalCraftSettings, LoggingSettings, get_settings, reset_settings
from calcraft.layout.page_geometry import DimensionUnit, PageSize


@pytest.fixture
def config_file(tmp_path):
    """Write a YAML config and return its path."""
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "year": 2031,
                "grid_rows": 2,
                "primary_color": "#123456",
                "page": {"size": "custom", "width": 8.5, "height": 11, "unit": "in"},
                "logging": {"console_level": "DEBUG", "file_enabled": True, "unknown": 1},
            }
        )
    )
    return path


class TestCalCraftSettings:
    """Test suite for CalCraftSettings."""

    def test_defaults(self, tmp_path):
        """Test default values without any configuration source."""
        settings = CalCraftSettings(config_file=tmp_path / "missing.yaml")

        assert settings.page_size == PageSize.A4
        assert settings.dimension_unit == DimensionUnit.MM
        assert settings.grid_rows == 0
        assert settings.max_visible_events == 2
        assert settings.default_calendar_color == "#8295AF"
        assert settings.primary_color == "#6366f1"
        assert settings.local_timezone is None
        assert settings.tz is None
        assert isinstance(settings.logging, LoggingSettings)
        assert settings.logging.file_enabled is False

    def test_environment_variables(self, tmp_path, monkeypatch):
        """Test that CALCRAFT_ variables are read."""
        monkeypatch.setenv("CALCRAFT_GRID_ROWS", "3")
        monkeypatch.setenv("CALCRAFT_PAGE_SIZE", "A5")

        settings = CalCraftSettings(config_file=tmp_path / "missing.yaml")

        assert settings.grid_rows == 3
        assert settings.page_size == PageSize.A5

    def test_yaml_overlay(self, config_file):
        """Test that the YAML file fills settings, page and logging sections."""
        settings = CalCraftSettings(config_file=config_file)

        assert settings.year == 2031
        assert settings.grid_rows == 2
        assert settings.primary_color == "#123456"
        assert settings.page_size == PageSize.CUSTOM
        assert settings.custom_width == 8.5
        assert settings.dimension_unit == DimensionUnit.IN
        assert settings.logging.console_level == "DEBUG"
        assert settings.logging.file_enabled is True

    def test_environment_beats_yaml(self, config_file, monkeypatch):
        """Test that environment variables take precedence over YAML."""
        monkeypatch.setenv("CALCRAFT_GRID_ROWS", "4")

        settings = CalCraftSettings(config_file=config_file)

        assert settings.grid_rows == 4
        assert settings.year == 2031

    def test_explicit_arguments_beat_yaml(self, config_file):
        """Test that constructor arguments take precedence over YAML."""
        settings = CalCraftSettings(config_file=config_file, year=2040, page_size="A5")

        assert settings.year == 2040
        assert settings.page_size == PageSize.A5
        assert settings.custom_width == 8.5

    def test_broken_yaml_falls_back_to_defaults(self, tmp_path, caplog):
        """Test that an unreadable YAML file only logs a warning."""
        path = tmp_path / "config.yaml"
        path.write_text("grid_rows: [unclosed\n")

        with caplog.at_level(logging.WARNING):
            settings = CalCraftSettings(config_file=path)

        assert settings.grid_rows == 0
        assert "Could not load YAML config" in caplog.text

    def test_invalid_yaml_value_falls_back(self, tmp_path, caplog):
        """Test that a value failing validation is not applied."""
        path = tmp_path / "config.yaml"
        path.write_text("grid_rows: -2\n")

        with caplog.at_level(logging.WARNING):
            settings = CalCraftSettings(config_file=path)

        assert settings.grid_rows == 0

    def test_user_config_directory(self, tmp_path, monkeypatch):
        """Test that config_dir/config.yaml is used when no explicit file is given."""
        (tmp_path / "config.yaml").write_text("max_visible_events: 4\n")
        monkeypatch.setattr(CalCraftSettings, "_find_config_file", lambda self: self.config_dir / "config.yaml")

        settings = CalCraftSettings(config_dir=tmp_path)

        assert settings.max_visible_events == 4

    def test_timezone(self, tmp_path):
        """Test that IANA names resolve with zoneinfo."""
        settings = CalCraftSettings(config_file=tmp_path / "missing.yaml", local_timezone="Europe/Berlin")

        assert settings.tz == ZoneInfo("Europe/Berlin")

    def test_unknown_timezone_rejected(self, tmp_path):
        with pytest.raises(ValidationError):
            CalCraftSettings(config_file=tmp_path / "missing.yaml", local_timezone="Mars/Olympus")

    def test_page_spec(self, tmp_path):
        """Test the page selection derived from settings."""
        settings = CalCraftSettings(
            config_file=tmp_path / "missing.yaml", page_size="custom", custom_width=100, custom_height=150
        )

        spec = settings.page_spec

        assert spec.size == PageSize.CUSTOM
        assert (spec.custom_width, spec.custom_height) == (100, 150)

    def test_log_dir(self, tmp_path):
        settings = CalCraftSettings(config_file=tmp_path / "missing.yaml", data_dir=tmp_path)

        assert settings.log_dir == tmp_path / "logs"

        settings.logging.file_directory = str(tmp_path / "custom")
        assert settings.log_dir == tmp_path / "custom"


class TestGlobalSettings:
    """Tests for the lazily created module instance."""

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_reset_settings(self):
        first = get_settings()

        reset_settings()

        assert get_settings() is not first
