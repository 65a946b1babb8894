"""Settings management using Pydantic for type validation and configuration."""

import logging
import os
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import BaseModel, Field, PrivateAttr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..layout.page_geometry import DimensionUnit, PageSize, PageSpec

ENV_PREFIX = "CALCRAFT_"

# Top-level YAML keys copied onto the settings object
BASIC_SETTINGS = (
    "year",
    "grid_rows",
    "max_visible_events",
    "local_timezone",
    "default_calendar_color",
    "primary_color",
    "enable_rrule_expansion",
)

# YAML ``page:`` section key -> settings field
PAGE_SETTINGS = {
    "size": "page_size",
    "width": "custom_width",
    "height": "custom_height",
    "unit": "dimension_unit",
}


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    # Console Logging
    console_enabled: bool = Field(default=True, description="Enable console logging")
    console_level: str = Field(
        default="WARNING",
        description="Console log level: DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL",
    )
    console_colors: bool = Field(
        default=True, description="Enable colored console output (auto-detected)"
    )

    # File Logging
    file_enabled: bool = Field(default=False, description="Enable file logging")
    file_level: str = Field(
        default="DEBUG",
        description="File log level: DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL",
    )
    file_directory: Optional[str] = Field(
        default=None, description="Custom log directory (defaults to data_dir/logs)"
    )
    file_prefix: str = Field(default="calcraft", description="Log file prefix")
    max_log_files: int = Field(default=5, description="Maximum number of log files to keep")
    include_function_names: bool = Field(
        default=True, description="Include function names and line numbers in file logs"
    )

    # Third-party Libraries
    third_party_level: str = Field(
        default="WARNING", description="Log level for third-party libraries"
    )


class CalCraftSettings(BaseSettings):
    """Application settings with environment variable support."""

    # Private attributes
    _explicit_args: set = PrivateAttr(default_factory=set)
    _env_vars_set: set = PrivateAttr(default_factory=set)

    # Calendar
    year: int = Field(default_factory=lambda: datetime.now().year, description="Calendar year")
    grid_rows: int = Field(default=0, ge=0, description="0 = standard grid, N = N-row strip")
    max_visible_events: int = Field(default=2, ge=0, description="Events shown per day cell")
    local_timezone: Optional[str] = Field(
        default=None, description="IANA zone for placing UTC events (None = system local)"
    )
    enable_rrule_expansion: bool = Field(default=True, description="Expand yearly RRULEs")

    # Page
    page_size: PageSize = Field(default=PageSize.A4, description="A4, A5 or custom")
    custom_width: float = Field(default=210.0, description="Custom page width")
    custom_height: float = Field(default=297.0, description="Custom page height")
    dimension_unit: DimensionUnit = Field(default=DimensionUnit.MM, description="mm or in")

    # Colors
    default_calendar_color: str = Field(
        default="#8295AF", description="Color assigned to newly imported calendars"
    )
    primary_color: str = Field(default="#6366f1", description="Accent color of the design")

    # Application
    app_name: str = Field(default="CalCraft", description="Application name")
    config_file: Optional[Path] = Field(default=None, description="Explicit YAML config path")
    config_dir: Path = Field(default_factory=lambda: Path.home() / ".config" / "calcraft")
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".local" / "share" / "calcraft")

    # Logging
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings, description="Logging configuration"
    )

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        validate_assignment=True,
        extra="ignore",
    )

    def __init__(self, **kwargs: Any) -> None:
        # Track which environment variables are set before calling parent
        env_vars_set = set()
        for key in os.environ:
            if key.upper().startswith(ENV_PREFIX):
                env_vars_set.add(key[len(ENV_PREFIX) :].lower())

        super().__init__(**kwargs)

        # Track which arguments were explicitly provided
        self._explicit_args = set(kwargs.keys())
        self._env_vars_set = env_vars_set

        # Load YAML configuration after basic initialization
        self._load_yaml_config()

    @field_validator("local_timezone")
    @classmethod
    def _check_timezone(cls, value: Optional[str]) -> Optional[str]:
        if value:
            try:
                ZoneInfo(value)
            except (ZoneInfoNotFoundError, ValueError) as e:
                raise ValueError(f"Unknown timezone: {value}") from e
        return value or None

    def _is_overridden(self, setting: str) -> bool:
        return setting in self._explicit_args or setting in self._env_vars_set

    def _find_config_file(self) -> Optional[Path]:
        """Find config file: explicit path, then project directory, then user home."""
        if self.config_file is not None:
            return self.config_file if self.config_file.exists() else None

        # Project root is two levels up from calcraft/config
        project_root = Path(__file__).parent.parent.parent
        project_config = project_root / "config" / "config.yaml"
        if project_config.exists():
            return project_config

        user_config = self.config_dir / "config.yaml"
        if user_config.exists():
            return user_config

        return None

    def _load_basic_settings(self, config_data: dict) -> None:
        """Load calendar settings from YAML data."""
        for setting in BASIC_SETTINGS:
            if setting in config_data and not self._is_overridden(setting):
                setattr(self, setting, config_data[setting])

    def _load_page_config(self, config_data: dict) -> None:
        """Load page size settings from the ``page`` YAML section."""
        page_config = config_data.get("page")
        if not isinstance(page_config, dict):
            return

        for key, setting in PAGE_SETTINGS.items():
            if key in page_config and not self._is_overridden(setting):
                setattr(self, setting, page_config[key])

    def _load_logging_config(self, config_data: dict) -> None:
        """Load logging configuration from YAML data."""
        logging_config = config_data.get("logging")
        if not isinstance(logging_config, dict):
            return
        if "logging" in self._explicit_args:
            return

        self.logging = self.logging.model_copy(
            update={
                key: value
                for key, value in logging_config.items()
                if key in LoggingSettings.model_fields
            }
        )

    def _load_yaml_config(self) -> None:
        """Load configuration from YAML file if it exists."""
        config_file = self._find_config_file()
        if not config_file:
            return

        try:
            with config_file.open() as f:
                config_data = yaml.safe_load(f)

            if not config_data:
                return

            self._load_basic_settings(config_data)
            self._load_page_config(config_data)
            self._load_logging_config(config_data)

        except Exception as e:
            # Don't fail if YAML loading fails, just continue with defaults/env vars
            logging.warning(f"Could not load YAML config from {config_file}: {e}")

    @property
    def tz(self) -> Optional[tzinfo]:
        """Zone used to place UTC timed events on a calendar day."""
        return ZoneInfo(self.local_timezone) if self.local_timezone else None

    @property
    def page_spec(self) -> PageSpec:
        return PageSpec(
            size=self.page_size,
            custom_width=self.custom_width,
            custom_height=self.custom_height,
            unit=self.dimension_unit,
        )

    @property
    def log_dir(self) -> Path:
        if self.logging.file_directory:
            return Path(self.logging.file_directory)
        return self.data_dir / "logs"


# Global settings management
_settings_instance: Optional[CalCraftSettings] = None


def get_settings() -> CalCraftSettings:
    """Get the global settings instance, creating it lazily if needed."""
    if globals()["_settings_instance"] is None:
        globals()["_settings_instance"] = CalCraftSettings()
    return globals()["_settings_instance"]


def reset_settings() -> None:
    """Reset the global settings instance (primarily for testing)."""
    globals()["_settings_instance"] = None
