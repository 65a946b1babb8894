"""Configuration management for CalCraft."""

from .settings import CalCraftSettings, LoggingSettings, get_settings, reset_settings

__all__ = ["CalCraftSettings", "LoggingSettings", "get_settings", "reset_settings"]
