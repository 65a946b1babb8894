"""Display renderers for month page render trees."""

from .console_renderer import ConsoleRenderer

__all__ = ["ConsoleRenderer"]
