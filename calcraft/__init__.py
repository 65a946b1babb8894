"""CalCraft - printable month calendars laid out from ICS calendar files."""

__version__ = "1.0.0"
__author__ = "CalCraft Team"
__description__ = "Printable month calendar layout from ICS calendar files"

# Package metadata
__all__ = [
    "__author__",
    "__description__",
    "__version__",
]
