"""Layout system exceptions."""

from ..exceptions import CalCraftError


class LayoutError(CalCraftError):
    """Base exception for layout system errors."""


class LayoutValidationError(LayoutError):
    """Raised when layout inputs are outside their valid range."""


class PageGeometryError(LayoutError):
    """Raised when a page size cannot be resolved to physical dimensions."""
