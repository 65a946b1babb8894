"""Page size resolution into physical dimensions and a render scale."""

import logging
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import PageGeometryError

logger = logging.getLogger(__name__)

# A4 width is the reference every size-dependent value is tuned for
REFERENCE_WIDTH_MM = 210.0
MM_PER_INCH = 25.4
PIXELS_PER_MM = 3.78  # 96 dpi preview

NAMED_PAGE_SIZES_MM: dict[str, tuple[float, float]] = {
    "A4": (210.0, 297.0),
    "A5": (148.0, 210.0),
}


class PageSize(str, Enum):
    """Supported page size selectors."""

    A4 = "A4"
    A5 = "A5"
    CUSTOM = "custom"


class DimensionUnit(str, Enum):
    """Units for custom page dimensions."""

    MM = "mm"
    IN = "in"


class PageSpec(BaseModel):
    """Page size selection as chosen by the user."""

    size: PageSize = Field(default=PageSize.A4, description="Named size or custom")
    custom_width: float = Field(default=210.0, description="Custom width in `unit`")
    custom_height: float = Field(default=297.0, description="Custom height in `unit`")
    unit: DimensionUnit = Field(default=DimensionUnit.MM, description="Unit of custom dimensions")


class PageGeometry(BaseModel):
    """Physical page dimensions in millimeters with the derived render scale."""

    width_mm: float
    height_mm: float

    model_config = ConfigDict(frozen=True)

    @property
    def scale(self) -> float:
        """Scale relative to the A4 reference width."""
        return self.width_mm / REFERENCE_WIDTH_MM

    def scaled(self, value: float) -> float:
        """Scale a reference-sized value to this page."""
        return value * self.scale

    @property
    def width_px(self) -> float:
        return self.width_mm * PIXELS_PER_MM

    @property
    def height_px(self) -> float:
        return self.height_mm * PIXELS_PER_MM

    def preview_scale(self, available_width_px: float) -> float:
        """Zoom factor that fits the page into an on-screen preview width."""
        return min(1.0, available_width_px / self.width_px)


def resolve_page_geometry(spec: PageSpec) -> PageGeometry:
    """Resolve a page size selection into physical dimensions.

    Args:
        spec: Named or custom page size

    Returns:
        PageGeometry in millimeters

    Raises:
        PageGeometryError: If custom dimensions are not positive
    """
    size = PageSize(spec.size)
    if size != PageSize.CUSTOM:
        width, height = NAMED_PAGE_SIZES_MM[size.value]
        return PageGeometry(width_mm=width, height_mm=height)

    if spec.custom_width <= 0 or spec.custom_height <= 0:
        raise PageGeometryError(
            f"Custom page dimensions must be positive, got {spec.custom_width}x{spec.custom_height}",
            details={"width": spec.custom_width, "height": spec.custom_height},
        )

    factor = MM_PER_INCH if DimensionUnit(spec.unit) == DimensionUnit.IN else 1.0
    geometry = PageGeometry(width_mm=spec.custom_width * factor, height_mm=spec.custom_height * factor)
    logger.debug("Resolved custom page %.1fx%.1fmm (scale %.3f)", geometry.width_mm, geometry.height_mm, geometry.scale)
    return geometry
