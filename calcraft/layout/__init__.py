"""Month grid layout, page geometry and month page render trees."""

from .exceptions import LayoutError, LayoutValidationError, PageGeometryError
from .grid import (
    Blank,
    DayCell,
    GridCell,
    GridLayoutEngine,
    MonthGrid,
    WeekdayHeader,
    build_month_grid,
    days_in_month,
    events_in_month,
    first_weekday,
    weekday_label,
)
from .month_page import (
    EventChip,
    Footer,
    GridBlock,
    HeaderBlock,
    ImageBlock,
    MonthPage,
    MonthPageBuilder,
    MonthTarget,
    StyleConfig,
    TextStyle,
    build_month_page,
)
from .page_geometry import DimensionUnit, PageGeometry, PageSize, PageSpec, resolve_page_geometry

__all__ = [
    "Blank",
    "DayCell",
    "DimensionUnit",
    "EventChip",
    "Footer",
    "GridBlock",
    "GridCell",
    "GridLayoutEngine",
    "HeaderBlock",
    "ImageBlock",
    "LayoutError",
    "LayoutValidationError",
    "MonthGrid",
    "MonthPage",
    "MonthPageBuilder",
    "MonthTarget",
    "PageGeometry",
    "PageGeometryError",
    "PageSize",
    "PageSpec",
    "StyleConfig",
    "TextStyle",
    "WeekdayHeader",
    "build_month_grid",
    "build_month_page",
    "days_in_month",
    "events_in_month",
    "first_weekday",
    "resolve_page_geometry",
    "weekday_label",
]
