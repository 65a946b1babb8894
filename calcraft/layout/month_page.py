"""Style-resolved render tree for one calendar month page.

The presentation layer receives a :class:`MonthPage` whose blocks already
carry final colors and page-scaled sizes (CSS pixels, or millimeters for the
page box), so it only has to draw them.
"""

import calendar
import logging
from datetime import tzinfo
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from ..ics.models import CalendarEvent
from .grid import DEFAULT_MAX_VISIBLE_EVENTS, MonthGrid, build_month_grid
from .page_geometry import PageGeometry

logger = logging.getLogger(__name__)

Alignment = Literal["left", "center", "right"]
LayoutBlockName = Literal["header", "image", "grid"]

NEUTRAL_ACCENT = "#cbd5e1"
NEUTRAL_EVENT_BACKGROUND = "#f1f5f9"
TRANSPARENT = "transparent"
FOOTER_TEXT = "Crafted by CalCraft Studio"


class StyleConfig(BaseModel):
    """User-chosen look of every month page, in A4 reference units."""

    show_images: bool = True
    show_events: bool = True
    show_title: bool = True
    show_year: bool = True
    show_grid: bool = True
    show_accent: bool = True

    title_font: str = "serif-elegant"
    title_size: float = 42
    title_color: str = "#1e293b"
    title_align: Alignment = "left"

    year_font: str = "sans"
    year_size: float = 24
    year_color: str = "#94a3b8"
    year_align: Alignment = "right"

    grid_font: str = "modern"
    grid_size: float = 14
    grid_color: str = "#64748b"
    grid_align: Alignment = "right"
    grid_show_lines: bool = True
    grid_transparent: bool = False
    grid_rows: int = Field(default=0, ge=0, description="0 = standard 7-column layout")

    day_font: str = "sans"
    day_size: float = 9
    day_color: str = "#94a3b8"

    event_font: str = "sans"
    event_size: float = 10
    event_color: str = "#64748b"

    primary_color: str = "#6366f1"
    layout_order: list[LayoutBlockName] = Field(default_factory=lambda: ["header", "image", "grid"])

    header_height: float = 80
    image_height: float = 350
    grid_height: float = Field(default=0, description="0 = fill remaining space")


class MonthTarget(BaseModel):
    """One month of the calendar being designed."""

    month: int = Field(..., ge=0, le=11, description="Month index 0-11")
    year: int
    image: Optional[str] = Field(default=None, description="Custom image reference")


class TextStyle(BaseModel):
    font: str
    size: float
    color: str
    align: Optional[Alignment] = None


class HeaderBlock(BaseModel):
    kind: Literal["header"] = "header"
    title: Optional[str] = None
    year: Optional[int] = None
    title_style: TextStyle
    year_style: TextStyle
    same_alignment: bool
    border_color: str
    height: float
    margin_bottom: float
    border_width: float
    padding_bottom: float


class ImageBlock(BaseModel):
    kind: Literal["image"] = "image"
    image: Optional[str] = Field(default=None, description="None renders a placeholder")
    alt: str
    height: float
    margin_bottom: float
    radius: float
    placeholder_size: float


class EventChip(BaseModel):
    """A visible event inside a day cell."""

    title: str
    border_color: str
    background_color: str
    text_style: TextStyle
    padding: float
    border_width: float


class GridBlock(BaseModel):
    kind: Literal["grid"] = "grid"
    grid: MonthGrid
    height: Optional[float] = Field(default=None, description="None = fill remaining space")
    margin_bottom: float
    border_radius: float
    gap: float
    line_color: str
    label_style: TextStyle
    label_background: str
    label_padding: float
    day_number_style: TextStyle
    cell_background: str
    blank_background: str
    cell_padding: float
    cell_min_height: float
    overflow_font_size: float
    chips: dict[int, list[EventChip]] = Field(default_factory=dict, description="Day -> visible events")


PageBlock = Annotated[Union[HeaderBlock, ImageBlock, GridBlock], Field(discriminator="kind")]


class Footer(BaseModel):
    text: str
    style: TextStyle
    padding_top: float
    border_width: float


class MonthPage(BaseModel):
    """Render tree for one month page."""

    month: int
    year: int
    month_name: str
    width_mm: float
    height_mm: float
    padding_mm: float
    blocks: list[PageBlock] = Field(default_factory=list)
    footer: Footer


class MonthPageBuilder:
    """Resolve a StyleConfig against a page geometry into MonthPage trees."""

    def __init__(
        self,
        style: StyleConfig,
        geometry: PageGeometry,
        tz: Optional[tzinfo] = None,
        max_visible_events: int = DEFAULT_MAX_VISIBLE_EVENTS,
    ):
        self.style = style
        self.geometry = geometry
        self.tz = tz
        self.max_visible_events = max_visible_events

    def build(
        self, month: int, year: int, events: list[CalendarEvent], image: Optional[str] = None
    ) -> MonthPage:
        """Build the page for one month from year-scoped events."""
        month_name = calendar.month_name[month + 1]
        scaled = self.geometry.scaled

        blocks: list[PageBlock] = []
        for name in self.style.layout_order:
            block = self._build_block(name, month, year, month_name, events, image)
            if block is not None:
                blocks.append(block)

        footer = Footer(
            text=f"{month_name} {year} • {FOOTER_TEXT}",
            style=TextStyle(font=self.style.year_font, size=scaled(7), color=NEUTRAL_ACCENT),
            padding_top=scaled(16),
            border_width=scaled(1),
        )

        return MonthPage(
            month=month,
            year=year,
            month_name=month_name,
            width_mm=self.geometry.width_mm,
            height_mm=self.geometry.height_mm,
            padding_mm=scaled(12),
            blocks=blocks,
            footer=footer,
        )

    def _build_block(
        self,
        name: str,
        month: int,
        year: int,
        month_name: str,
        events: list[CalendarEvent],
        image: Optional[str],
    ) -> Optional[BaseModel]:
        if name == "header":
            return self._header_block(month_name, year)
        if name == "image":
            return self._image_block(month_name, image)
        if name == "grid":
            return self._grid_block(month, year, events)
        return None

    def _header_block(self, month_name: str, year: int) -> Optional[HeaderBlock]:
        style = self.style
        if not style.show_title and not style.show_year:
            return None

        scaled = self.geometry.scaled
        return HeaderBlock(
            title=month_name if style.show_title else None,
            year=year if style.show_year else None,
            title_style=TextStyle(
                font=style.title_font,
                size=scaled(style.title_size),
                color=style.title_color,
                align=style.title_align,
            ),
            year_style=TextStyle(
                font=style.year_font,
                size=scaled(style.year_size),
                color=style.year_color,
                align=style.year_align,
            ),
            same_alignment=style.title_align == style.year_align,
            border_color=style.primary_color if style.show_accent else TRANSPARENT,
            height=scaled(style.header_height),
            margin_bottom=scaled(24),
            border_width=scaled(2),
            padding_bottom=scaled(8),
        )

    def _image_block(self, month_name: str, image: Optional[str]) -> Optional[ImageBlock]:
        if not self.style.show_images:
            return None

        scaled = self.geometry.scaled
        return ImageBlock(
            image=image,
            alt=month_name,
            height=scaled(self.style.image_height),
            margin_bottom=scaled(24),
            radius=scaled(12),
            placeholder_size=scaled(12),
        )

    def _grid_block(self, month: int, year: int, events: list[CalendarEvent]) -> Optional[GridBlock]:
        style = self.style
        if not style.show_grid:
            return None

        scaled = self.geometry.scaled
        grid = build_month_grid(
            month,
            year,
            events if style.show_events else [],
            style.grid_rows,
            max_visible_events=self.max_visible_events,
            tz=self.tz,
        )

        chips = {
            cell.day: [self._event_chip(event) for event in cell.visible_events]
            for cell in grid.day_cells()
            if cell.events
        }
        line_color = "rgb(226, 232, 240)" if style.grid_show_lines else TRANSPARENT

        return GridBlock(
            grid=grid,
            height=scaled(style.grid_height) if style.grid_height else None,
            margin_bottom=scaled(24),
            border_radius=scaled(8),
            gap=1 if style.grid_show_lines else 0,
            line_color=line_color,
            label_style=TextStyle(font=style.day_font, size=scaled(style.day_size), color=style.day_color),
            label_background=TRANSPARENT if style.grid_transparent else "rgb(249, 250, 251)",
            label_padding=scaled(4),
            day_number_style=TextStyle(
                font=style.grid_font,
                size=scaled(style.grid_size),
                color=style.grid_color,
                align=style.grid_align,
            ),
            cell_background=TRANSPARENT if style.grid_transparent else "white",
            blank_background=TRANSPARENT if style.grid_transparent else "rgba(248, 250, 252, 0.5)",
            cell_padding=scaled(4),
            cell_min_height=scaled(40),
            overflow_font_size=scaled(7),
            chips=chips,
        )

    def _event_chip(self, event: CalendarEvent) -> EventChip:
        style = self.style
        color = event.color or style.primary_color
        if style.show_accent:
            # 8-digit hex: the accent color at low opacity
            border, background = color, f"{color}10"
        else:
            border, background = NEUTRAL_ACCENT, NEUTRAL_EVENT_BACKGROUND

        return EventChip(
            title=event.title,
            border_color=border,
            background_color=background,
            text_style=TextStyle(
                font=style.event_font,
                size=self.geometry.scaled(style.event_size),
                color=style.event_color,
            ),
            padding=self.geometry.scaled(2),
            border_width=self.geometry.scaled(2),
        )


def build_month_page(
    target: MonthTarget,
    events: list[CalendarEvent],
    style: StyleConfig,
    geometry: PageGeometry,
    *,
    tz: Optional[tzinfo] = None,
    max_visible_events: int = DEFAULT_MAX_VISIBLE_EVENTS,
) -> MonthPage:
    """Build the render tree for one month page."""
    builder = MonthPageBuilder(style, geometry, tz=tz, max_visible_events=max_visible_events)
    return builder.build(target.month, target.year, events, image=target.image)
