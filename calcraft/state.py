"""Application state: imported calendars, month targets and page design.

Every operation takes an :class:`AppState` and returns a new one; the state
passed in is never mutated.
"""

from datetime import tzinfo
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .config.settings import CalCraftSettings
from .exceptions import CalendarNotFoundError, StateError
from .ics.models import CalendarEvent, CalendarSource
from .ics.parser import ICSParser
from .ics.reader import read_ics_file
from .ics.rrule_expander import RRuleExpander
from .layout.grid import DEFAULT_MAX_VISIBLE_EVENTS
from .layout.month_page import MonthPage, MonthPageBuilder, MonthTarget, StyleConfig
from .layout.page_geometry import PageSpec, resolve_page_geometry
from .utils.logging import get_logger

logger = get_logger("state")

MONTHS_PER_YEAR = 12
DEFAULT_CALENDAR_COLOR = "#8295AF"
ICS_SUFFIX = ".ics"


class AppState(BaseModel):
    """Everything needed to render a year of month pages."""

    year: int
    page: PageSpec = Field(default_factory=PageSpec)
    style: StyleConfig = Field(default_factory=StyleConfig)
    calendars: list[CalendarSource] = Field(default_factory=list)
    months: list[MonthTarget] = Field(default_factory=list, description="One target per month of year")
    default_calendar_color: str = DEFAULT_CALENDAR_COLOR
    max_visible_events: int = DEFAULT_MAX_VISIBLE_EVENTS
    enable_rrule_expansion: bool = True

    model_config = ConfigDict(frozen=True)


def _month_targets(year: int, images: Optional[list[Optional[str]]] = None) -> list[MonthTarget]:
    images = images or [None] * MONTHS_PER_YEAR
    return [MonthTarget(month=month, year=year, image=images[month]) for month in range(MONTHS_PER_YEAR)]


def create_state(settings: Optional[CalCraftSettings] = None, year: Optional[int] = None) -> AppState:
    """Create an empty state with defaults taken from settings."""
    settings = settings or CalCraftSettings()
    target_year = year if year is not None else settings.year

    return AppState(
        year=target_year,
        page=settings.page_spec,
        style=StyleConfig(grid_rows=settings.grid_rows, primary_color=settings.primary_color),
        months=_month_targets(target_year),
        default_calendar_color=settings.default_calendar_color,
        max_visible_events=settings.max_visible_events,
        enable_rrule_expansion=settings.enable_rrule_expansion,
    )


def calendar_display_name(file_name: str) -> str:
    """Display name for an uploaded file: the name without a trailing ``.ics``."""
    name = Path(file_name).name
    if name.lower().endswith(ICS_SUFFIX):
        name = name[: -len(ICS_SUFFIX)]
    return name


def import_calendar(state: AppState, name: str, ics_content: str, color: Optional[str] = None) -> AppState:
    """Parse an ICS document and append it as an active calendar.

    Args:
        state: Current state
        name: Uploaded file name; a trailing ``.ics`` is dropped
        ics_content: Document text
        color: Accent color, defaults to the state's default calendar color

    Returns:
        New state with the calendar appended
    """
    result = ICSParser().parse_ics_content(ics_content)
    for warning in result.warnings:
        logger.warning(f"{name}: {warning}")

    display_name = calendar_display_name(name) or result.calendar_name or "Calendar"
    source = CalendarSource(
        name=display_name,
        events=result.events,
        color=color or state.default_calendar_color,
    )
    logger.info(f"Imported calendar {display_name!r} with {source.event_count} events")

    return state.model_copy(update={"calendars": [*state.calendars, source]})


async def import_calendar_file(
    state: AppState, path: Union[str, Path], color: Optional[str] = None
) -> AppState:
    """Read an uploaded ICS file and import it."""
    ics_content = await read_ics_file(path)
    return import_calendar(state, Path(path).name, ics_content, color=color)


def _find_calendar(state: AppState, calendar_id: str) -> int:
    for index, source in enumerate(state.calendars):
        if source.id == calendar_id:
            return index
    raise CalendarNotFoundError(f"No calendar with id {calendar_id}", details={"calendar_id": calendar_id})


def _replace_calendar(state: AppState, calendar_id: str, **changes: object) -> AppState:
    index = _find_calendar(state, calendar_id)
    calendars = list(state.calendars)
    calendars[index] = calendars[index].model_copy(update=changes)
    return state.model_copy(update={"calendars": calendars})


def toggle_calendar(state: AppState, calendar_id: str) -> AppState:
    """Flip whether a calendar's events are shown."""
    source = state.calendars[_find_calendar(state, calendar_id)]
    return _replace_calendar(state, calendar_id, active=not source.active)


def recolor_calendar(state: AppState, calendar_id: str, color: str) -> AppState:
    return _replace_calendar(state, calendar_id, color=color)


def remove_calendar(state: AppState, calendar_id: str) -> AppState:
    index = _find_calendar(state, calendar_id)
    removed = state.calendars[index]
    logger.debug(f"Removing calendar {removed.name!r}")
    return state.model_copy(update={"calendars": [c for c in state.calendars if c.id != calendar_id]})


def set_year(state: AppState, year: int) -> AppState:
    """Switch the target year, keeping custom images by month index."""
    images = [target.image for target in state.months] if len(state.months) == MONTHS_PER_YEAR else None
    return state.model_copy(update={"year": year, "months": _month_targets(year, images)})


def set_month_image(state: AppState, month: int, image: Optional[str]) -> AppState:
    """Set or clear (``None``) the custom image of one month."""
    if not 0 <= month < len(state.months):
        raise StateError(f"Month index must be 0-11, got {month}", details={"month": month})

    months = list(state.months)
    months[month] = months[month].model_copy(update={"image": image})
    return state.model_copy(update={"months": months})


def set_style(state: AppState, **changes: object) -> AppState:
    """Update style fields, validating the result."""
    style = StyleConfig.model_validate({**state.style.model_dump(), **changes})
    return state.model_copy(update={"style": style})


def set_page(state: AppState, page: PageSpec) -> AppState:
    return state.model_copy(update={"page": page})


def active_events(state: AppState) -> list[CalendarEvent]:
    """Source events of active calendars tagged with their calendar, in calendar order."""
    events: list[CalendarEvent] = []
    for source in state.calendars:
        if not source.active:
            continue
        events.extend(
            event.model_copy(update={"calendar_id": source.id, "color": source.color})
            for event in source.events
        )
    return events


def render_year(state: AppState, tz: Optional[tzinfo] = None) -> list[MonthPage]:
    """Expand active events for the state's year and build all month pages."""
    expander = RRuleExpander(tz=tz)
    expander.enable_expansion = state.enable_rrule_expansion
    events = expander.expand_for_year(active_events(state), state.year)

    geometry = resolve_page_geometry(state.page)
    builder = MonthPageBuilder(state.style, geometry, tz=tz, max_visible_events=state.max_visible_events)

    pages = [builder.build(target.month, state.year, events, image=target.image) for target in state.months]
    logger.verbose(f"Rendered {len(pages)} pages for {state.year} from {len(events)} events")
    return pages
