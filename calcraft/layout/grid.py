"""Month grid layout: typed cells for weekday headers, padding and days.

Two modes are supported:

* standard (``grid_rows == 0``): a 7-column week grid with a header row of
  ``Sun``..``Sat``, leading blanks up to the first weekday and trailing
  blanks completing the last week.
* linear strip (``grid_rows = R > 0``): ``R`` rows of ``ceil(days / R)``
  columns, each row emitted as a weekday-label row followed by a day row.
"""

from __future__ import annotations

import calendar
import logging
import math
from datetime import tzinfo
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from ..ics.models import CalendarEvent
from .exceptions import LayoutValidationError

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
STANDARD_COLUMNS = 7
DEFAULT_MAX_VISIBLE_EVENTS = 2


class WeekdayHeader(BaseModel):
    """Weekday label cell."""

    kind: Literal["header"] = "header"
    label: str


class Blank(BaseModel):
    """Padding cell with no day."""

    kind: Literal["blank"] = "blank"


class DayCell(BaseModel):
    """A day of the month with every event starting on it, in source order."""

    kind: Literal["day"] = "day"
    day: int
    events: list[CalendarEvent] = Field(default_factory=list)
    max_visible: int = DEFAULT_MAX_VISIBLE_EVENTS

    @property
    def visible_events(self) -> list[CalendarEvent]:
        return self.events[: self.max_visible]

    @property
    def overflow_count(self) -> int:
        """Number of events hidden behind the "+N" counter."""
        return max(0, len(self.events) - self.max_visible)


GridCell = Annotated[Union[WeekdayHeader, Blank, DayCell], Field(discriminator="kind")]


class MonthGrid(BaseModel):
    """Ordered cells for one month plus the grid shape they fill."""

    month: int = Field(..., description="Month index 0-11")
    year: int
    days_in_month: int
    first_weekday: int = Field(..., description="Weekday of the 1st, 0 = Sunday")
    grid_rows: int = Field(..., description="Row policy: 0 = standard, N = linear strip")
    columns: int
    rows: int = Field(..., description="Week rows (standard) or strip rows (linear)")
    cells: list[GridCell] = Field(default_factory=list)

    @property
    def is_standard(self) -> bool:
        return self.grid_rows == 0

    @property
    def total_rows(self) -> int:
        """Rendered rows including weekday label rows."""
        return self.rows + 1 if self.is_standard else self.rows * 2

    def day_cells(self) -> list[DayCell]:
        return [cell for cell in self.cells if isinstance(cell, DayCell)]


def _validate_month(month: int) -> None:
    if not 0 <= month <= 11:
        raise LayoutValidationError(f"Month index must be 0-11, got {month}", details={"month": month})


def days_in_month(month: int, year: int) -> int:
    """Number of days in a 0-based month."""
    _validate_month(month)
    return calendar.monthrange(year, month + 1)[1]


def first_weekday(month: int, year: int) -> int:
    """Weekday of the first day of a 0-based month, 0 = Sunday."""
    _validate_month(month)
    # calendar counts from Monday = 0
    return (calendar.weekday(year, month + 1, 1) + 1) % 7


def weekday_label(weekday: int, columns: int) -> str:
    """Weekday name shortened to fit the number of columns."""
    name = WEEKDAY_NAMES[weekday % 7]
    if columns > 15:
        return name[0]
    if columns > 7:
        return name[:3]
    return name


def events_in_month(
    events: list[CalendarEvent], month: int, year: int, tz: Optional[tzinfo] = None
) -> list[CalendarEvent]:
    """Keep events whose start falls in the month, in source order."""
    result = []
    for event in events:
        start_date = event.start.calendar_date(tz)
        if start_date.year == year and start_date.month == month + 1:
            result.append(event)
    return result


class GridLayoutEngine:
    """Lay out a month's days and events as a flat sequence of grid cells."""

    def __init__(self, max_visible_events: int = DEFAULT_MAX_VISIBLE_EVENTS, tz: Optional[tzinfo] = None):
        """Initialize the layout engine.

        Args:
            max_visible_events: Events shown per day before the overflow counter
            tz: Local zone used to place UTC timed events on a calendar day
        """
        self.max_visible_events = max_visible_events
        self.tz = tz

    def layout(
        self,
        month: int,
        year: int,
        day_count: int,
        first_weekday_index: int,
        grid_rows: int,
        events: list[CalendarEvent],
    ) -> MonthGrid:
        """Build the cell sequence for one month.

        Args:
            month: Month index 0-11
            year: Calendar year
            day_count: Number of days in the month
            first_weekday_index: Weekday of day 1, 0 = Sunday
            grid_rows: 0 for the standard grid, N > 0 for an N-row strip
            events: Year-scoped events; only those starting in this month are placed

        Returns:
            MonthGrid with cells in row-major order

        Raises:
            LayoutValidationError: If any input is outside its valid range
        """
        _validate_month(month)
        if day_count < 1:
            raise LayoutValidationError(f"Day count must be positive, got {day_count}")
        if not 0 <= first_weekday_index <= 6:
            raise LayoutValidationError(f"First weekday must be 0-6, got {first_weekday_index}")
        if grid_rows < 0:
            raise LayoutValidationError(f"Grid rows must be >= 0, got {grid_rows}")

        by_day = self._events_by_day(events_in_month(events, month, year, self.tz))

        if grid_rows == 0:
            columns = STANDARD_COLUMNS
            rows = math.ceil((day_count + first_weekday_index) / STANDARD_COLUMNS)
            cells = self._standard_cells(day_count, first_weekday_index, rows, by_day)
        else:
            rows = grid_rows
            columns = math.ceil(day_count / rows)
            cells = self._strip_cells(day_count, first_weekday_index, rows, columns, by_day)

        logger.debug(
            "Laid out %d-%02d: %d cells in %dx%d (grid_rows=%d)",
            year,
            month + 1,
            len(cells),
            columns,
            rows,
            grid_rows,
        )
        return MonthGrid(
            month=month,
            year=year,
            days_in_month=day_count,
            first_weekday=first_weekday_index,
            grid_rows=grid_rows,
            columns=columns,
            rows=rows,
            cells=cells,
        )

    def _events_by_day(self, events: list[CalendarEvent]) -> dict[int, list[CalendarEvent]]:
        by_day: dict[int, list[CalendarEvent]] = {}
        for event in events:
            by_day.setdefault(event.start.calendar_date(self.tz).day, []).append(event)
        return by_day

    def _day_cell(self, day: int, by_day: dict[int, list[CalendarEvent]]) -> DayCell:
        return DayCell(day=day, events=by_day.get(day, []), max_visible=self.max_visible_events)

    def _standard_cells(
        self,
        day_count: int,
        first_weekday_index: int,
        rows: int,
        by_day: dict[int, list[CalendarEvent]],
    ) -> list[GridCell]:
        cells: list[GridCell] = [WeekdayHeader(label=name[:3]) for name in WEEKDAY_NAMES]
        cells.extend(Blank() for _ in range(first_weekday_index))
        cells.extend(self._day_cell(day, by_day) for day in range(1, day_count + 1))

        trailing = rows * STANDARD_COLUMNS - (first_weekday_index + day_count)
        cells.extend(Blank() for _ in range(trailing))
        return cells

    def _strip_cells(
        self,
        day_count: int,
        first_weekday_index: int,
        rows: int,
        columns: int,
        by_day: dict[int, list[CalendarEvent]],
    ) -> list[GridCell]:
        cells: list[GridCell] = []
        for row in range(rows):
            days = [row * columns + col + 1 for col in range(columns)]

            for day in days:
                if day <= day_count:
                    weekday = (first_weekday_index + day - 1) % 7
                    cells.append(WeekdayHeader(label=weekday_label(weekday, columns)))
                else:
                    cells.append(Blank())

            for day in days:
                cells.append(self._day_cell(day, by_day) if day <= day_count else Blank())
        return cells


def build_month_grid(
    month: int,
    year: int,
    events: list[CalendarEvent],
    grid_rows: int = 0,
    *,
    max_visible_events: int = DEFAULT_MAX_VISIBLE_EVENTS,
    tz: Optional[tzinfo] = None,
) -> MonthGrid:
    """Lay out a calendar month from its index and year."""
    engine = GridLayoutEngine(max_visible_events=max_visible_events, tz=tz)
    return engine.layout(
        month,
        year,
        days_in_month(month, year),
        first_weekday(month, year),
        grid_rows,
        events,
    )
