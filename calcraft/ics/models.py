"""Data models for ICS calendar processing."""

import uuid
from datetime import date, datetime, timezone, tzinfo
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

UTC = timezone.utc


class InstantKind(str, Enum):
    """How the literal fields of a date token are interpreted."""

    ALL_DAY = "all_day"
    UTC = "utc"
    FLOATING = "floating"


class EventInstant(BaseModel):
    """An absolute event time tagged with its ICS interpretation.

    All-day and UTC instants carry a UTC tzinfo. Floating instants are naive
    and read as the consuming environment's local wall clock.
    """

    value: datetime = Field(..., description="The instant")
    kind: InstantKind = Field(..., description="All-day, UTC or floating local")

    model_config = ConfigDict(frozen=True)

    @property
    def is_all_day(self) -> bool:
        return self.kind == InstantKind.ALL_DAY

    @property
    def is_midnight(self) -> bool:
        """Check if the literal time of day is exactly 00:00:00."""
        return self.value.hour == 0 and self.value.minute == 0 and self.value.second == 0

    def calendar_date(self, tz: Optional[tzinfo] = None) -> date:
        """Get the calendar day this instant falls on.

        All-day instants compare in UTC fields and floating instants in their
        literal fields. UTC timed instants are converted to local time, using
        ``tz`` or the system zone when it is None.
        """
        if self.kind == InstantKind.UTC:
            return self.value.astimezone(tz).date()
        return self.value.date()

    @field_serializer("value")
    def serialize_value(self, dt: datetime) -> str:
        """Serialize datetime to ISO format."""
        return dt.isoformat()


class CalendarEvent(BaseModel):
    """Calendar event parsed from a VEVENT block."""

    title: str = Field(..., description="Event title (SUMMARY)")
    start: EventInstant = Field(..., description="Event start (DTSTART)")
    end: Optional[EventInstant] = Field(default=None, description="Event end (DTEND)")
    description: Optional[str] = Field(default=None, description="Event description")
    rrule: Optional[str] = Field(default=None, description="Raw RRULE text")

    # Presentation tags, filled in when events are gathered from a calendar
    calendar_id: Optional[str] = Field(default=None, description="Owning calendar id")
    color: Optional[str] = Field(default=None, description="Owning calendar accent color")

    model_config = ConfigDict(frozen=True)

    @property
    def is_recurring(self) -> bool:
        return self.rrule is not None

    @property
    def is_all_day(self) -> bool:
        """Check if both endpoints sit exactly at midnight."""
        return self.start.is_midnight and (self.end is None or self.end.is_midnight)


class ICSParseResult(BaseModel):
    """Result of ICS parsing operation."""

    success: bool
    events: list[CalendarEvent] = Field(default_factory=list, description="Parsed events")
    calendar_name: Optional[str] = None

    # Parse statistics
    event_count: int = 0
    recurring_event_count: int = 0
    skipped_count: int = 0

    # Error information
    error_message: Optional[str] = None
    warnings: list[str] = Field(default_factory=list)

    parse_time: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def add_warning(self, warning: str) -> None:
        """Add a warning message."""
        self.warnings.append(warning)


class CalendarSource(BaseModel):
    """An imported calendar owning its parsed (unexpanded) events."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, description="Unique id")
    name: str = Field(..., description="Display name")
    events: list[CalendarEvent] = Field(default_factory=list, description="Owned events")
    active: bool = Field(default=True, description="Whether events are visible")
    color: str = Field(default="#8295AF", description="Accent color")

    @property
    def event_count(self) -> int:
        return len(self.events)
