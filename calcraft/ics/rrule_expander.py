"""Yearly RRULE expansion into year-scoped event instances."""

import logging
from datetime import datetime, timedelta, tzinfo
from typing import Any, Optional

from dateutil.relativedelta import relativedelta

from ..exceptions import CalCraftError
from .models import CalendarEvent, EventInstant

logger = logging.getLogger(__name__)

SUPPORTED_FREQUENCY = "YEARLY"


class RRuleExpansionError(CalCraftError):
    """Base exception for RRULE expansion errors."""


class RRuleParseError(RRuleExpansionError):
    """Error parsing RRULE string."""


def _naive(instant: EventInstant) -> datetime:
    return instant.value.replace(tzinfo=None)


class RRuleExpander:
    """Expand recurring events into concrete instances for one target year.

    Only ``FREQ=YEARLY`` is expanded. Events with any other (or an
    unreadable) rule are treated as single occurrences and kept only when
    they already fall in the target year.
    """

    def __init__(self, settings: Any = None, tz: Optional[tzinfo] = None):
        """Initialize RRuleExpander.

        Args:
            settings: Optional settings; ``enable_rrule_expansion`` is honored
            tz: Local zone used to place UTC timed events on a calendar day
        """
        self.settings = settings
        self.enable_expansion = getattr(settings, "enable_rrule_expansion", True)
        self.tz = tz

    def expand_for_year(self, events: list[CalendarEvent], year: int) -> list[CalendarEvent]:
        """Produce the events that occur in ``year``, in source order.

        Raises:
            RRuleExpansionError: If an instance cannot be built for a yearly event
        """
        expanded: list[CalendarEvent] = []

        for event in events:
            if self.enable_expansion and self._is_yearly(event):
                expanded.append(self.expand_yearly_event(event, year))
            elif event.start.calendar_date(self.tz).year == year:
                expanded.append(event)

        logger.debug("Expanded %d source events into %d for %d", len(events), len(expanded), year)
        return expanded

    def _is_yearly(self, event: CalendarEvent) -> bool:
        if not event.rrule:
            return False
        try:
            rule = self.parse_rrule_string(event.rrule)
        except RRuleParseError as e:
            logger.debug("Treating %r as non-recurring: %s", event.title, e)
            return False

        if rule["freq"] != SUPPORTED_FREQUENCY:
            logger.debug("Unsupported RRULE frequency %s for %r", rule["freq"], event.title)
            return False
        return True

    def expand_yearly_event(self, event: CalendarEvent, year: int) -> CalendarEvent:
        """Build the instance of a yearly event that falls in ``year``.

        Month, day and time of day are copied from the source; Feb 29 clamps
        to Feb 28 in non-leap years. All-day events keep their day span
        (a one-day span drops the exclusive end), timed events keep their
        duration. The recurrence rule is dropped from the instance.
        """
        try:
            start = event.start
            new_start = self._shift_year(start, year)

            new_end: Optional[EventInstant] = None
            if event.end is not None:
                if event.is_all_day:
                    span_days = (event.end.value.date() - start.value.date()).days
                    if span_days > 1:
                        new_end = EventInstant(
                            value=new_start.value + timedelta(days=span_days),
                            kind=new_start.kind,
                        )
                else:
                    # Literal fields, so a floating start may pair with a UTC end
                    duration = _naive(event.end) - _naive(start)
                    new_end = EventInstant(value=new_start.value + duration, kind=new_start.kind)

            return event.model_copy(update={"start": new_start, "end": new_end, "rrule": None})

        except Exception as e:
            raise RRuleExpansionError(
                f"Failed to expand RRULE for {event.title!r}: {e}",
                details={"title": event.title, "year": year},
            ) from e

    @staticmethod
    def _shift_year(instant: EventInstant, year: int) -> EventInstant:
        value = instant.value + relativedelta(years=year - instant.value.year)
        return EventInstant(value=value, kind=instant.kind)

    def parse_rrule_string(self, rrule_string: str) -> dict:
        """Parse RRULE string into components.

        Args:
            rrule_string: RRULE string (e.g. "FREQ=YEARLY;INTERVAL=1")

        Returns:
            Dictionary with parsed RRULE components

        Raises:
            RRuleParseError: If RRULE string is invalid
        """
        if not rrule_string or not rrule_string.strip():
            raise RRuleParseError("Empty RRULE string")

        rrule_dict: dict[str, Any] = {}

        for part in rrule_string.split(";"):
            if "=" not in part:
                continue
            key, value = part.split("=", 1)
            key = key.strip().lower()
            value = value.strip()

            if key == "freq":
                rrule_dict["freq"] = value.upper()
            elif key in ("interval", "count"):
                try:
                    rrule_dict[key] = int(value)
                except ValueError:
                    # Unreadable numbers stay as text
                    logger.debug("Keeping unreadable RRULE %s=%r as text", key.upper(), value)
                    rrule_dict[key] = value
            elif key == "byday":
                rrule_dict["byday"] = [day.strip().upper() for day in value.split(",")]
            else:
                # Kept for inspection; yearly expansion ignores modifiers
                rrule_dict[key] = value

        if not rrule_dict.get("freq"):
            raise RRuleParseError("RRULE missing required FREQ parameter")

        return rrule_dict


def expand_recurring_for_year(
    events: list[CalendarEvent], year: int, tz: Optional[tzinfo] = None
) -> list[CalendarEvent]:
    """Expand source events into the list of instances scoped to ``year``."""
    return RRuleExpander(tz=tz).expand_for_year(events, year)
