"""ICS calendar parsing and recurrence expansion module."""

from .datetime_utils import parse_ics_date, parse_ics_date_or_now
from .exceptions import DateParseError, ICSContentTooLargeError, ICSError, ICSParseError
from .models import CalendarEvent, CalendarSource, EventInstant, ICSParseResult, InstantKind
from .parser import ICSParser, parse_ics
from .reader import decode_ics_bytes, read_ics_file
from .rrule_expander import (
    RRuleExpander,
    RRuleExpansionError,
    RRuleParseError,
    expand_recurring_for_year,
)

__all__ = [
    "CalendarEvent",
    "CalendarSource",
    "DateParseError",
    "EventInstant",
    "ICSContentTooLargeError",
    "ICSError",
    "ICSParseError",
    "ICSParseResult",
    "ICSParser",
    "InstantKind",
    "RRuleExpander",
    "RRuleExpansionError",
    "RRuleParseError",
    "decode_ics_bytes",
    "expand_recurring_for_year",
    "parse_ics",
    "parse_ics_date",
    "parse_ics_date_or_now",
    "read_ics_file",
]
