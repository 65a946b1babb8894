"""Line-oriented ICS parser for VEVENT blocks."""

import logging
import re
from typing import Optional

from icalendar import Calendar

from .datetime_utils import parse_ics_date_or_now
from .models import CalendarEvent, ICSParseResult

logger = logging.getLogger(__name__)

# A line break followed by a space or tab continues the previous line
FOLDED_LINE_PATTERN = re.compile(r"\r?\n[ \t]")
LINE_SPLIT_PATTERN = re.compile(r"\r?\n")

EVENT_MARKER = "VEVENT"

# Property key -> CalendarEvent field
TEXT_PROPERTIES = {"SUMMARY": "title", "DESCRIPTION": "description"}
DATE_PROPERTIES = {"DTSTART": "start", "DTEND": "end"}
RRULE_PROPERTY = "RRULE"
CALENDAR_NAME_PROPERTY = "X-WR-CALNAME"


def unfold_lines(ics_content: str) -> list[str]:
    """Join folded continuation lines and split into logical lines."""
    unfolded = FOLDED_LINE_PATTERN.sub("", ics_content)
    return LINE_SPLIT_PATTERN.split(unfolded)


def unescape_text(value: str) -> str:
    """Undo the escaped comma and escaped newline text escapes."""
    return value.replace("\\,", ",").replace("\\n", "\n")


def split_property(line: str) -> Optional[tuple[str, str]]:
    """Split a content line into its base key and value.

    Parameters after ``;`` (such as ``VALUE=DATE``) are dropped from the key.

    Returns:
        (KEY, value) or None when the line has no ``:`` separator
    """
    name, sep, value = line.partition(":")
    if not sep:
        return None
    key = name.split(";", 1)[0].strip().upper()
    return key, value


class ICSParser:
    """Parse ICS documents into CalendarEvent lists.

    Uses a single open-event accumulator: ``BEGIN:VEVENT`` starts a fresh
    event (dropping any partial one) and ``END:VEVENT`` commits it only when
    it has both a title and a start instant. Malformed content is skipped,
    never raised.
    """

    def parse_ics_content(self, ics_content: Optional[str]) -> ICSParseResult:
        """Parse ICS content into structured calendar events.

        Args:
            ics_content: Raw ICS document text

        Returns:
            Parse result with events, statistics and warnings
        """
        if not ics_content or not ics_content.strip():
            logger.warning("Empty ICS content provided")
            return ICSParseResult(success=False, error_message="Empty ICS content")

        result = ICSParseResult(success=True)
        if not self.validate_ics_content(ics_content):
            result.add_warning("Content is not a well-formed VCALENDAR; parsed leniently")

        current: Optional[dict] = None

        for line in unfold_lines(ics_content):
            if not line.strip():
                continue

            prop = split_property(line)
            if prop is None:
                logger.debug("Skipping line without separator: %r", line[:80])
                continue
            key, value = prop
            marker = value.strip().upper()

            if key == "BEGIN" and marker == EVENT_MARKER:
                if current is not None:
                    logger.debug("Discarding unterminated VEVENT")
                current = {}
            elif key == "END" and marker == EVENT_MARKER:
                if current is not None:
                    self._commit_event(current, result)
                current = None
            elif current is not None:
                self._apply_property(current, key, value)
            elif key == CALENDAR_NAME_PROPERTY and result.calendar_name is None:
                result.calendar_name = unescape_text(value).strip() or None

        result.event_count = len(result.events)
        result.recurring_event_count = sum(1 for event in result.events if event.is_recurring)

        logger.debug(
            "Parsed %d events (%d recurring, %d skipped)",
            result.event_count,
            result.recurring_event_count,
            result.skipped_count,
        )
        return result

    def _apply_property(self, fields: dict, key: str, value: str) -> None:
        """Store a recognized VEVENT property on the accumulator."""
        if key in TEXT_PROPERTIES:
            fields[TEXT_PROPERTIES[key]] = unescape_text(value)
        elif key in DATE_PROPERTIES:
            fields[DATE_PROPERTIES[key]] = parse_ics_date_or_now(value)
        elif key == RRULE_PROPERTY:
            fields["rrule"] = value

    def _commit_event(self, fields: dict, result: ICSParseResult) -> None:
        """Append the accumulated event if it has a title and start."""
        if not fields.get("title") or fields.get("start") is None:
            result.skipped_count += 1
            logger.debug("Dropping VEVENT without title or start: %s", sorted(fields))
            return
        result.events.append(CalendarEvent(**fields))

    def validate_ics_content(self, ics_content: Optional[str]) -> bool:
        """Validate that content is a well-formed VCALENDAR document.

        Args:
            ics_content: ICS content to validate

        Returns:
            True if valid ICS format, False otherwise
        """
        if not ics_content or not ics_content.strip():
            return False

        if "BEGIN:VCALENDAR" not in ics_content or "END:VCALENDAR" not in ics_content:
            logger.debug("ICS content is missing VCALENDAR markers")
            return False

        try:
            Calendar.from_ical(ics_content)
        except Exception as e:
            logger.debug(f"ICS validation failed: {e}")
            return False

        return True


def parse_ics(ics_content: Optional[str]) -> list[CalendarEvent]:
    """Parse an ICS document into its committed events."""
    return ICSParser().parse_ics_content(ics_content).events
