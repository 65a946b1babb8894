"""DateTime normalization for ICS date tokens.

Turns ``DTSTART``/``DTEND`` values into tagged :class:`EventInstant` objects
without any timezone database lookups: the literal digits are always taken
as-is, and the trailing ``Z`` (or its absence) only decides the tag.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Optional

from .exceptions import DateParseError
from .models import EventInstant, InstantKind

UTC = timezone.utc

logger = logging.getLogger(__name__)

# YYYYMMDD, optionally followed by THHMMSS and a trailing Z
ICS_DATE_PATTERN = re.compile(r"^(\d{4})(\d{2})(\d{2})(?:T(\d{2})(\d{2})(\d{2})(Z)?)?")
LOOSE_DATE_PATTERN = re.compile(r"(\d{4})(\d{2})(\d{2})")


def parse_ics_date(token: Optional[str]) -> EventInstant:
    """Parse an ICS date or date-time token into a tagged instant.

    Args:
        token: Raw property value, e.g. ``20240704``, ``20240704T093000`` or
            ``20240704T093000Z``

    Returns:
        EventInstant tagged all-day, UTC or floating

    Raises:
        DateParseError: If neither the strict pattern nor the loose
            eight-digit fallback yields a valid date
    """
    if token is None:
        raise DateParseError(token)

    match = ICS_DATE_PATTERN.match(token.strip())
    if not match:
        return _parse_loose(token)

    year, month, day, hour, minute, second, zulu = match.groups()
    try:
        if hour is None:
            value = datetime(int(year), int(month), int(day), tzinfo=UTC)
            return EventInstant(value=value, kind=InstantKind.ALL_DAY)

        value = datetime(
            int(year), int(month), int(day), int(hour), int(minute), int(second)
        )
    except ValueError as e:
        # Out-of-range time fields may still sit on a valid date
        logger.debug("Strict parse of %r failed (%s), trying loose fallback", token, e)
        return _parse_loose(token)

    if zulu:
        return EventInstant(value=value.replace(tzinfo=UTC), kind=InstantKind.UTC)
    return EventInstant(value=value, kind=InstantKind.FLOATING)


def _parse_loose(token: str) -> EventInstant:
    """Extract the first eight consecutive digits as YYYYMMDD."""
    match = LOOSE_DATE_PATTERN.search(token)
    if not match:
        raise DateParseError(token)

    year, month, day = (int(part) for part in match.groups())
    try:
        value = datetime(year, month, day, tzinfo=UTC)
    except ValueError as e:
        raise DateParseError(token, f"Invalid date fields in {token!r}: {e}") from e

    logger.debug("Loose date fallback used for %r", token)
    return EventInstant(value=value, kind=InstantKind.ALL_DAY)


def parse_ics_date_or_now(token: Optional[str]) -> EventInstant:
    """Parse a date token, substituting the current instant on failure.

    A single unreadable date must not abort a whole document, so the error is
    logged and replaced by ``now`` tagged as UTC.
    """
    try:
        return parse_ics_date(token)
    except DateParseError as e:
        logger.warning("%s, substituting current time", e.message)
        return EventInstant(value=datetime.now(UTC).replace(microsecond=0), kind=InstantKind.UTC)
