"""Shared test configuration and fixtures."""

import logging
import os
from collections.abc import Callable, Iterator
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import pytest

from calcraft.config.settings import CalCraftSettings, reset_settings
from calcraft.ics.models import CalendarEvent, EventInstant, InstantKind

SAMPLE_ICS = (
    "BEGIN:VCALENDAR\r\n"
    "VERSION:2.0\r\n"
    "PRODID:-//CalCraft//Tests//EN\r\n"
    "X-WR-CALNAME:Family\r\n"
    "BEGIN:VEVENT\r\n"
    "UID:new-year@example.com\r\n"
    "DTSTART;VALUE=DATE:20240101\r\n"
    "SUMMARY:New Year\r\n"
    "END:VEVENT\r\n"
    "BEGIN:VEVENT\r\n"
    "UID:independence@example.com\r\n"
    "DTSTART;VALUE=DATE:20240704\r\n"
    "DTEND;VALUE=DATE:20240705\r\n"
    "SUMMARY:Independence Day\r\n"
    "RRULE:FREQ=YEARLY\r\n"
    "END:VEVENT\r\n"
    "BEGIN:VEVENT\r\n"
    "UID:standup@example.com\r\n"
    "DTSTART:20240704T090000Z\r\n"
    "DTEND:20240704T091500Z\r\n"
    "SUMMARY:Standup\r\n"
    "DESCRIPTION:Daily sync\\, short\r\n"
    "END:VEVENT\r\n"
    "END:VCALENDAR\r\n"
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Drop CALCRAFT_* variables and the cached settings instance."""
    for key in list(os.environ):
        if key.upper().startswith("CALCRAFT_"):
            monkeypatch.delenv(key)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture(autouse=True)
def reset_calcraft_logger() -> Iterator[None]:
    """Remove handlers installed by setup_logging during a test."""
    yield
    logger = logging.getLogger("calcraft")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def settings(tmp_path: Path) -> CalCraftSettings:
    """Settings for 2030 that never read a YAML file from the machine."""
    return CalCraftSettings(year=2030, config_file=tmp_path / "missing.yaml")


@pytest.fixture
def sample_ics() -> str:
    return SAMPLE_ICS


@pytest.fixture
def make_event() -> Callable[..., CalendarEvent]:
    """Factory for events with all-day defaults."""

    def _make_event(
        title: str = "Event",
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        kind: InstantKind = InstantKind.ALL_DAY,
        rrule: Optional[str] = None,
        **fields: object,
    ) -> CalendarEvent:
        start = start or datetime(2024, 7, 4, tzinfo=timezone.utc)
        return CalendarEvent(
            title=title,
            start=EventInstant(value=start, kind=kind),
            end=EventInstant(value=end, kind=kind) if end is not None else None,
            rrule=rrule,
            **fields,
        )

    return _make_event
