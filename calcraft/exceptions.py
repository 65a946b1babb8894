"""Base exception for CalCraft errors."""

from typing import Optional


class CalCraftError(Exception):
    """Base exception for all CalCraft errors."""

    def __init__(self, message: str, details: Optional[dict] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class StateError(CalCraftError):
    """Exception raised for invalid application state operations."""


class CalendarNotFoundError(StateError):
    """Exception raised when a calendar id is not present in the state."""
