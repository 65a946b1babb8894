"""ICS-specific exceptions for error handling."""

from typing import Optional

from ..exceptions import CalCraftError


class ICSError(CalCraftError):
    """Base exception for ICS-related errors."""


class ICSParseError(ICSError):
    """Exception raised when ICS content cannot be parsed."""


class DateParseError(ICSParseError):
    """Exception raised when an ICS date token cannot be normalized."""

    def __init__(self, token: Optional[str], message: Optional[str] = None) -> None:
        super().__init__(message or f"Unable to parse ICS date: {token!r}")
        self.token = token


class ICSContentTooLargeError(ICSError):
    """Exception raised when ICS content exceeds size limits."""
