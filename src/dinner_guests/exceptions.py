"""Exception classes for dinner-guests."""

from typing import Any, Optional


class DinnerGuestsError(Exception):
    """Base exception for all dinner-guests errors."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.details = details


class SourceError(DinnerGuestsError):
    """Base exception for errors talking to an external text source."""

    def __init__(self, message: str, source: Optional[str] = None, details: Optional[Any] = None):
        super().__init__(message, details)
        self.source = source


class NetworkFailure(SourceError):
    """Transport, DNS, timeout or HTTP status failure."""
    pass


class EmptyResult(SourceError):
    """The source answered but had nothing usable."""
    pass


class ConfigurationError(DinnerGuestsError):
    """Raised when configuration values are invalid."""
    pass
