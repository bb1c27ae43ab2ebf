from __future__ import annotations

from typing import Optional


DEFAULT_TRANSPORT_MESSAGE = "Failed to fetch weather data"


class WeatherLookupError(RuntimeError):
    """Base class for every error that terminates a search."""


class ValidationError(WeatherLookupError):
    """Raised for user input that cannot be searched."""


class ConfigurationError(WeatherLookupError):
    """Raised when the lookup is missing its credential or has bad settings."""


class NotFoundError(WeatherLookupError):
    """Raised when geocoding yields zero matches."""


class TransportError(WeatherLookupError):
    """Raised for network failures and non-2xx upstream responses."""

    def __init__(self, message: Optional[str] = None, *, status_code: Optional[int] = None) -> None:
        super().__init__(message or DEFAULT_TRANSPORT_MESSAGE)
        self.status_code = status_code


class QuotaExceeded(TransportError):
    """Raised when the provider reports a quota/usage limit issue."""


__all__ = [
    "ConfigurationError",
    "DEFAULT_TRANSPORT_MESSAGE",
    "NotFoundError",
    "QuotaExceeded",
    "TransportError",
    "ValidationError",
    "WeatherLookupError",
]
