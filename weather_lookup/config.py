"""Explicit configuration for the OpenWeather clients.

The credential is read once, validated, and handed to the geocoder and the
weather fetcher at construction time.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .errors import ConfigurationError


API_KEY_ENV = "OPENWEATHER_API_KEY"

GEOCODE_URL = "https://api.openweathermap.org/geo/1.0/direct"
CURRENT_URL = "https://api.openweathermap.org/data/2.5/weather"
FORECAST_URL = "https://api.openweathermap.org/data/2.5/forecast"


@dataclass(frozen=True)
class LookupConfig:
    api_key: str
    geocode_url: str = GEOCODE_URL
    current_url: str = CURRENT_URL
    forecast_url: str = FORECAST_URL
    timeout: float = 10.0
    units: str = "metric"

    def __post_init__(self) -> None:
        if not self.api_key or not self.api_key.strip():
            raise ConfigurationError(f"{API_KEY_ENV} is not configured")
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LookupConfig":
        environ = os.environ if environ is None else environ
        timeout = environ.get("OPENWEATHER_TIMEOUT")
        return cls(
            api_key=environ.get(API_KEY_ENV, ""),
            geocode_url=environ.get("OPENWEATHER_GEOCODE_URL", GEOCODE_URL),
            current_url=environ.get("OPENWEATHER_CURRENT_URL", CURRENT_URL),
            forecast_url=environ.get("OPENWEATHER_FORECAST_URL", FORECAST_URL),
            timeout=_parse_timeout(timeout) if timeout else 10.0,
        )

    @classmethod
    def from_settings(cls, settings: Any) -> "LookupConfig":
        """Build the config from a Django settings object."""
        return cls(
            api_key=getattr(settings, "WEATHER_API_KEY", None) or "",
            geocode_url=getattr(settings, "WEATHER_GEOCODE_URL", GEOCODE_URL),
            current_url=getattr(settings, "WEATHER_CURRENT_URL", CURRENT_URL),
            forecast_url=getattr(settings, "WEATHER_FORECAST_URL", FORECAST_URL),
            timeout=_parse_timeout(getattr(settings, "WEATHER_TIMEOUT", 10.0)),
        )


def _parse_timeout(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"OPENWEATHER_TIMEOUT must be a number, got {value!r}") from exc


__all__ = ["API_KEY_ENV", "CURRENT_URL", "FORECAST_URL", "GEOCODE_URL", "LookupConfig"]
