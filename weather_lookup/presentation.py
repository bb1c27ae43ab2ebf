"""Pure display transforms for weather values.

Nothing here touches the network or mutates its inputs. Temperatures are
stored in Celsius and only converted when they are formatted.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Union

from .entities import MAX_UTC_OFFSET, CurrentConditions, DisplayUnit, ForecastEntry, ForecastSeries
from .errors import ValidationError


HOURLY_COUNT = 16
DAILY_STRIDE = 8
DAILY_COUNT = 5

ICON_URL_TEMPLATE = "https://openweathermap.org/img/wn/{code}{suffix}.png"

_UNIT_ALIASES = {
    "c": DisplayUnit.CELSIUS,
    "celsius": DisplayUnit.CELSIUS,
    "metric": DisplayUnit.CELSIUS,
    "f": DisplayUnit.FAHRENHEIT,
    "fahrenheit": DisplayUnit.FAHRENHEIT,
    "imperial": DisplayUnit.FAHRENHEIT,
}


class IconSize(str, Enum):
    SMALL = ""
    LARGE = "@2x"


def parse_unit(value: Optional[Union[str, DisplayUnit]]) -> DisplayUnit:
    if value is None or value == "":
        return DisplayUnit.CELSIUS
    if isinstance(value, DisplayUnit):
        return value
    unit = _UNIT_ALIASES.get(str(value).strip().lower())
    if unit is None:
        raise ValidationError(f"Unknown unit {value!r}; use C or F")
    return unit


def convert_temperature(temp_celsius: float, unit: Union[str, DisplayUnit]) -> str:
    if parse_unit(unit) is DisplayUnit.FAHRENHEIT:
        return f"{(temp_celsius * 9 / 5) + 32:.1f}°F"
    return f"{temp_celsius:.1f}°C"


def _local_datetime(unix_seconds: int, utc_offset: int) -> datetime:
    if abs(utc_offset) > MAX_UTC_OFFSET:
        utc_offset = 0
    return datetime.fromtimestamp(unix_seconds, tz=timezone(timedelta(seconds=utc_offset)))


def format_clock_time(unix_seconds: int, utc_offset: int = 0) -> str:
    """Hour and minute with a 2-digit hour, e.g. ``09:00``."""
    return _local_datetime(unix_seconds, utc_offset).strftime("%H:%M")


def format_calendar_date(unix_seconds: int, utc_offset: int = 0) -> str:
    """Short weekday, short month and day, e.g. ``Mon, Jan 5``."""
    moment = _local_datetime(unix_seconds, utc_offset)
    return f"{moment:%a}, {moment:%b} {moment.day}"


def capitalize_first(description: str) -> str:
    if not description:
        return description
    return description[0].upper() + description[1:]


def icon_url(icon_code: str, size: IconSize = IconSize.SMALL) -> str:
    return ICON_URL_TEMPLATE.format(code=icon_code, suffix=IconSize(size).value)


def select_hourly_slice(forecast: Iterable[ForecastEntry]) -> List[ForecastEntry]:
    return list(forecast)[:HOURLY_COUNT]


def select_daily_slice(forecast: Iterable[ForecastEntry]) -> List[ForecastEntry]:
    # one entry per 24h at 3-hour steps
    return list(forecast)[::DAILY_STRIDE][:DAILY_COUNT]


# Display model ----------------------------------------------------------
def render_weather(
    current: CurrentConditions,
    forecast: ForecastSeries,
    unit: DisplayUnit = DisplayUnit.CELSIUS,
) -> Dict[str, Any]:
    """Build the display model for a successful search."""
    location = current.location_name
    if current.country_code:
        location = f"{location}, {current.country_code}"
    offset = forecast.utc_offset_seconds or current.utc_offset_seconds
    return {
        "location": location,
        "temperature": convert_temperature(current.temperature_c, unit),
        "feels_like": _optional_temperature(current.feels_like_c, unit),
        "condition": current.condition,
        "description": capitalize_first(current.description),
        "humidity": _optional_suffix(current.humidity_percent, "%"),
        "wind_speed": _optional_suffix(current.wind_speed_ms, " m/s"),
        "pressure": _optional_suffix(current.pressure_hpa, " hPa"),
        "icon_url": icon_url(current.icon, IconSize.LARGE) if current.icon else None,
        "hourly": [
            _render_entry(entry, unit, time=format_clock_time(entry.timestamp, offset))
            for entry in select_hourly_slice(forecast)
        ],
        "daily": [
            _render_entry(entry, unit, date=format_calendar_date(entry.timestamp, offset))
            for entry in select_daily_slice(forecast)
        ],
    }


def _render_entry(entry: ForecastEntry, unit: DisplayUnit, **label: str) -> Dict[str, Any]:
    rendered: Dict[str, Any] = dict(label)
    rendered.update(
        {
            "timestamp": entry.timestamp,
            "temperature": convert_temperature(entry.temperature_c, unit),
            "description": capitalize_first(entry.description),
            "icon_url": icon_url(entry.icon) if entry.icon else None,
        }
    )
    return rendered


def _optional_temperature(value: Optional[float], unit: DisplayUnit) -> Optional[str]:
    if value is None:
        return None
    return convert_temperature(value, unit)


def _optional_suffix(value: Optional[Union[int, float]], suffix: str) -> Optional[str]:
    if value is None:
        return None
    return f"{value:g}{suffix}"


__all__ = [
    "DAILY_COUNT",
    "DAILY_STRIDE",
    "HOURLY_COUNT",
    "IconSize",
    "capitalize_first",
    "convert_temperature",
    "format_calendar_date",
    "format_clock_time",
    "icon_url",
    "parse_unit",
    "render_weather",
    "select_daily_slice",
    "select_hourly_slice",
]
