"""OpenWeather current-conditions and forecast client."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from .base import OpenWeatherClient, _safe_float, _safe_int, _safe_text
from ..entities import MAX_UTC_OFFSET, Coordinates, CurrentConditions, ForecastEntry, ForecastSeries
from ..errors import TransportError


class WeatherFetcher(OpenWeatherClient):
    """Fetch current conditions and the 5 day / 3 hour forecast for coordinates."""

    def fetch_current(self, coords: Coordinates) -> CurrentConditions:
        data = self._fetch(self.config.current_url, coords)
        main = data.get("main")
        if not isinstance(main, dict) or _safe_float(main.get("temp")) is None:
            raise TransportError("Missing current conditions in response")
        weather = _first_weather(data)
        wind = _block(data, "wind")
        sys_block = _block(data, "sys")
        return CurrentConditions(
            location_name=_safe_text(data.get("name")) or coords.name or "",
            country_code=_safe_text(sys_block.get("country")) or coords.country,
            temperature_c=_safe_float(main.get("temp")),
            feels_like_c=_safe_float(main.get("feels_like")),
            humidity_percent=_safe_int(main.get("humidity")),
            wind_speed_ms=_safe_float(wind.get("speed")),
            pressure_hpa=_safe_float(main.get("pressure")),
            condition=_safe_text(weather.get("main")),
            description=_safe_text(weather.get("description")) or "",
            icon=_safe_text(weather.get("icon")),
            observed_at=self._parse_timestamp(data.get("dt")),
            utc_offset_seconds=self._parse_offset(data.get("timezone")),
        )

    def fetch_forecast(self, coords: Coordinates) -> ForecastSeries:
        data = self._fetch(self.config.forecast_url, coords)
        items = data.get("list")
        if not isinstance(items, list):
            raise TransportError("Missing forecast list in response")
        entries: List[ForecastEntry] = []
        for item in items:
            entry = self._build_entry(item)
            if entry is not None:
                entries.append(entry)
        city = _block(data, "city")
        return ForecastSeries(
            entries=tuple(entries),
            city_name=_safe_text(city.get("name")),
            utc_offset_seconds=self._parse_offset(city.get("timezone")),
        )

    # Helpers ------------------------------------------------------------
    def _fetch(self, url: str, coords: Coordinates) -> dict:
        params = {
            "lat": coords.latitude,
            "lon": coords.longitude,
            "units": self.config.units,
        }
        data = self._get(url, params)
        if not isinstance(data, dict):
            raise TransportError("Invalid response from weather service")
        return data

    def _build_entry(self, item: object) -> Optional[ForecastEntry]:
        if not isinstance(item, dict):
            self._log.debug("Skipping malformed forecast entry: %r", item)
            return None
        main = _block(item, "main")
        timestamp = _safe_int(item.get("dt"))
        temperature = _safe_float(main.get("temp"))
        if timestamp is None or temperature is None or self._parse_timestamp(timestamp) is None:
            self._log.debug("Skipping incomplete forecast entry: %s", item)
            return None
        weather = _first_weather(item)
        wind = _block(item, "wind")
        return ForecastEntry(
            timestamp=timestamp,
            temperature_c=temperature,
            feels_like_c=_safe_float(main.get("feels_like")),
            humidity_percent=_safe_int(main.get("humidity")),
            wind_speed_ms=_safe_float(wind.get("speed")),
            pressure_hpa=_safe_float(main.get("pressure")),
            condition=_safe_text(weather.get("main")),
            description=_safe_text(weather.get("description")) or "",
            icon=_safe_text(weather.get("icon")),
        )

    def _parse_timestamp(self, value: Optional[object]) -> Optional[datetime]:
        seconds = _safe_int(value)
        if seconds is None:
            return None
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            self._log.warning("Ignoring out-of-range timestamp %r", value)
            return None

    def _parse_offset(self, value: Optional[object]) -> int:
        offset = _safe_int(value)
        if offset is None:
            return 0
        if abs(offset) > MAX_UTC_OFFSET:
            self._log.warning("Ignoring out-of-range UTC offset %r", value)
            return 0
        return offset


def _block(payload: dict, key: str) -> dict:
    value = payload.get(key)
    return value if isinstance(value, dict) else {}


def _first_weather(payload: dict) -> dict:
    weather = payload.get("weather")
    if isinstance(weather, list) and weather and isinstance(weather[0], dict):
        return weather[0]
    return {}


__all__ = ["WeatherFetcher"]
