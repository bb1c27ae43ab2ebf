from __future__ import annotations

from .base import OpenWeatherClient, _safe_float, _safe_text
from ..entities import Coordinates
from ..errors import NotFoundError, TransportError, ValidationError


EMPTY_QUERY_MESSAGE = "Please enter a city name"


class Geocoder(OpenWeatherClient):
    """Resolve a free-text city name through the OpenWeather direct geocoding API."""

    def resolve(self, city_name: str) -> Coordinates:
        city = (city_name or "").strip()
        if not city:
            raise ValidationError(EMPTY_QUERY_MESSAGE)

        data = self._get(self.config.geocode_url, {"q": city, "limit": 1})
        if not isinstance(data, list):
            raise TransportError("Invalid response from geocoding service")
        if not data:
            self._log.info("No geocoding match for %r", city)
            raise NotFoundError(f"City '{city}' not found")

        match = data[0]
        if not isinstance(match, dict):
            raise TransportError("Invalid response from geocoding service")
        latitude = _safe_float(match.get("lat"))
        longitude = _safe_float(match.get("lon"))
        if latitude is None or longitude is None:
            raise TransportError("Invalid response from geocoding service")
        return Coordinates(
            latitude=latitude,
            longitude=longitude,
            name=_safe_text(match.get("name")),
            country=_safe_text(match.get("country")),
        )


__all__ = ["EMPTY_QUERY_MESSAGE", "Geocoder"]
