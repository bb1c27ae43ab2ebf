"""REST API views for weather lookups."""
from __future__ import annotations

from functools import lru_cache
from typing import Tuple

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from weather_lookup.config import LookupConfig
from weather_lookup.errors import ConfigurationError, NotFoundError, TransportError, ValidationError, WeatherLookupError
from weather_lookup.presentation import parse_unit, render_weather
from weather_lookup.providers.geocoder import Geocoder
from weather_lookup.providers.openweather import WeatherFetcher
from weather_lookup.services.search import Failed, SearchOrchestrator, Success, build_clients


_ERROR_STATUS = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (TransportError, status.HTTP_502_BAD_GATEWAY),
    (ConfigurationError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


@lru_cache(maxsize=1)
def get_lookup_clients() -> Tuple[Geocoder, WeatherFetcher]:
    return build_clients(LookupConfig.from_settings(settings))


def _error_response(error: WeatherLookupError) -> Response:
    code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for error_class, error_status in _ERROR_STATUS:
        if isinstance(error, error_class):
            code = error_status
            break
    return Response({"state": "failed", "detail": str(error)}, status=code)


class WeatherSearchView(APIView):
    """Geocode ``city`` and return current conditions plus forecast views."""

    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):  # noqa: D401
        """Run one search and return the display model."""
        try:
            unit = parse_unit(request.query_params.get("unit"))
        except ValidationError as exc:
            return _error_response(exc)

        try:
            geocoder, fetcher = get_lookup_clients()
        except ConfigurationError as exc:
            return _error_response(exc)
        orchestrator = SearchOrchestrator(geocoder, fetcher)
        try:
            state = orchestrator.submit(request.query_params.get("city", ""))
        finally:
            orchestrator.dispose()

        if isinstance(state, Failed):
            return _error_response(state.reason)
        if not isinstance(state, Success):
            return Response(
                {"state": state.name, "detail": "Search did not complete"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        payload = {
            "state": state.name,
            "query": state.query,
            "unit": unit.value,
            "weather": render_weather(state.current, state.forecast, unit),
        }
        return Response(payload, status=status.HTTP_200_OK)
