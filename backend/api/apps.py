from __future__ import annotations

from django.apps import AppConfig
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from weather_lookup.config import LookupConfig
from weather_lookup.errors import ConfigurationError


class ApiConfig(AppConfig):
    name = "backend.api"
    label = "weather_api"

    def ready(self) -> None:
        # Fail at startup, not on the first search.
        try:
            LookupConfig.from_settings(settings)
        except ConfigurationError as exc:
            raise ImproperlyConfigured(str(exc)) from exc
