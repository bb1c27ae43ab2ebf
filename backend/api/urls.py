"""API URL configuration."""
from __future__ import annotations

from django.urls import path

from backend.api.views import WeatherSearchView

urlpatterns = [
    path("weather/search", WeatherSearchView.as_view(), name="weather-search"),
]
