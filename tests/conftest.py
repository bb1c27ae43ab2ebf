from __future__ import annotations

from typing import Callable, Dict, List

import pytest

from weather_lookup.config import LookupConfig


# 2024-01-01 12:00:00 UTC, a Monday
BASE_TS = 1704110400
STEP = 3 * 60 * 60


@pytest.fixture
def config() -> LookupConfig:
    return LookupConfig(api_key="test-key")


@pytest.fixture
def geocode_payload() -> List[Dict]:
    return [{"name": "London", "lat": 51.5, "lon": -0.12, "country": "GB", "state": "England"}]


@pytest.fixture
def current_payload() -> Dict:
    return {
        "name": "London",
        "dt": BASE_TS,
        "timezone": 0,
        "sys": {"country": "GB"},
        "main": {"temp": 15.0, "feels_like": 13.2, "humidity": 81, "pressure": 1012},
        "wind": {"speed": 4.12},
        "weather": [{"id": 803, "main": "Clouds", "description": "broken clouds", "icon": "04d"}],
    }


def make_forecast(count: int = 40, start_temp: float = 10.0) -> Dict:
    return {
        "cod": "200",
        "cnt": count,
        "list": [
            {
                "dt": BASE_TS + idx * STEP,
                "main": {"temp": start_temp + idx, "feels_like": start_temp + idx - 1, "humidity": 70, "pressure": 1010},
                "wind": {"speed": 3.0},
                "weather": [{"main": "Rain", "description": "light rain", "icon": "10d"}],
            }
            for idx in range(count)
        ],
        "city": {"name": "London", "country": "GB", "timezone": 0},
    }


@pytest.fixture
def forecast_factory() -> Callable[..., Dict]:
    return make_forecast
