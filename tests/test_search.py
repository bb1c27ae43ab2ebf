from __future__ import annotations

import logging
from typing import List

import pytest

from weather_lookup.config import CURRENT_URL, FORECAST_URL, GEOCODE_URL
from weather_lookup.entities import Coordinates, DisplayUnit
from weather_lookup.errors import NotFoundError, TransportError, ValidationError
from weather_lookup.presentation import convert_temperature, select_daily_slice, select_hourly_slice
from weather_lookup.services.search import (
    Failed,
    GeocodingInFlight,
    Idle,
    SearchOrchestrator,
    Success,
    WeatherInFlight,
    build_clients,
)


@pytest.fixture
def orchestrator(config) -> SearchOrchestrator:
    geocoder, fetcher = build_clients(config)
    return SearchOrchestrator(geocoder, fetcher)


@pytest.fixture
def london_endpoints(requests_mock, geocode_payload, current_payload, forecast_factory):
    return {
        "geocode": requests_mock.get(GEOCODE_URL, json=geocode_payload),
        "current": requests_mock.get(CURRENT_URL, json=current_payload),
        "forecast": requests_mock.get(FORECAST_URL, json=forecast_factory(40)),
    }


class RecordingFetcher:
    def __init__(self) -> None:
        self.calls: List[str] = []

    def fetch_current(self, coords):
        self.calls.append("current")
        raise AssertionError("fetch_current should not be reached")

    def fetch_forecast(self, coords):
        self.calls.append("forecast")
        raise AssertionError("fetch_forecast should not be reached")


def test_starts_idle(orchestrator):
    assert isinstance(orchestrator.state, Idle)
    assert orchestrator.loading is False


def test_end_to_end_london(orchestrator, london_endpoints):
    state = orchestrator.submit("London")

    assert isinstance(state, Success)
    assert state.current.location_name == "London"
    assert convert_temperature(state.current.temperature_c, DisplayUnit.CELSIUS) == "15.0°C"
    assert convert_temperature(state.current.temperature_c, DisplayUnit.FAHRENHEIT) == "59.0°F"
    assert len(select_hourly_slice(state.forecast)) == 16
    assert len(select_daily_slice(state.forecast)) == 5
    assert orchestrator.loading is False
    assert london_endpoints["forecast"].last_request.qs["lat"] == ["51.5"]


def test_loading_spans_the_whole_search(orchestrator, london_endpoints):
    seen = []
    orchestrator.subscribe(lambda state: seen.append((state.name, state.loading)))

    orchestrator.submit("London")

    assert seen == [
        ("validating", True),
        ("geocoding", True),
        ("fetching", True),
        ("success", False),
    ]


@pytest.mark.parametrize("query", ["", "   \t"])
def test_empty_query_fails_without_network(orchestrator, requests_mock, query):
    state = orchestrator.submit(query)

    assert isinstance(state, Failed)
    assert isinstance(state.reason, ValidationError)
    assert state.message == "Please enter a city name"
    assert requests_mock.call_count == 0


def test_not_found_skips_weather_calls(orchestrator, requests_mock):
    requests_mock.get(GEOCODE_URL, json=[])
    current = requests_mock.get(CURRENT_URL, json={})
    forecast = requests_mock.get(FORECAST_URL, json={})

    state = orchestrator.submit("Atlantis")

    assert isinstance(state, Failed)
    assert isinstance(state.reason, NotFoundError)
    assert not current.called
    assert not forecast.called


def test_current_failure_aborts_and_clears_previous_result(orchestrator, requests_mock, london_endpoints):
    assert isinstance(orchestrator.submit("London"), Success)

    requests_mock.get(CURRENT_URL, status_code=500, json={"cod": 500, "message": "Internal error"})
    forecast = requests_mock.get(FORECAST_URL, json={"list": []})

    state = orchestrator.submit("London")

    assert isinstance(state, Failed)
    assert isinstance(state.reason, TransportError)
    assert state.message == "Internal error"
    assert not forecast.called
    assert not hasattr(orchestrator.state, "current")


def test_forecast_failure_discards_current_conditions(orchestrator, requests_mock, geocode_payload, current_payload):
    requests_mock.get(GEOCODE_URL, json=geocode_payload)
    current = requests_mock.get(CURRENT_URL, json=current_payload)
    requests_mock.get(FORECAST_URL, status_code=503, text="unavailable")

    state = orchestrator.submit("London")

    assert current.called
    assert isinstance(state, Failed)
    assert state.message == "Failed to fetch weather data"


def test_validation_failure_clears_previous_result(orchestrator, london_endpoints):
    orchestrator.submit("London")

    state = orchestrator.submit(" ")

    assert isinstance(state, Failed)
    assert isinstance(state.reason, ValidationError)
    assert not hasattr(state, "forecast")


def test_success_after_failure_clears_error(orchestrator, requests_mock, london_endpoints):
    assert isinstance(orchestrator.submit(""), Failed)

    state = orchestrator.submit("London")

    assert isinstance(state, Success)
    assert not hasattr(state, "reason")


def test_submit_while_in_flight_is_ignored(config):
    fetcher = RecordingFetcher()
    nested = []

    class ReentrantGeocoder:
        def __init__(self) -> None:
            self.queries: List[str] = []

        def resolve(self, city_name):
            self.queries.append(city_name)
            nested.append(orchestrator.submit("Paris"))
            raise TransportError("boom")

    geocoder = ReentrantGeocoder()
    orchestrator = SearchOrchestrator(geocoder, fetcher)

    state = orchestrator.submit("London")

    assert geocoder.queries == ["London"]
    assert len(nested) == 1
    assert isinstance(nested[0], GeocodingInFlight)
    assert nested[0].query == "London"
    assert isinstance(state, Failed)
    assert fetcher.calls == []


def test_dispose_mid_flight_discards_results():
    fetcher = RecordingFetcher()

    class DisposingGeocoder:
        def resolve(self, city_name):
            orchestrator.dispose()
            return Coordinates(latitude=1.0, longitude=2.0)

    orchestrator = SearchOrchestrator(DisposingGeocoder(), fetcher)
    seen = []
    orchestrator.subscribe(seen.append)

    state = orchestrator.submit("London")

    assert isinstance(state, GeocodingInFlight)
    assert fetcher.calls == []
    assert orchestrator.disposed
    assert [s.name for s in seen] == ["validating", "geocoding"]


def test_submit_after_dispose_does_nothing(orchestrator, requests_mock):
    orchestrator.dispose()

    state = orchestrator.submit("London")

    assert isinstance(state, Idle)
    assert requests_mock.call_count == 0


def test_unsubscribe_stops_notifications(orchestrator, requests_mock):
    seen = []
    unsubscribe = orchestrator.subscribe(seen.append)
    unsubscribe()

    orchestrator.submit("")

    assert seen == []


@pytest.mark.parametrize(
    ("geocode", "error_class"),
    [
        ({"json": []}, NotFoundError),
        ({"status_code": 500, "json": {"cod": 500, "message": "Internal error"}}, TransportError),
        ({"json": {"results": []}}, TransportError),
        ({"json": [{"name": "London", "lon": -0.12}]}, TransportError),
        ({"json": [None]}, TransportError),
    ],
)
def test_geocoder_failure_clears_previous_result(orchestrator, requests_mock, london_endpoints, geocode, error_class):
    assert isinstance(orchestrator.submit("London"), Success)

    requests_mock.get(GEOCODE_URL, **geocode)
    current = requests_mock.get(CURRENT_URL, json={})

    state = orchestrator.submit("London")

    assert isinstance(state, Failed)
    assert isinstance(state.reason, error_class)
    assert orchestrator.loading is False
    assert not hasattr(orchestrator.state, "current")
    assert not current.called


@pytest.mark.parametrize(
    ("endpoint", "payload"),
    [
        (CURRENT_URL, {"name": "London", "sys": "GB", "main": {"temp": 15.0}, "weather": {"icon": "04d"}}),
        (FORECAST_URL, {"list": [None, "x"], "city": []}),
    ],
)
def test_malformed_weather_bodies_still_settle(orchestrator, requests_mock, london_endpoints, endpoint, payload):
    requests_mock.get(endpoint, json=payload)

    state = orchestrator.submit("London")

    assert orchestrator.loading is False
    assert isinstance(state, Success)


def test_unexpected_error_settles_as_failed_and_propagates():
    class BrokenGeocoder:
        def resolve(self, city_name):
            raise KeyError(0)

    orchestrator = SearchOrchestrator(BrokenGeocoder(), RecordingFetcher())

    with pytest.raises(KeyError):
        orchestrator.submit("London")

    assert isinstance(orchestrator.state, Failed)
    assert isinstance(orchestrator.state.reason, TransportError)
    assert orchestrator.loading is False


def test_no_success_log_after_dispose(caplog):
    class Fetcher:
        def fetch_current(self, coords):
            return object()

        def fetch_forecast(self, coords):
            orchestrator.dispose()
            return []

    class StaticGeocoder:
        def resolve(self, city_name):
            return Coordinates(latitude=1.0, longitude=2.0)

    orchestrator = SearchOrchestrator(StaticGeocoder(), Fetcher())

    with caplog.at_level(logging.INFO):
        state = orchestrator.submit("London")

    assert isinstance(state, WeatherInFlight)
    assert "succeeded" not in caplog.text
