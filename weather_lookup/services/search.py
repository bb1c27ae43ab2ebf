"""Search orchestration: geocode, then current conditions, then forecast.

The orchestrator owns the single state slot read by the presentation layer.
State is one of the variants below, so ``loading`` and an error can never be
set at the same time.

Policies:
- any error clears previously displayed results, validation errors included;
- a submit arriving while a search is in flight is ignored;
- after :meth:`SearchOrchestrator.dispose` in-flight results are dropped.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import Lock
from typing import Callable, List, Optional, Tuple, Union

import requests

from ..config import LookupConfig
from ..entities import Coordinates, CurrentConditions, ForecastSeries
from ..errors import TransportError, ValidationError, WeatherLookupError
from ..providers.geocoder import EMPTY_QUERY_MESSAGE, Geocoder
from ..providers.openweather import WeatherFetcher


@dataclass(frozen=True)
class Idle:
    name = "idle"
    loading = False


@dataclass(frozen=True)
class Validating:
    query: str
    name = "validating"
    loading = True


@dataclass(frozen=True)
class GeocodingInFlight:
    query: str
    name = "geocoding"
    loading = True


@dataclass(frozen=True)
class WeatherInFlight:
    query: str
    coordinates: Coordinates
    name = "fetching"
    loading = True


@dataclass(frozen=True)
class Success:
    query: str
    current: CurrentConditions
    forecast: ForecastSeries
    name = "success"
    loading = False


@dataclass(frozen=True)
class Failed:
    query: str
    reason: WeatherLookupError
    name = "failed"
    loading = False

    @property
    def message(self) -> str:
        return str(self.reason)


SearchState = Union[Idle, Validating, GeocodingInFlight, WeatherInFlight, Success, Failed]
StateListener = Callable[[SearchState], None]


class SearchOrchestrator:
    """Run one weather search per submit and keep its outcome."""

    def __init__(
        self,
        geocoder: Geocoder,
        fetcher: WeatherFetcher,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.geocoder = geocoder
        self.fetcher = fetcher
        self._log = logger or logging.getLogger(self.__class__.__name__)
        self._state: SearchState = Idle()
        self._listeners: List[StateListener] = []
        self._in_flight = Lock()
        self._disposed = False

    # Public API ---------------------------------------------------------
    @property
    def state(self) -> SearchState:
        return self._state

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def disposed(self) -> bool:
        return self._disposed

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register ``listener`` for every state change; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def submit(self, query: str) -> SearchState:
        if self._disposed:
            self._log.debug("Ignoring submit on disposed orchestrator")
            return self._state
        if not self._in_flight.acquire(blocking=False):
            self._log.info("Search already in flight; ignoring submit for %r", query)
            return self._state
        try:
            self._run(query)
        finally:
            self._in_flight.release()
        return self._state

    def dispose(self) -> None:
        """Tear down: results of a search still in flight are discarded."""
        self._disposed = True
        self._listeners.clear()

    # Helpers ------------------------------------------------------------
    def _run(self, query: str) -> None:
        city = (query or "").strip()
        self._transition(Validating(query=city))
        if not city:
            self._transition(Failed(query=city, reason=ValidationError(EMPTY_QUERY_MESSAGE)))
            return

        self._transition(GeocodingInFlight(query=city))
        try:
            coordinates = self.geocoder.resolve(city)
            if self._disposed:
                return
            self._transition(WeatherInFlight(query=city, coordinates=coordinates))
            current = self.fetcher.fetch_current(coordinates)
            if self._disposed:
                return
            forecast = self.fetcher.fetch_forecast(coordinates)
        except WeatherLookupError as exc:
            self._log.warning("Search for %r failed: %s", city, exc)
            self._transition(Failed(query=city, reason=exc))
            return
        except Exception:
            # never leave the slot in a loading state
            self._log.exception("Search for %r crashed", city)
            self._transition(Failed(query=city, reason=TransportError()))
            raise
        if self._disposed:
            return
        self._transition(Success(query=city, current=current, forecast=forecast))
        self._log.info("Search for %r succeeded with %d forecast entries", city, len(forecast))

    def _transition(self, state: SearchState) -> None:
        if self._disposed:
            self._log.debug("Dropping %s state after dispose", state.name)
            return
        self._state = state
        for listener in list(self._listeners):
            listener(state)


def build_clients(
    config: LookupConfig, session: Optional[requests.Session] = None
) -> Tuple[Geocoder, WeatherFetcher]:
    """Create a geocoder and fetcher sharing one HTTP session."""
    session = session or requests.Session()
    return Geocoder(config, session=session), WeatherFetcher(config, session=session)


__all__ = [
    "build_clients",
    "Failed",
    "GeocodingInFlight",
    "Idle",
    "SearchOrchestrator",
    "SearchState",
    "Success",
    "Validating",
    "WeatherInFlight",
]
