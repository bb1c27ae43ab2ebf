from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterator, Optional, Tuple, Union, overload


# datetime.timezone accepts offsets strictly inside one day
MAX_UTC_OFFSET = 24 * 60 * 60 - 1


class DisplayUnit(str, Enum):
    CELSIUS = "C"
    FAHRENHEIT = "F"


@dataclass(frozen=True)
class Coordinates:
    """Geocoding result used to parameterize the weather calls."""

    latitude: float
    longitude: float
    name: Optional[str] = None
    country: Optional[str] = None


@dataclass(frozen=True)
class CurrentConditions:
    """Normalized current-conditions snapshot.

    Values are kept in metric units regardless of the display unit:
    - temperature in Celsius
    - pressure in hectopascal (hPa)
    - wind speed in metres per second (m/s)
    - humidity in percent
    """

    location_name: str
    country_code: Optional[str]
    temperature_c: float
    feels_like_c: Optional[float]
    humidity_percent: Optional[int]
    wind_speed_ms: Optional[float]
    pressure_hpa: Optional[float]
    condition: Optional[str]
    description: str
    icon: Optional[str]
    observed_at: Optional[datetime] = None
    utc_offset_seconds: int = 0


@dataclass(frozen=True)
class ForecastEntry:
    timestamp: int
    temperature_c: float
    feels_like_c: Optional[float]
    humidity_percent: Optional[int]
    wind_speed_ms: Optional[float]
    pressure_hpa: Optional[float]
    condition: Optional[str]
    description: str
    icon: Optional[str]


@dataclass(frozen=True)
class ForecastSeries:
    """Forecast entries in three-hour steps, in the order the API returned them."""

    entries: Tuple[ForecastEntry, ...] = field(default_factory=tuple)
    city_name: Optional[str] = None
    utc_offset_seconds: int = 0

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[ForecastEntry]:
        return iter(self.entries)

    @overload
    def __getitem__(self, index: int) -> ForecastEntry: ...

    @overload
    def __getitem__(self, index: slice) -> Tuple[ForecastEntry, ...]: ...

    def __getitem__(self, index: Union[int, slice]):
        return self.entries[index]


__all__ = ["MAX_UTC_OFFSET", "Coordinates", "CurrentConditions", "DisplayUnit", "ForecastEntry", "ForecastSeries"]
