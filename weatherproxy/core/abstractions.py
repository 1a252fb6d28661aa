"""Core abstractions for the weather proxy domain."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class TemperatureUnit(str, Enum):
    FAHRENHEIT = "fahrenheit"
    CELSIUS = "celsius"
    KELVIN = "kelvin"


@dataclass(frozen=True, slots=True)
class WeatherQuery:
    """Validated query parameters of a weather request."""

    latitude: float
    longitude: float
    temp_unit: TemperatureUnit


@dataclass(frozen=True, slots=True)
class WeatherReading:
    """Upstream observation, temperatures in kelvin."""

    city: str
    temp_k: float
    temp_min_k: float
    temp_max_k: float
    condition: str
    icon: str


@dataclass(frozen=True, slots=True)
class WeatherReport:
    """Payload returned to the caller."""

    city: str
    temp: float
    min_temp: float
    max_temp: float
    weather: str
    weather_icon_url: str


@dataclass(frozen=True, slots=True)
class RequestLogEntry:
    """Immutable record of one served request."""

    latitude: float
    longitude: float
    temp_unit: TemperatureUnit
    timestamp: str

    def as_dict(self) -> dict:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "temp_unit": self.temp_unit.value,
            "timestamp": self.timestamp,
        }


class WeatherProvider(Protocol):
    """A data source returning raw current weather for coordinates."""

    name: str

    def get_reading(self, latitude: float, longitude: float) -> WeatherReading:
        """Fetch and parse a single observation for the provided coordinates."""
        ...


class RequestLogStore(Protocol):
    """Append-only destination for request log entries."""

    def append(self, entry: RequestLogEntry) -> None:
        """Persist a single entry."""
        ...
