"""OpenWeather weather provider."""
from __future__ import annotations

import logging
import os
from typing import List, Optional

import requests
from pydantic import BaseModel, Field, ValidationError, field_validator

from weatherproxy.core.abstractions import WeatherReading, WeatherProvider
from weatherproxy.core.errors import UpstreamResponseError, UpstreamUnavailable


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openweathermap.org/data/2.5/weather"


class _MainBlock(BaseModel):
    temp: float = Field(0.0, allow_inf_nan=False)
    temp_min: float = Field(0.0, allow_inf_nan=False)
    temp_max: float = Field(0.0, allow_inf_nan=False)

    @field_validator("temp", "temp_min", "temp_max", mode="before")
    @classmethod
    def _null_as_zero(cls, value):
        return 0.0 if value is None else value


class _Condition(BaseModel):
    main: str = ""
    icon: str = ""

    @field_validator("main", "icon", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return "" if value is None else value


class OpenWeatherPayload(BaseModel):
    """Subset of the current weather response the proxy relies on.

    ``main`` and a non-empty ``weather`` list are required; every leaf value
    falls back to an empty string or zero when absent or null.
    """

    name: str = ""
    main: _MainBlock
    weather: List[_Condition] = Field(min_length=1)

    @field_validator("name", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return "" if value is None else value

    def to_reading(self) -> WeatherReading:
        condition = self.weather[0]
        return WeatherReading(
            city=self.name,
            temp_k=self.main.temp,
            temp_min_k=self.main.temp_min,
            temp_max_k=self.main.temp_max,
            condition=condition.main,
            icon=condition.icon,
        )


def format_coordinate(value: float) -> str:
    """Render a coordinate the way it is sent upstream (``10`` rather than ``10.0``)."""
    if value.is_integer():
        return str(int(value))
    return repr(value)


class OpenWeatherProvider(WeatherProvider):
    """Integration with the OpenWeather current weather endpoint."""

    name = "openweather"

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()
        self._testing_mode = os.environ.get("TESTING_MODE", "0") == "1"

    def get_reading(self, latitude: float, longitude: float) -> WeatherReading:  # noqa: D401
        """Return the current observation from OpenWeather."""
        return self.parse_reading(self.fetch_current(latitude, longitude))

    def fetch_current(self, latitude: float, longitude: float) -> str:
        """Issue a single request upstream and return the raw body text."""
        params = {
            "lat": format_coordinate(latitude),
            "lon": format_coordinate(longitude),
            "appid": self.api_key,
        }
        try:
            response = self.session.get(self.base_url, params=params, timeout=self.timeout)
            body = response.text
        except requests.RequestException as exc:
            logger.warning("OpenWeather request failed: %s", exc)
            raise UpstreamUnavailable() from exc
        self._log_response(response.url, response)
        return body

    def parse_reading(self, body: str) -> WeatherReading:
        try:
            payload = OpenWeatherPayload.model_validate_json(body)
        except ValidationError as exc:
            logger.error("Unexpected OpenWeather response: %s", exc.errors(include_url=False))
            raise UpstreamResponseError() from exc
        return payload.to_reading()

    def _log_response(self, url: str, response: requests.Response) -> None:
        if not self._testing_mode:
            return
        body_preview = response.text[:500]
        logger.info(
            "OpenWeather request", extra={"url": url, "status": response.status_code, "body": body_preview}
        )
