"""Weather service turning provider readings into caller facing reports."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Optional

import logging

from weatherproxy.core.abstractions import (
    RequestLogEntry,
    TemperatureUnit,
    WeatherProvider,
    WeatherQuery,
    WeatherReading,
    WeatherReport,
)
from weatherproxy.core.conversion import convert_temperature


logger = logging.getLogger(__name__)

ICON_URL_TEMPLATE = "http://openweathermap.org/img/wn/{icon}@4x.png"


def utcnow_iso(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class WeatherProxyService:
    """Fetch a reading from the provider and reshape it for the requested unit."""

    def __init__(
        self,
        provider: WeatherProvider,
        clock: Callable[[], str] = utcnow_iso,
    ) -> None:
        self._provider = provider
        self._clock = clock

    def get_report(self, query: WeatherQuery) -> tuple[WeatherReport, RequestLogEntry]:
        """Return the report and the log entry describing the request.

        The timestamp is taken before the upstream call. Provider errors
        propagate unchanged.
        """
        timestamp = self._clock()
        reading = self._provider.get_reading(query.latitude, query.longitude)
        report = self.build_report(reading, query.temp_unit)
        logger.debug(
            "Built report for lat=%s lon=%s unit=%s", query.latitude, query.longitude, query.temp_unit.value
        )
        entry = RequestLogEntry(
            latitude=query.latitude,
            longitude=query.longitude,
            temp_unit=query.temp_unit,
            timestamp=timestamp,
        )
        return report, entry

    @staticmethod
    def build_report(reading: WeatherReading, unit: TemperatureUnit) -> WeatherReport:
        return WeatherReport(
            city=reading.city,
            temp=convert_temperature(reading.temp_k, unit),
            min_temp=convert_temperature(reading.temp_min_k, unit),
            max_temp=convert_temperature(reading.temp_max_k, unit),
            weather=reading.condition,
            weather_icon_url=ICON_URL_TEMPLATE.format(icon=reading.icon),
        )


__all__ = ["ICON_URL_TEMPLATE", "WeatherProxyService", "utcnow_iso"]
