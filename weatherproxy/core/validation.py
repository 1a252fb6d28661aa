"""Validation of the weather endpoint query parameters.

Checks run in a fixed order and only the first failure is reported:
presence of ``latitude``, ``longitude`` and ``temp_unit``, membership of
``temp_unit`` in the allowed units, then numeric parsing of ``longitude``
followed by ``latitude``.
"""
from __future__ import annotations

import math
import re
from typing import Any, Mapping, Optional

from weatherproxy.core.abstractions import TemperatureUnit, WeatherQuery
from weatherproxy.core.errors import QueryValidationError

ALLOWED_TEMP_UNITS = tuple(unit.value for unit in TemperatureUnit)

_DECIMAL_PREFIX = re.compile(r"^\s*(?P<number>[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)", re.ASCII)


def _single_value(params: Mapping[str, Any], name: str) -> Optional[str]:
    # QueryDict keeps repeated parameters; anything but exactly one value is rejected.
    getlist = getattr(params, "getlist", None)
    if callable(getlist):
        values = getlist(name)
        if len(values) != 1:
            return None
        value = values[0]
    else:
        value = params.get(name)
    if not isinstance(value, str) or not value:
        return None
    return value


def _parse_decimal(raw: str) -> Optional[float]:
    """Parse the longest leading decimal prefix, ``"12abc"`` reads as 12."""
    match = _DECIMAL_PREFIX.match(raw)
    if match is None:
        return None
    value = float(match.group("number"))
    if not math.isfinite(value):
        return None
    return value


def parse_weather_query(params: Mapping[str, Any]) -> WeatherQuery:
    """Validate raw query parameters and return a :class:`WeatherQuery`."""

    latitude_raw = _single_value(params, "latitude")
    longitude_raw = _single_value(params, "longitude")
    temp_unit_raw = _single_value(params, "temp_unit")

    if latitude_raw is None:
        raise QueryValidationError("request should contain a single 'latitude' query parameter")
    if longitude_raw is None:
        raise QueryValidationError("request should contain a single 'longitude' query parameter")
    if temp_unit_raw is None:
        raise QueryValidationError("request should contain a single 'temp_unit' query parameter")
    if temp_unit_raw not in ALLOWED_TEMP_UNITS:
        allowed = ", ".join(f"'{unit}'" for unit in ALLOWED_TEMP_UNITS)
        raise QueryValidationError(f"'temp_unit' query parameter must be one of: [{allowed}]")

    latitude = _parse_decimal(latitude_raw)
    longitude = _parse_decimal(longitude_raw)
    if longitude is None:
        raise QueryValidationError("'longitude' query parameter must be a decimal number")
    if latitude is None:
        raise QueryValidationError("'latitude' query parameter must be a decimal number")

    return WeatherQuery(latitude=latitude, longitude=longitude, temp_unit=TemperatureUnit(temp_unit_raw))


__all__ = ["ALLOWED_TEMP_UNITS", "parse_weather_query"]
