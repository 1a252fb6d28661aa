"""Temperature conversion helpers."""
from __future__ import annotations

import math

from weatherproxy.core.abstractions import TemperatureUnit

ABSOLUTE_ZERO_C = 273.15
PRECISION = 3


def round_number(value: float, digits: int) -> float:
    """Round half toward positive infinity to ``digits`` decimal places."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def convert_temperature(kelvin: float, unit: TemperatureUnit) -> float:
    """Convert a kelvin reading into ``unit``, rounded to three decimals."""
    if unit is TemperatureUnit.KELVIN:
        return round_number(kelvin, PRECISION)
    if unit is TemperatureUnit.CELSIUS:
        return round_number(kelvin - ABSOLUTE_ZERO_C, PRECISION)
    return round_number((kelvin - ABSOLUTE_ZERO_C) * (9 / 5) + 32, PRECISION)


__all__ = ["round_number", "convert_temperature"]
