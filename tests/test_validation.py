from __future__ import annotations

import pytest
from django.http import QueryDict

from weatherproxy.core.abstractions import TemperatureUnit
from weatherproxy.core.errors import QueryValidationError
from weatherproxy.core.validation import parse_weather_query

VALID = {"latitude": "51.5", "longitude": "-0.12", "temp_unit": "celsius"}


def _message(params) -> str:
    with pytest.raises(QueryValidationError) as exc_info:
        parse_weather_query(params)
    return exc_info.value.message


def test_valid_query_is_parsed() -> None:
    query = parse_weather_query(VALID)

    assert query.latitude == 51.5
    assert query.longitude == -0.12
    assert query.temp_unit is TemperatureUnit.CELSIUS


@pytest.mark.parametrize("name", ["latitude", "longitude", "temp_unit"])
@pytest.mark.parametrize("value", [None, "", 42, ["1"]])
def test_missing_or_invalid_parameter(name: str, value) -> None:
    params = dict(VALID)
    if value is None:
        del params[name]
    else:
        params[name] = value

    assert _message(params) == f"request should contain a single '{name}' query parameter"


def test_repeated_parameter_counts_as_missing() -> None:
    params = QueryDict("latitude=1&latitude=2&longitude=3&temp_unit=kelvin")

    assert _message(params) == "request should contain a single 'latitude' query parameter"


def test_presence_checks_run_in_order() -> None:
    assert _message({}) == "request should contain a single 'latitude' query parameter"
    assert _message({"latitude": "1"}) == "request should contain a single 'longitude' query parameter"
    assert (
        _message({"latitude": "1", "longitude": "2"})
        == "request should contain a single 'temp_unit' query parameter"
    )


def test_unknown_unit_is_rejected_before_numeric_checks() -> None:
    params = {"latitude": "abc", "longitude": "xyz", "temp_unit": "kilo"}

    assert _message(params) == "'temp_unit' query parameter must be one of: ['fahrenheit', 'celsius', 'kelvin']"


def test_longitude_is_checked_before_latitude() -> None:
    params = {"latitude": "abc", "longitude": "xyz", "temp_unit": "kelvin"}

    assert _message(params) == "'longitude' query parameter must be a decimal number"


def test_non_numeric_latitude() -> None:
    params = dict(VALID, latitude="abc")

    assert _message(params) == "'latitude' query parameter must be a decimal number"


@pytest.mark.parametrize("raw", ["nan", "inf", "-Infinity"])
def test_non_finite_values_are_rejected(raw: str) -> None:
    params = dict(VALID, longitude=raw)

    assert _message(params) == "'longitude' query parameter must be a decimal number"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("12abc", 12.0), ("1_0", 1.0), ("  -3.5 ", -3.5), (".5", 0.5), ("2e3x", 2000.0), ("7e", 7.0), ("12.", 12.0)],
)
def test_leading_decimal_prefix_is_used(raw: str, expected: float) -> None:
    query = parse_weather_query(dict(VALID, latitude=raw))

    assert query.latitude == expected


@pytest.mark.parametrize("raw", ["abc", "-", ".", "e5", "1e400"])
def test_values_without_finite_decimal_prefix_are_rejected(raw: str) -> None:
    params = dict(VALID, latitude=raw)

    assert _message(params) == "'latitude' query parameter must be a decimal number"


def test_query_dict_input() -> None:
    query = parse_weather_query(QueryDict("latitude=10&longitude=20.5&temp_unit=fahrenheit"))

    assert (query.latitude, query.longitude) == (10.0, 20.5)
    assert query.temp_unit is TemperatureUnit.FAHRENHEIT
