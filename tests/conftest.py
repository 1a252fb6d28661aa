from __future__ import annotations

import pytest

from weatherproxy.api.views import get_request_log_writer, get_weather_service


@pytest.fixture
def log_writer():
    get_weather_service.cache_clear()
    get_request_log_writer.cache_clear()
    writer = get_request_log_writer()
    yield writer
    writer.wait(timeout=5)
    writer.shutdown()
    get_request_log_writer.cache_clear()
    get_weather_service.cache_clear()
