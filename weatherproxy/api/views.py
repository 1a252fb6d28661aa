"""REST API views for the weather proxy."""
from __future__ import annotations

from dataclasses import asdict
from functools import lru_cache

import logging

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from weatherproxy.api.errors import api_error
from weatherproxy.core.abstractions import RequestLogEntry
from weatherproxy.core.errors import QueryValidationError, UpstreamResponseError, UpstreamUnavailable
from weatherproxy.core.providers.openweather import OpenWeatherProvider
from weatherproxy.core.requestlog import RequestLogWriter, build_request_log_store
from weatherproxy.core.services.weather_service import WeatherProxyService
from weatherproxy.core.validation import parse_weather_query


logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_weather_service() -> WeatherProxyService:
    provider = OpenWeatherProvider(
        api_key=settings.OPENWEATHER_API_KEY,
        base_url=settings.OPENWEATHER_BASE_URL,
        timeout=settings.OPENWEATHER_TIMEOUT,
    )
    return WeatherProxyService(provider)


@lru_cache(maxsize=1)
def get_request_log_writer() -> RequestLogWriter:
    config = settings.REQUEST_LOG
    return RequestLogWriter(build_request_log_store(config), max_workers=config.get("WORKERS", 2))


class LoggedResponse(Response):
    """Response that submits its request log entry once the server closes it."""

    def __init__(self, data, *, log_entry: RequestLogEntry, writer: RequestLogWriter, **kwargs) -> None:
        super().__init__(data, **kwargs)
        self._log_entry = log_entry
        self._writer = writer
        self._logged = False

    def close(self) -> None:
        super().close()
        if self._logged:
            return
        self._logged = True
        self._writer.submit(self._log_entry)


class WeatherView(APIView):
    """Current weather for the requested coordinates, in the requested unit."""

    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):  # noqa: D401
        """Return the weather report for the specified coordinates."""
        try:
            query = parse_weather_query(request.query_params)
        except QueryValidationError as exc:
            logger.info("Rejected weather request: %s", exc.message)
            return Response(api_error(exc.message), status=status.HTTP_400_BAD_REQUEST)

        try:
            report, log_entry = get_weather_service().get_report(query)
        except UpstreamUnavailable as exc:
            return Response(api_error(exc.message), status=status.HTTP_504_GATEWAY_TIMEOUT)
        except UpstreamResponseError as exc:
            return Response(api_error(exc.message), status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        return LoggedResponse(
            asdict(report),
            status=status.HTTP_200_OK,
            content_type="application/json",
            log_entry=log_entry,
            writer=get_request_log_writer(),
        )
