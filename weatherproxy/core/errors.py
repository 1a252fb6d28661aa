"""Domain errors raised by the weather proxy core."""
from __future__ import annotations


class WeatherProxyError(RuntimeError):
    """Base error carrying a client facing message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class QueryValidationError(WeatherProxyError):
    """Raised when the incoming query parameters are missing or malformed."""


class UpstreamUnavailable(WeatherProxyError):
    """Raised when the upstream provider cannot be contacted."""

    def __init__(self, message: str = "could not contact upstream OpenWeatherMap API") -> None:
        super().__init__(message)


class UpstreamResponseError(WeatherProxyError):
    """Raised when the upstream body cannot be turned into a weather reading."""

    def __init__(
        self,
        message: str = "an error occurred while processing upstream OpenWeatherMap API response",
    ) -> None:
        super().__init__(message)


__all__ = [
    "WeatherProxyError",
    "QueryValidationError",
    "UpstreamUnavailable",
    "UpstreamResponseError",
]
