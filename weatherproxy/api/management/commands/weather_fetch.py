"""Management command to fetch weather using the same stack as the API."""
from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any

from django.core.management.base import BaseCommand, CommandError

from weatherproxy.api.views import get_request_log_writer, get_weather_service
from weatherproxy.core.errors import WeatherProxyError
from weatherproxy.core.validation import parse_weather_query


class Command(BaseCommand):
    help = "Fetch current weather for the provided coordinates and record the request"

    def add_arguments(self, parser) -> None:  # noqa: D401
        parser.add_argument("--latitude", type=str, help="Latitude as a decimal number")
        parser.add_argument("--longitude", type=str, help="Longitude as a decimal number")
        parser.add_argument(
            "--temp-unit",
            dest="temp_unit",
            type=str,
            help="One of fahrenheit, celsius, kelvin",
        )

    def handle(self, *args: Any, **options: Any) -> None:  # noqa: D401
        params = {name: options.get(name) for name in ("latitude", "longitude", "temp_unit")}
        try:
            query = parse_weather_query(params)
            report, log_entry = get_weather_service().get_report(query)
        except WeatherProxyError as exc:
            raise CommandError(exc.message) from exc

        self.stdout.write(json.dumps(asdict(report)))

        writer = get_request_log_writer()
        writer.submit(log_entry)
        writer.wait()
