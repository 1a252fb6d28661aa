"""Base Django settings for the weather proxy."""
from __future__ import annotations

import os

from django.core.exceptions import ImproperlyConfigured


def env(name: str, default: str | None = None) -> str:
    """Fetch environment variables while allowing explicit defaults."""

    value = os.environ.get(name, default)
    if value is None:
        raise ImproperlyConfigured(f"Environment variable {name} is required")
    return value


SECRET_KEY = env("DJANGO_SECRET_KEY")
DEBUG = os.environ.get("DJANGO_DEBUG", "0") == "1"
ALLOWED_HOSTS = os.environ.get("DJANGO_ALLOWED_HOSTS", "*").split(",")

# No Django ORM: the request log has its own stores in weatherproxy.core.
INSTALLED_APPS = [
    "corsheaders",
    "rest_framework",
    "weatherproxy.api",
]

MIDDLEWARE = [
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "weatherproxy.urls"

WSGI_APPLICATION = "weatherproxy.wsgi.application"

# Every origin may call the endpoint.
CORS_ALLOW_ALL_ORIGINS = True

REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.AllowAny",
    ],
    "UNAUTHENTICATED_USER": None,
}

# Public read-only key on a free OpenWeatherMap account.
OPENWEATHER_API_KEY = env("OPENWEATHER_API_KEY", "db0ab04a0e5898f7489adfa40bc08c29")
OPENWEATHER_BASE_URL = env("OPENWEATHER_BASE_URL", "https://api.openweathermap.org/data/2.5/weather")
_timeout = os.environ.get("OPENWEATHER_TIMEOUT")
OPENWEATHER_TIMEOUT = float(_timeout) if _timeout else None

REQUEST_LOG = {
    "BACKEND": env("REQUEST_LOG_BACKEND", "sqlite"),
    "DATABASE_URL": env("REQUEST_LOG_DATABASE_URL", "sqlite:///./weatherproxy.db"),
    "COLLECTION": env("REQUEST_LOG_COLLECTION", "requests"),
    "WORKERS": int(env("REQUEST_LOG_WORKERS", "2")),
}

LOG_LEVEL = env("LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "default"},
    },
    "loggers": {
        "weatherproxy": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": True},
    },
}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True
