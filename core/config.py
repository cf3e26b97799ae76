from __future__ import annotations

"""Application configuration bootstrap.

Why this module exists:
- Keep all env variables in one place.
- Provide safe defaults for local development.
- Avoid hardcoding provider URLs or file paths in tool logic.

Example .env:
    CURRENCY_SOURCE=static
    HTTP_TIMEOUT=5
    LOG_LEVEL=DEBUG
"""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Automatically load .env (if present) for local runs.
# Shell variables still have priority by default.
load_dotenv()

LOGGER = logging.getLogger("tools.config")

CURRENCY_SOURCES = {"live", "static"}


def _read_float_env(name: str, default: float) -> float:
    """Read a positive float env var with fallback + warning on invalid values.

    Example:
    - HTTP_TIMEOUT=2.5 -> 2.5
    - HTTP_TIMEOUT=abc -> warning + default
    """
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        value = float(raw_value)
    except ValueError:
        LOGGER.warning("Invalid number %s=%r. Using default=%s.", name, raw_value, default)
        return default
    if value <= 0:
        LOGGER.warning("Non-positive %s=%r. Using default=%s.", name, raw_value, default)
        return default
    return value


@dataclass(frozen=True)
class AppConfig:
    """Immutable runtime configuration used by CLI and API entrypoints."""

    # Provider endpoints.
    geocoding_base_url: str
    weather_base_url: str
    exchange_rate_base_url: str

    # Currency rate source: "live" API or "static" table.
    currency_source: str

    # Logging settings.
    log_level: str
    log_file: str

    # Upper bound for every outbound HTTP call, in seconds.
    http_timeout: float = 10.0

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Build configuration from environment variables."""
        config = cls(
            geocoding_base_url=os.getenv("GEOCODING_BASE_URL", "https://geocoding-api.open-meteo.com/v1"),
            weather_base_url=os.getenv("WEATHER_BASE_URL", "https://api.open-meteo.com/v1"),
            exchange_rate_base_url=os.getenv("EXCHANGE_RATE_BASE_URL", "https://api.exchangerate-api.com/v4"),
            currency_source=os.getenv("CURRENCY_SOURCE", "live").strip().lower(),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_file=os.getenv("LOG_FILE", "logs/tools.log"),
            http_timeout=_read_float_env("HTTP_TIMEOUT", 10.0),
        )

        if config.currency_source not in CURRENCY_SOURCES:
            LOGGER.warning(
                "Unknown CURRENCY_SOURCE '%s'. Runtime will fall back to 'live'.",
                config.currency_source,
            )

        LOGGER.debug(
            "Config loaded: currency_source=%s http_timeout=%s log_file=%s",
            config.currency_source,
            config.http_timeout,
            config.log_file,
        )
        return config
