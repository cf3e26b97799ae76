from __future__ import annotations

"""Runtime composition helpers.

This module wires together:
- the shared HTTP client,
- the weather tool,
- the configured currency tool (live or static),
- logging.

Keeping this in one place avoids duplicate setup code in `main.py` and `api.py`.
"""

import logging
from pathlib import Path

from core.config import AppConfig
from tools import (
    CurrencyConversionTool,
    JsonHttpClient,
    LiveRateSource,
    StaticCurrencyTool,
    ToolRegistry,
    WeatherForecastTool,
)


def configure_logging(config: AppConfig) -> None:
    """Initialize file logging according to AppConfig."""
    log_path = Path(config.log_file)

    # Example: logs/tools.log -> create logs/ if missing.
    if log_path.parent != Path("."):
        log_path.parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        filename=config.log_file,
        encoding="utf-8",
    )
    logging.getLogger("tools.runtime").info(
        "Logging configured: file=%s level=%s",
        config.log_file,
        config.log_level,
    )


def _resolve_currency_source(raw_source: str) -> str:
    """Normalize source and keep behavior predictable for invalid values."""
    return raw_source if raw_source in {"live", "static"} else "live"


def build_registry(config: AppConfig) -> ToolRegistry:
    """Build the tool registry based on config.

    Example:
        registry = build_registry(AppConfig.from_env())
        result = registry.execute("weather-forecast", {"location": "Tokyo", "units": "metric"})
    """
    logger = logging.getLogger("tools.runtime")
    http = JsonHttpClient(timeout=config.http_timeout)

    weather_tool = WeatherForecastTool(
        http=http,
        geocoding_base_url=config.geocoding_base_url,
        weather_base_url=config.weather_base_url,
    )

    currency_source = _resolve_currency_source(config.currency_source)
    if currency_source != config.currency_source:
        logger.warning("Unknown CURRENCY_SOURCE '%s'. Fallback to '%s'.", config.currency_source, currency_source)

    if currency_source == "static":
        currency_tool: CurrencyConversionTool = StaticCurrencyTool()
    else:
        currency_tool = CurrencyConversionTool(LiveRateSource(http, config.exchange_rate_base_url))

    registry = ToolRegistry([weather_tool, currency_tool])
    logger.info("Registry built: currency_source=%s timeout=%s", currency_source, config.http_timeout)
    return registry
