"""Tool package exports.

This keeps public tool classes in one import location.
"""

from .currency import CurrencyConversionTool, LiveRateSource, StaticCurrencyTool, StaticRateSource
from .http import JsonHttpClient
from .registry import ToolRegistry
from .weather import WeatherForecastTool

__all__ = [
    "CurrencyConversionTool",
    "JsonHttpClient",
    "LiveRateSource",
    "StaticCurrencyTool",
    "StaticRateSource",
    "ToolRegistry",
    "WeatherForecastTool",
]
