"""Configuration and runtime wiring tests."""

import pytest

from core.config import AppConfig
from core.runtime import build_registry


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("CURRENCY_SOURCE", "HTTP_TIMEOUT", "LOG_LEVEL", "WEATHER_BASE_URL"):
        monkeypatch.delenv(name, raising=False)

    config = AppConfig.from_env()

    assert config.currency_source == "live"
    assert config.http_timeout == 10.0
    assert config.log_level == "INFO"
    assert config.weather_base_url == "https://api.open-meteo.com/v1"


@pytest.mark.parametrize("raw", ["abc", "0", "-3"])
def test_invalid_timeout_falls_back(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("HTTP_TIMEOUT", raw)

    assert AppConfig.from_env().http_timeout == 10.0


def test_static_currency_source(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CURRENCY_SOURCE", " Static ")

    registry = build_registry(AppConfig.from_env())

    assert registry.names == ["weather-forecast", "convertCurrency"]


def test_unknown_currency_source_falls_back_to_live(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CURRENCY_SOURCE", "carrier-pigeon")

    registry = build_registry(AppConfig.from_env())

    assert registry.names == ["weather-forecast", "convert-currency"]
