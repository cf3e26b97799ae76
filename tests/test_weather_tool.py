"""Weather tool tests.

HTTP is replaced by a mocked JsonHttpClient; no network access is needed.
"""

import json
from typing import Any
from unittest.mock import MagicMock

import pytest

from tools.errors import ExternalServiceError
from tools.http import JsonHttpClient
from tools.weather import WeatherForecastTool, describe_weather_code

GEOCODE_LONDON = {
    "results": [
        {
            "name": "London",
            "country_code": "GB",
            "latitude": 51.5074,
            "longitude": -0.1278,
        }
    ]
}

CONDITIONS = {
    "current_units": {"temperature_2m": "°C", "wind_speed_10m": "m/s"},
    "current": {
        "time": "2023-06-15T12:00",
        "temperature_2m": 15.2,
        "relative_humidity_2m": 76,
        "apparent_temperature": 14.8,
        "precipitation": 0.1,
        "weather_code": 3,
        "pressure_msl": 1012.5,
        "wind_speed_10m": 4.2,
        "wind_direction_10m": 240,
        "cloud_cover": 75,
    },
}


def _http(*responses: Any) -> MagicMock:
    http = MagicMock(spec=JsonHttpClient)
    http.get_json.side_effect = list(responses)
    return http


def _tool(http: MagicMock) -> WeatherForecastTool:
    return WeatherForecastTool(
        http=http,
        geocoding_base_url="https://geo.test/v1/",
        weather_base_url="https://weather.test/v1",
    )


def _conditions(**overrides: Any) -> dict[str, Any]:
    return {"current": {**CONDITIONS["current"], **overrides}}


def test_fetches_weather_for_valid_location() -> None:
    http = _http(GEOCODE_LONDON, CONDITIONS)
    events: list[dict[str, Any]] = []

    response = json.loads(
        _tool(http).execute({"location": "London", "units": "metric"}, publish_to_client=events.append)
    )

    assert list(response) == ["data"]
    data = response["data"]
    assert data["location"] == {
        "name": "London",
        "country": "GB",
        "coordinates": {"lat": 51.5074, "lon": -0.1278},
    }
    assert data["current"]["temperature"] == 15.2
    assert data["current"]["feels_like"] == 14.8
    assert data["current"]["humidity"] == 76
    assert data["current"]["pressure"] == 1012.5
    assert data["current"]["description"] == "Overcast"
    assert data["current"]["icon"] == "04d"
    assert data["current"]["wind"] == {"speed": 4.2, "direction": 240}
    assert data["current"]["cloudiness"] == 75
    assert data["current"]["timestamp"] == "2023-06-15T12:00"
    assert data["units"] == {"temperature": "°C", "wind": "m/s"}

    assert [event["data"]["progress"] for event in events] == [25, 75, 100]
    assert all(event["type"] == "progress" for event in events)


def test_calls_are_sequential_and_use_geocoded_coordinates() -> None:
    http = _http(GEOCODE_LONDON, CONDITIONS)

    _tool(http).execute({"location": "London", "units": "metric"})

    geocode_call, forecast_call = http.get_json.call_args_list
    assert geocode_call.args[0] == "https://geo.test/v1/search"
    assert geocode_call.args[1] == {"name": "London", "count": 1, "language": "en", "format": "json"}

    assert forecast_call.args[0] == "https://weather.test/v1/forecast"
    params = forecast_call.args[1]
    assert params["latitude"] == 51.5074
    assert params["longitude"] == -0.1278
    assert params["temperature_unit"] == "celsius"
    assert params["wind_speed_unit"] == "ms"
    assert "weather_code" in params["current"]


def test_imperial_labels_follow_request_not_provider() -> None:
    # Provider echoes metric units; the labels must still be imperial.
    http = _http(GEOCODE_LONDON, CONDITIONS)

    response = json.loads(_tool(http).execute({"location": "London", "units": "imperial"}))

    assert response["data"]["units"] == {"temperature": "°F", "wind": "mph"}
    params = http.get_json.call_args_list[1].args[1]
    assert params["temperature_unit"] == "fahrenheit"
    assert params["wind_speed_unit"] == "mph"


def test_units_default_to_metric() -> None:
    http = _http(GEOCODE_LONDON, CONDITIONS)

    response = json.loads(_tool(http).execute({"location": "London"}))

    assert response["data"]["units"]["temperature"] == "°C"


@pytest.mark.parametrize("payload", [{"results": []}, {}, {"results": None}])
def test_location_not_found(payload: dict[str, Any]) -> None:
    http = _http(payload)

    response = json.loads(_tool(http).execute({"location": "Atlantis", "units": "metric"}))

    assert list(response) == ["error"]
    assert response["error"] == {"message": 'Location "Atlantis" not found', "details": None}
    assert http.get_json.call_count == 1


@pytest.mark.parametrize(
    "code,description",
    [
        (0, "Clear sky"),
        (61, "Slight rain"),
        (95, "Thunderstorm"),
        (99, "Thunderstorm with heavy hail"),
        (42, "Unknown"),
        (None, "Unknown"),
    ],
)
def test_weather_code_mapping(code: int | None, description: str) -> None:
    assert describe_weather_code(code).description == description


def test_unknown_code_uses_fallback_icon() -> None:
    http = _http(GEOCODE_LONDON, _conditions(weather_code=1234))

    response = json.loads(_tool(http).execute({"location": "London", "units": "metric"}))

    assert response["data"]["current"]["description"] == "Unknown"
    assert response["data"]["current"]["icon"] == "03d"


def test_optional_provider_fields_become_null() -> None:
    current = {"time": "2023-06-15T12:00", "temperature_2m": 20, "weather_code": 0}
    http = _http(GEOCODE_LONDON, {"current": current})

    response = json.loads(_tool(http).execute({"location": "London", "units": "metric"}))

    assert response["data"]["current"]["humidity"] is None
    assert response["data"]["current"]["wind"] == {"speed": None, "direction": None}


def test_missing_required_provider_field_is_external_error() -> None:
    http = _http(GEOCODE_LONDON, {"current": {"time": "2023-06-15T12:00"}})

    response = json.loads(_tool(http).execute({"location": "London", "units": "metric"}))

    message = response["error"]["message"]
    assert message.startswith("Unexpected weather response")
    assert "temperature_2m" in message


def test_provider_error_details_are_returned() -> None:
    body = {"error": True, "reason": "Latitude must be in range"}
    http = _http(GEOCODE_LONDON, ExternalServiceError("Request failed with status code 400", details=body))

    response = json.loads(_tool(http).execute({"location": "London", "units": "metric"}))

    assert response["error"] == {"message": "Request failed with status code 400", "details": body}


def test_unexpected_error_without_message_uses_fallback() -> None:
    http = _http(RuntimeError())

    response = json.loads(_tool(http).execute({"location": "London", "units": "metric"}))

    assert response["error"] == {"message": "Failed to retrieve weather data", "details": None}


def test_unexpected_error_keeps_its_message() -> None:
    http = _http(RuntimeError("socket closed"))

    response = json.loads(_tool(http).execute({"location": "London", "units": "metric"}))

    assert response["error"]["message"] == "socket closed"


def test_missing_location_fails_before_any_call() -> None:
    http = _http()

    response = json.loads(_tool(http).execute({"units": "metric"}))

    assert response["error"]["message"] == "Missing required field: location"
    http.get_json.assert_not_called()


def test_invalid_units_rejected() -> None:
    http = _http()

    response = json.loads(_tool(http).execute({"location": "London", "units": "kelvin"}))

    assert response["error"]["message"].startswith("Invalid value for units")
    http.get_json.assert_not_called()


def test_failing_progress_sink_does_not_break_call() -> None:
    http = _http(GEOCODE_LONDON, CONDITIONS)

    def broken_sink(event: dict[str, Any]) -> None:
        raise ConnectionError("client went away")

    response = json.loads(
        _tool(http).execute({"location": "London", "units": "metric"}, publish_to_client=broken_sink)
    )

    assert "data" in response


def test_tool_definition_matches_host_contract() -> None:
    definition = _tool(_http()).tool_definition()

    assert definition["type"] == "function"
    function = definition["function"]
    assert function["name"] == "weather-forecast"
    assert function["strict"] is True
    assert function["parameters"]["required"] == ["location", "units"]
    assert function["parameters"]["properties"]["units"]["enum"] == ["metric", "imperial"]
    assert function["parameters"]["additionalProperties"] is False


def test_not_found_message_keeps_location_as_sent() -> None:
    http = _http({"results": []})

    response = json.loads(_tool(http).execute({"location": " Atlantis ", "units": "metric"}))

    assert response["error"]["message"] == 'Location " Atlantis " not found'
    assert http.get_json.call_args.args[1]["name"] == " Atlantis "


@pytest.mark.parametrize("location", ["", "   "])
def test_blank_location_rejected(location: str) -> None:
    http = _http()

    response = json.loads(_tool(http).execute({"location": location, "units": "metric"}))

    assert response["error"]["message"].startswith("Invalid value for location")
    http.get_json.assert_not_called()
