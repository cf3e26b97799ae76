from __future__ import annotations

"""Weather tool backed by Open-Meteo.

Flow per call:
1) Geocode the location name (geocoding API).
2) Fetch current conditions for the coordinates (forecast API).
3) Map the WMO weather code to a description/icon pair.
4) Return a normalized snapshot with unit labels taken from the request.

Neither API needs a key.
"""

from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, field_validator

from tools.base import ToolPlugin
from tools.errors import NotFoundError
from tools.http import JsonHttpClient, decode_payload
from tools.progress import ProgressReporter

Number = int | float

CURRENT_VARIABLES = (
    "temperature_2m,relative_humidity_2m,apparent_temperature,precipitation,"
    "weather_code,pressure_msl,wind_speed_10m,wind_direction_10m,cloud_cover"
)


class WeatherCode(BaseModel):
    description: str
    icon: str


WEATHER_CODES: dict[int, WeatherCode] = {
    0: WeatherCode(description="Clear sky", icon="01d"),
    1: WeatherCode(description="Mainly clear", icon="02d"),
    2: WeatherCode(description="Partly cloudy", icon="03d"),
    3: WeatherCode(description="Overcast", icon="04d"),
    45: WeatherCode(description="Fog", icon="50d"),
    48: WeatherCode(description="Depositing rime fog", icon="50d"),
    51: WeatherCode(description="Light drizzle", icon="09d"),
    53: WeatherCode(description="Moderate drizzle", icon="09d"),
    55: WeatherCode(description="Dense drizzle", icon="09d"),
    61: WeatherCode(description="Slight rain", icon="10d"),
    63: WeatherCode(description="Moderate rain", icon="10d"),
    65: WeatherCode(description="Heavy rain", icon="10d"),
    71: WeatherCode(description="Slight snow fall", icon="13d"),
    73: WeatherCode(description="Moderate snow fall", icon="13d"),
    75: WeatherCode(description="Heavy snow fall", icon="13d"),
    95: WeatherCode(description="Thunderstorm", icon="11d"),
    96: WeatherCode(description="Thunderstorm with slight hail", icon="11d"),
    99: WeatherCode(description="Thunderstorm with heavy hail", icon="11d"),
}

UNKNOWN_WEATHER = WeatherCode(description="Unknown", icon="03d")


def describe_weather_code(code: int | None) -> WeatherCode:
    """Return description/icon for a WMO code; unknown codes are not an error."""
    if code is None:
        return UNKNOWN_WEATHER
    return WEATHER_CODES.get(code, UNKNOWN_WEATHER)


# --- Request ---------------------------------------------------------------


class WeatherRequest(BaseModel):
    """Validated tool arguments."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    location: str
    units: Literal["metric", "imperial"] = "metric"

    @field_validator("location")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        # The caller's text is kept as-is for the provider query and messages.
        if not value.strip():
            raise ValueError("location must not be blank")
        return value


# --- Provider payloads (untrusted) -----------------------------------------


class GeocodingMatch(BaseModel):
    name: str
    latitude: float
    longitude: float
    country_code: str | None = None


class GeocodingResponse(BaseModel):
    # Open-Meteo omits `results` entirely when nothing matches.
    results: list[GeocodingMatch] | None = None


class CurrentConditions(BaseModel):
    time: str
    temperature_2m: Number
    weather_code: int
    apparent_temperature: Number | None = None
    relative_humidity_2m: Number | None = None
    precipitation: Number | None = None
    pressure_msl: Number | None = None
    wind_speed_10m: Number | None = None
    wind_direction_10m: Number | None = None
    cloud_cover: Number | None = None


class ForecastResponse(BaseModel):
    current: CurrentConditions


# --- Normalized output -----------------------------------------------------


class Coordinates(BaseModel):
    lat: float
    lon: float


class LocationInfo(BaseModel):
    name: str
    country: str | None = None
    coordinates: Coordinates


class WindInfo(BaseModel):
    speed: Number | None = None
    direction: Number | None = None


class CurrentWeather(BaseModel):
    temperature: Number
    feels_like: Number | None = None
    humidity: Number | None = None
    pressure: Number | None = None
    description: str
    icon: str
    wind: WindInfo
    cloudiness: Number | None = None
    timestamp: str


class UnitLabels(BaseModel):
    temperature: str
    wind: str


class WeatherSnapshot(BaseModel):
    """Normalized output schema for current weather."""

    location: LocationInfo
    current: CurrentWeather
    units: UnitLabels


@dataclass(frozen=True)
class UnitSystem:
    temperature_unit: str
    wind_speed_unit: str
    labels: UnitLabels


UNIT_SYSTEMS: dict[str, UnitSystem] = {
    "metric": UnitSystem("celsius", "ms", UnitLabels(temperature="°C", wind="m/s")),
    "imperial": UnitSystem("fahrenheit", "mph", UnitLabels(temperature="°F", wind="mph")),
}


def build_snapshot(match: GeocodingMatch, current: CurrentConditions, units: str) -> WeatherSnapshot:
    """Map provider payloads to the stable output shape.

    Unit labels come from the requested system, not from whatever
    units the provider echoes back.
    """
    weather = describe_weather_code(current.weather_code)
    return WeatherSnapshot(
        location=LocationInfo(
            name=match.name,
            country=match.country_code,
            coordinates=Coordinates(lat=match.latitude, lon=match.longitude),
        ),
        current=CurrentWeather(
            temperature=current.temperature_2m,
            feels_like=current.apparent_temperature,
            humidity=current.relative_humidity_2m,
            pressure=current.pressure_msl,
            description=weather.description,
            icon=weather.icon,
            wind=WindInfo(speed=current.wind_speed_10m, direction=current.wind_direction_10m),
            cloudiness=current.cloud_cover,
            timestamp=current.time,
        ),
        units=UNIT_SYSTEMS[units].labels.model_copy(),
    )


class WeatherForecastTool(ToolPlugin):
    """Current weather tool.

    Expected model call example:
        {"location": "London", "units": "metric"}
    """

    name = "weather-forecast"
    description = "Get current weather information for a specific location"
    logger_name = "tools.weather"
    fallback_message = "Failed to retrieve weather data"
    request_model = WeatherRequest
    result_model = WeatherSnapshot

    def __init__(self, http: JsonHttpClient, geocoding_base_url: str, weather_base_url: str) -> None:
        super().__init__()
        self._http = http
        self._geocoding_base_url = geocoding_base_url.rstrip("/")
        self._weather_base_url = weather_base_url.rstrip("/")

    def parameters_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "location": {
                    "type": "string",
                    "description": "The location to get weather data for (city name, city and country code)",
                },
                "units": {
                    "type": "string",
                    "description": "Units of measurement: metric (Celsius) or imperial (Fahrenheit)",
                    "enum": ["metric", "imperial"],
                    "default": "metric",
                },
            },
            "required": ["location", "units"],
            "additionalProperties": False,
        }

    def run(self, request: WeatherRequest, progress: ProgressReporter) -> WeatherSnapshot:
        progress.report(25, f"Fetching weather data for {request.location}...")

        match = self._geocode(request.location)
        current = self._current_conditions(match, request.units)

        progress.report(75, "Processing weather information...")
        snapshot = build_snapshot(match, current, request.units)
        self._logger.debug(
            "Weather normalized: location=%s code=%s description=%s",
            match.name,
            current.weather_code,
            snapshot.current.description,
        )

        progress.report(100, "Weather data retrieved successfully!")
        return snapshot

    def _geocode(self, location: str) -> GeocodingMatch:
        payload = self._http.get_json(
            f"{self._geocoding_base_url}/search",
            {"name": location, "count": 1, "language": "en", "format": "json"},
            service="geocoding",
        )
        response = decode_payload(GeocodingResponse, payload, "geocoding")
        if not response.results:
            raise NotFoundError(f'Location "{location}" not found')

        match = response.results[0]
        self._logger.info(
            "Geocoded %r -> %s (%s) lat=%s lon=%s",
            location,
            match.name,
            match.country_code,
            match.latitude,
            match.longitude,
        )
        return match

    def _current_conditions(self, match: GeocodingMatch, units: str) -> CurrentConditions:
        system = UNIT_SYSTEMS[units]
        payload = self._http.get_json(
            f"{self._weather_base_url}/forecast",
            {
                "latitude": match.latitude,
                "longitude": match.longitude,
                "current": CURRENT_VARIABLES,
                "temperature_unit": system.temperature_unit,
                "wind_speed_unit": system.wind_speed_unit,
                "timezone": "auto",
            },
            service="weather",
        )
        return decode_payload(ForecastResponse, payload, "weather").current
