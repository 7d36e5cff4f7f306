"""
Open-Meteo weather source.

Fetches current weather for fixed coordinates from the Open-Meteo forecast API.
API Documentation: https://open-meteo.com/en/docs
"""

import logging
import time
from typing import Optional

import requests

from src.config import REQUEST_TIMEOUT, WEATHER_LATITUDE, WEATHER_LONGITUDE
from src.models.environment import WeatherSnapshot
from src.sources.base import FetchResult, Source

logger = logging.getLogger(__name__)


OPEN_METEO_FORECAST_URL = "https://api.open-meteo.com/v1/forecast"

UNKNOWN_WEATHER = "Unknown weather"

# WMO weather interpretation codes -> description
WEATHER_CODE_DESCRIPTIONS = {
    0: "Clear sky",
    1: "Mainly clear, partly cloudy",
    2: "Mainly clear, partly cloudy",
    3: "Mainly clear, partly cloudy",
    45: "Fog",
    48: "Fog",
    51: "Drizzle",
    53: "Drizzle",
    55: "Drizzle",
    56: "Freezing drizzle",
    57: "Freezing drizzle",
    61: "Rain",
    63: "Rain",
    65: "Rain",
    66: "Freezing rain",
    67: "Freezing rain",
    71: "Snow",
    73: "Snow",
    75: "Snow",
    77: "Snow grains",
    80: "Rain showers",
    81: "Rain showers",
    82: "Rain showers",
    85: "Snow showers",
    86: "Snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm",
    99: "Thunderstorm",
}


def describe_weather_code(code: int) -> str:
    """
    Map a WMO weather code to a description.

    Unmapped codes give "Unknown weather" rather than an error.
    """
    return WEATHER_CODE_DESCRIPTIONS.get(code, UNKNOWN_WEATHER)


class OpenMeteoWeatherSource(Source[WeatherSnapshot]):
    """
    Fetches the current weather from Open-Meteo.

    Expects a response of the form:
        {"current_weather": {"temperature": 12.3, "weathercode": 61, ...}}
    """

    def __init__(
        self,
        latitude: float = None,
        longitude: float = None,
        timeout: float = None,
    ):
        """
        Initialize the weather source.

        Args:
            latitude: Defaults to config.WEATHER_LATITUDE.
            longitude: Defaults to config.WEATHER_LONGITUDE.
            timeout: Request timeout in seconds. Defaults to config.REQUEST_TIMEOUT.
        """
        self.latitude = latitude if latitude is not None else WEATHER_LATITUDE
        self.longitude = longitude if longitude is not None else WEATHER_LONGITUDE
        self.timeout = timeout if timeout is not None else REQUEST_TIMEOUT

    @property
    def name(self) -> str:
        return "open-meteo"

    @property
    def _params(self) -> dict:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "current_weather": "true",
        }

    def fetch(self) -> FetchResult[WeatherSnapshot]:
        """
        Fetch current weather.

        Returns:
            FetchResult holding a WeatherSnapshot, or the failure reason.
        """
        start = time.monotonic()

        try:
            response = requests.get(
                OPEN_METEO_FORECAST_URL,
                params=self._params,
                timeout=self.timeout,
            )
            response.raise_for_status()
            snapshot = self._parse(response.json())

        except requests.RequestException as e:
            return self._failed(f"Request failed: {e}", start)
        except (ValueError, KeyError, TypeError) as e:
            return self._failed(f"Invalid response: {type(e).__name__}: {e}", start)

        duration_ms = (time.monotonic() - start) * 1000
        logger.info(f"[{self.name}] {snapshot.summary} ({duration_ms:.0f}ms)")
        return FetchResult.ok(snapshot, duration_ms=duration_ms)

    def _parse(self, payload: dict) -> WeatherSnapshot:
        """
        Convert the raw API response to a WeatherSnapshot.

        Raises:
            KeyError/TypeError/ValueError: If the payload is missing fields
            or has the wrong types.
        """
        current = payload["current_weather"]
        temperature = current["temperature"]
        code = current["weathercode"]

        # bool is an int subclass; reject it explicitly
        if isinstance(temperature, bool) or not isinstance(temperature, (int, float)):
            raise TypeError(f"temperature must be a number, got {temperature!r}")
        if isinstance(code, bool) or not isinstance(code, (int, float)) or int(code) != code:
            raise TypeError(f"weathercode must be an integer, got {code!r}")

        code = int(code)
        return WeatherSnapshot(
            temperature_celsius=float(temperature),
            weather_code=code,
            description=describe_weather_code(code),
        )

    def _failed(self, error: str, start: float) -> FetchResult[WeatherSnapshot]:
        logger.warning(f"[{self.name}] {error}")
        return FetchResult.failed(error, duration_ms=(time.monotonic() - start) * 1000)


def get_weather_data(source: OpenMeteoWeatherSource = None) -> Optional[WeatherSnapshot]:
    """
    Fetch current weather for the configured coordinates.

    Returns:
        WeatherSnapshot, or None on any failure.
    """
    source = source or OpenMeteoWeatherSource()
    return source.fetch().value
