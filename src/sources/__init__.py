"""
Data sources module.

Fetchers for external providers: Open-Meteo weather, Unsplash images.
"""

from src.sources.base import FetchResult, Source
from src.sources.weather import (
    OpenMeteoWeatherSource,
    describe_weather_code,
    get_weather_data,
)
from src.sources.unsplash import UnsplashImageSource, get_random_image

__all__ = [
    "FetchResult",
    "Source",
    "OpenMeteoWeatherSource",
    "describe_weather_code",
    "get_weather_data",
    "UnsplashImageSource",
    "get_random_image",
]
