"""
Weather client module for ragent.
"""

from .client import OpenWeatherMapClient
from .errors import WeatherClientError
from .interface import WeatherClientInterface
from .models import WeatherReport

__all__ = [
    "WeatherClientInterface",
    "OpenWeatherMapClient",
    "WeatherClientError",
    "WeatherReport",
]
