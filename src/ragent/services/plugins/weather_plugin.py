"""
Weather plugin.

Looks up current conditions for a location named in the message, falling
back to randomized mock data when no provider is configured or the lookup
fails.
"""

import logging
import random
import re
from typing import Optional

from ragent.infrastructure.weather import WeatherClientInterface, WeatherReport

from .base import Plugin
from .models import PluginContext, PluginOutcome, WeatherOutcome

logger = logging.getLogger(__name__)

WEATHER_KEYWORDS = (
    "weather",
    "temperature",
    "forecast",
    "climate",
    "rain",
    "sunny",
    "cloudy",
    "storm",
    "humidity",
    "wind",
    "hot",
    "cold",
    "degrees",
)

DEFAULT_LOCATION = "New York"

MOCK_DESCRIPTIONS = ("sunny", "cloudy", "partly cloudy", "rainy")

# Tried in order; a location is a single token
LOCATION_PATTERNS = (
    re.compile(r"weather\s+in\s+([^?\s.!]+)", re.IGNORECASE),
    re.compile(r"temperature\s+in\s+([^?\s.!]+)", re.IGNORECASE),
    re.compile(r"forecast\s+for\s+([^?\s.!]+)", re.IGNORECASE),
    re.compile(r"how.*(?:hot|cold|warm)\s+(?:is\s+it\s+)?in\s+([^?\s.!]+)", re.IGNORECASE),
)


def extract_location(message: str) -> str:
    for pattern in LOCATION_PATTERNS:
        match = pattern.search(message)
        if match:
            return match.group(1).strip()
    return DEFAULT_LOCATION


class WeatherPlugin(Plugin):
    """Reports current weather conditions."""

    name = "weather"
    description = "Provides current weather information for any location"
    triggers = ("weather", "temperature", "forecast", "climate")

    def __init__(
        self,
        client: Optional[WeatherClientInterface] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            client: Weather provider; None means every report is mocked
            rng: Random source for mock reports
        """
        self._client = client
        self._rng = rng or random.Random()

    @property
    def has_provider(self) -> bool:
        return self._client is not None

    def should_trigger(self, message: str) -> bool:
        words = message.lower().split()
        return any(keyword in word for keyword in WEATHER_KEYWORDS for word in words)

    async def execute(self, context: PluginContext) -> PluginOutcome:
        location = extract_location(context.user_message)

        if self._client is None:
            logger.debug("Using mock weather data (no weather provider configured)")
            return WeatherOutcome(report=self.mock_report(location), mocked=True)

        try:
            report = await self._client.lookup(location)
        except Exception as e:
            logger.warning(
                f"Weather lookup failed for {location}, using mock data: {e}", exc_info=True
            )
            return WeatherOutcome(report=self.mock_report(location), mocked=True)

        return WeatherOutcome(report=report, mocked=False)

    def mock_report(self, location: str) -> WeatherReport:
        return WeatherReport(
            location=location,
            temperature=self._rng.randint(5, 34),
            description=self._rng.choice(MOCK_DESCRIPTIONS),
            humidity=self._rng.randint(40, 79),
            wind_speed=self._rng.randint(5, 24),
        )

    def format_success(self, outcome: PluginOutcome) -> str:
        assert isinstance(outcome, WeatherOutcome)
        report = outcome.report
        return (
            f"Current weather in {report.location}:\n"
            f"- Temperature: {report.temperature}°C\n"
            f"- Conditions: {report.description}\n"
            f"- Humidity: {report.humidity}%\n"
            f"- Wind Speed: {report.wind_speed} km/h"
        )

    def examples(self) -> list[str]:
        return [
            "What is the weather in New York?",
            "What's the weather in London?",
            "What is the temperature in Tokyo?",
            "Give me the forecast for Paris",
            "How hot is it in Cairo?",
        ]
