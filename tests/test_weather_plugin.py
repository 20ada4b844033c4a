"""
Tests for the weather plugin.
"""

import asyncio
import random

import pytest

from ragent.infrastructure.fakes import FakeWeatherClient
from ragent.infrastructure.weather import WeatherClientInterface, WeatherReport
from ragent.services.plugins import PluginContext, WeatherOutcome, WeatherPlugin, extract_location


class BrokenWeatherClient(WeatherClientInterface):
    async def lookup(self, location: str) -> WeatherReport:
        raise KeyError("main")


def run_plugin(plugin: WeatherPlugin, message: str):
    return asyncio.run(plugin.execute(PluginContext(user_message=message, session_id="s")))


class TestLocation:
    @pytest.mark.parametrize(
        "message,expected",
        [
            ("What is the weather in Paris?", "Paris"),
            ("weather in London.", "London"),
            ("What is the temperature in Tokyo?", "Tokyo"),
            ("Give me the forecast for Berlin", "Berlin"),
            ("How hot is it in Cairo?", "Cairo"),
            ("How cold in Oslo!", "Oslo"),
            ("Is it going to rain?", "New York"),
        ],
    )
    def test_extract_location(self, message, expected):
        assert extract_location(message) == expected


class TestShouldTrigger:
    @pytest.mark.parametrize(
        "message", ["What's the weather?", "Temperature today", "is it sunny", "WINDY out"]
    )
    def test_triggers(self, message):
        assert WeatherPlugin().should_trigger(message)

    @pytest.mark.parametrize("message", ["What is 2 + 2?", "Tell me about chunking"])
    def test_does_not_trigger(self, message):
        assert not WeatherPlugin().should_trigger(message)


class TestExecute:
    def test_mock_without_provider(self):
        plugin = WeatherPlugin(rng=random.Random(7))

        outcome = run_plugin(plugin, "What is the weather in Paris?")

        assert isinstance(outcome, WeatherOutcome)
        assert outcome.mocked is True
        assert outcome.report.location == "Paris"
        assert 5 <= outcome.report.temperature <= 34
        assert 40 <= outcome.report.humidity <= 79
        assert 5 <= outcome.report.wind_speed <= 24
        assert outcome.report.description in ("sunny", "cloudy", "partly cloudy", "rainy")

    def test_provider_report(self):
        report = WeatherReport(
            location="Paris, FR", temperature=18, description="light rain", humidity=70, wind_speed=12
        )
        client = FakeWeatherClient(report=report)
        plugin = WeatherPlugin(client=client)

        outcome = run_plugin(plugin, "weather in Paris")

        assert client.locations == ["Paris"]
        assert outcome.mocked is False
        assert outcome.report == report

    def test_provider_failure_falls_back_to_mock(self):
        client = FakeWeatherClient(fail=True)
        plugin = WeatherPlugin(client=client, rng=random.Random(1))

        outcome = run_plugin(plugin, "weather in Paris")

        assert outcome.success
        assert outcome.mocked is True
        assert outcome.report.location == "Paris"

    def test_unexpected_client_error_falls_back_to_mock(self):
        plugin = WeatherPlugin(client=BrokenWeatherClient(), rng=random.Random(1))

        outcome = run_plugin(plugin, "weather in Paris")

        assert isinstance(outcome, WeatherOutcome)
        assert outcome.mocked is True
        assert outcome.report.location == "Paris"
        assert 5 <= outcome.report.temperature <= 34

    def test_format(self):
        plugin = WeatherPlugin(client=FakeWeatherClient())
        outcome = run_plugin(plugin, "weather in Rome")

        assert plugin.format_outcome(outcome) == (
            "Current weather in Rome:\n"
            "- Temperature: 20°C\n"
            "- Conditions: clear sky\n"
            "- Humidity: 50%\n"
            "- Wind Speed: 10 km/h"
        )

    def test_to_dict(self):
        plugin = WeatherPlugin(client=FakeWeatherClient())
        data = run_plugin(plugin, "weather in Rome").to_dict()

        assert data["plugin_name"] == "weather"
        assert data["success"] is True
        assert data["report"]["location"] == "Rome"
