"""OpenWeatherMap current-conditions client."""

import logging
from typing import Optional

import httpx

from .errors import WeatherClientError
from .interface import WeatherClientInterface
from .models import WeatherReport

logger = logging.getLogger(__name__)

# OpenWeatherMap reports wind in m/s with metric units
_MS_TO_KMH = 3.6


class OpenWeatherMapClient(WeatherClientInterface):
    """Looks up current weather with metric units."""

    def __init__(
        self,
        api_key: str,
        api_url: str = "https://api.openweathermap.org/data/2.5/weather",
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_key = api_key
        self._api_url = api_url
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        return self._client

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def lookup(self, location: str) -> WeatherReport:
        params = {"q": location, "appid": self._api_key, "units": "metric"}

        client = await self._get_client()
        try:
            response = await client.get(self._api_url, params=params)
        except httpx.RequestError as e:
            raise WeatherClientError(f"Request error: {e}") from e

        if response.status_code != 200:
            raise WeatherClientError(
                f"Weather API error for {location!r}: {response.status_code} - {response.text}"
            )

        try:
            data = response.json()
            return WeatherReport(
                location=f"{data['name']}, {data['sys']['country']}",
                temperature=round(data["main"]["temp"]),
                description=data["weather"][0]["description"],
                humidity=int(data["main"]["humidity"]),
                wind_speed=round(data["wind"]["speed"] * _MS_TO_KMH),
            )
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise WeatherClientError(f"Invalid weather response: {e}") from e
