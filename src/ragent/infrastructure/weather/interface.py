"""Abstract interface for weather clients."""

from abc import ABC, abstractmethod

from .models import WeatherReport


class WeatherClientInterface(ABC):
    """Abstract interface for weather clients."""

    @abstractmethod
    async def lookup(self, location: str) -> WeatherReport:
        """
        Fetch current conditions for a location.

        Raises:
            WeatherClientError: If the lookup fails
        """
        pass

    async def close(self) -> None:
        pass
