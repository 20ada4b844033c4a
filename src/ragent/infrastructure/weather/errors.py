"""Exception types for weather client."""

from ragent.infrastructure.errors import ProviderError


class WeatherClientError(ProviderError):
    """Raised when a weather lookup fails."""

    pass
