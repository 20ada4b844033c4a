"""Exception types for embedding client."""

from ragent.infrastructure.errors import ProviderError


class EmbeddingClientError(ProviderError):
    """Base exception for embedding client errors."""

    pass
