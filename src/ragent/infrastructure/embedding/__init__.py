"""
Embedding client module for ragent.

Provides an async HTTP client for generating embeddings via API calls.
"""

from .client import OpenAIEmbeddingClient, create_embedding_client
from .errors import EmbeddingClientError
from .interface import EmbeddingClientInterface

__all__ = [
    "EmbeddingClientInterface",
    "OpenAIEmbeddingClient",
    "create_embedding_client",
    "EmbeddingClientError",
]
