"""
Infrastructure Layer - provider clients, snapshot store and vector index.
"""

from ragent.infrastructure.chat import (
    ChatClientError,
    ChatClientInterface,
    ChatMessage,
    OpenAIChatClient,
    create_chat_client,
)
from ragent.infrastructure.embedding import (
    EmbeddingClientError,
    EmbeddingClientInterface,
    OpenAIEmbeddingClient,
    create_embedding_client,
)
from ragent.infrastructure.errors import ProviderError
from ragent.infrastructure.fakes import (
    FailingEmbeddingClient,
    FakeChatClient,
    FakeWeatherClient,
    FixedEmbeddingClient,
    LocalEmbeddingClient,
)
from ragent.infrastructure.snapshot_store import (
    ChangeSet,
    FileMetadata,
    IndexSnapshot,
    SnapshotInfo,
    SnapshotStore,
    SnapshotStoreError,
    create_file_metadata,
)
from ragent.infrastructure.vector_index import SearchResult, VectorIndex
from ragent.infrastructure.weather import (
    OpenWeatherMapClient,
    WeatherClientError,
    WeatherClientInterface,
    WeatherReport,
)

__all__ = [
    "ProviderError",
    # Embedding client
    "EmbeddingClientInterface",
    "OpenAIEmbeddingClient",
    "EmbeddingClientError",
    "create_embedding_client",
    # Chat client
    "ChatClientInterface",
    "ChatMessage",
    "OpenAIChatClient",
    "ChatClientError",
    "create_chat_client",
    # Weather client
    "WeatherClientInterface",
    "OpenWeatherMapClient",
    "WeatherClientError",
    "WeatherReport",
    # Snapshot store
    "SnapshotStore",
    "SnapshotStoreError",
    "FileMetadata",
    "IndexSnapshot",
    "ChangeSet",
    "SnapshotInfo",
    "create_file_metadata",
    # Vector index
    "VectorIndex",
    "SearchResult",
    # Fakes for testing
    "LocalEmbeddingClient",
    "FixedEmbeddingClient",
    "FailingEmbeddingClient",
    "FakeChatClient",
    "FakeWeatherClient",
]
