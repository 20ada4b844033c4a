"""
Centralized services container module for ragent.

Builds every component once so the CLI and the HTTP server share the same
wiring and receive their collaborators by reference.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ragent.core.chunker import TextChunker, create_chunker
from ragent.core.config import RagentConfig, configure_logging, load_config
from ragent.core.file_scanner import FileScanner
from ragent.infrastructure import (
    ChatClientInterface,
    EmbeddingClientInterface,
    LocalEmbeddingClient,
    OpenWeatherMapClient,
    SnapshotStore,
    VectorIndex,
    WeatherClientInterface,
    create_chat_client,
    create_embedding_client,
)
from ragent.services.agent_service import AgentService
from ragent.services.ingestion_service import IngestionService
from ragent.services.memory_service import SessionMemory
from ragent.services.plugins import MathPlugin, PluginRouter, WeatherPlugin

logger = logging.getLogger(__name__)


@dataclass
class ServicesContainer:
    """
    Container holding all shared service instances.

    Attributes:
        config: Application configuration
        embedding_client: Client for generating embeddings
        chat_client: Client for chat completions
        weather_client: Optional weather provider (None means mock reports)
        vector_index: In-memory chunk index
        snapshot_store: On-disk snapshot of the index
        chunker: Document chunker
        ingestion_service: Loads documents into the index
        memory: Per-session conversation memory
        plugin_router: Registered plugins
        agent_service: Per-turn orchestrator
    """

    config: RagentConfig
    embedding_client: EmbeddingClientInterface
    chat_client: ChatClientInterface
    weather_client: Optional[WeatherClientInterface]
    vector_index: VectorIndex
    snapshot_store: SnapshotStore
    chunker: TextChunker
    ingestion_service: IngestionService
    memory: SessionMemory
    plugin_router: PluginRouter
    agent_service: AgentService

    @property
    def documents_dir(self) -> Path:
        return Path(self.config.indexing.documents_dir)

    async def close(self) -> None:
        """Release provider connections."""
        await self.embedding_client.close()
        await self.chat_client.close()
        if self.weather_client is not None:
            await self.weather_client.close()


def _create_embedding_client(config: RagentConfig) -> EmbeddingClientInterface:
    if config.embedding.provider == "local":
        logger.info("Using local hash-based embeddings")
        return LocalEmbeddingClient(dimension=config.embedding.dimension)
    return create_embedding_client(
        api_url=config.embedding.api_url,
        api_key=config.embedding.api_key,
        model=config.embedding.model,
        dimension=config.embedding.dimension,
        batch_size=config.embedding.batch_size,
        timeout=config.embedding.timeout,
    )


def create_services(
    config_path: Optional[Path] = None,
    config: Optional[RagentConfig] = None,
    chat_client: Optional[ChatClientInterface] = None,
    embedding_client: Optional[EmbeddingClientInterface] = None,
    weather_client: Optional[WeatherClientInterface] = None,
) -> ServicesContainer:
    """
    Create and wire all services.

    Args:
        config_path: Optional path to configuration file. Ignored when
            ``config`` is given.
        config: Ready configuration object
        chat_client: Override for the chat provider (tests, embedding apps)
        embedding_client: Override for the embedding provider
        weather_client: Override for the weather provider

    Returns:
        ServicesContainer with all initialized services.

    Raises:
        ConfigurationError: If a mandatory provider credential is missing.
    """
    if config is None:
        config = load_config(config_path)
    configure_logging(config.logging)

    config.validate(chat=chat_client is None, embedding=embedding_client is None)

    if embedding_client is None:
        embedding_client = _create_embedding_client(config)

    if chat_client is None:
        chat_client = create_chat_client(
            api_url=config.chat.api_url,
            api_key=config.chat.api_key,
            model=config.chat.model,
            temperature=config.chat.temperature,
            max_tokens=config.chat.max_tokens,
            timeout=config.chat.timeout,
        )

    if weather_client is None and config.weather.api_key:
        weather_client = OpenWeatherMapClient(
            api_key=config.weather.api_key,
            api_url=config.weather.api_url,
            timeout=config.weather.timeout,
        )

    chunker = create_chunker(
        max_size=config.indexing.chunk_size,
        overlap=config.indexing.chunk_overlap,
    )
    file_scanner = FileScanner(
        extensions=set(config.indexing.file_extensions),
        recursive=config.indexing.recursive,
    )
    snapshot_store = SnapshotStore(
        snapshot_path=config.indexing.snapshot_path,
        scanner=file_scanner,
        change_policy=config.indexing.change_detection,
    )
    vector_index = VectorIndex(embedding_client)
    ingestion_service = IngestionService(
        vector_index=vector_index,
        snapshot_store=snapshot_store,
        chunker=chunker,
    )

    memory = SessionMemory(max_messages=config.memory.max_messages)
    plugin_router = PluginRouter([WeatherPlugin(client=weather_client), MathPlugin()])

    agent_service = AgentService(
        chat_client=chat_client,
        vector_index=vector_index,
        memory=memory,
        plugin_router=plugin_router,
        top_k=config.agent.top_k,
        history_window=config.memory.history_window,
    )

    return ServicesContainer(
        config=config,
        embedding_client=embedding_client,
        chat_client=chat_client,
        weather_client=weather_client,
        vector_index=vector_index,
        snapshot_store=snapshot_store,
        chunker=chunker,
        ingestion_service=ingestion_service,
        memory=memory,
        plugin_router=plugin_router,
        agent_service=agent_service,
    )
