"""
Service Layer - ingestion, session memory, plugins, the agent and ServicesContainer.
"""

from ragent.services.agent_models import AgentRequest, AgentResponse, HealthStatus
from ragent.services.agent_service import FALLBACK_REPLY, AgentService
from ragent.services.container import ServicesContainer, create_services
from ragent.services.ingestion_models import IndexStats, IngestionResult
from ragent.services.ingestion_service import IngestionService
from ragent.services.memory_service import (
    NO_HISTORY_SUMMARY,
    ConversationMessage,
    SessionMemory,
    SessionStats,
)
from ragent.services.plugins import (
    MathOutcome,
    MathPlugin,
    PluginContext,
    PluginFailure,
    PluginRouter,
    WeatherOutcome,
    WeatherPlugin,
)

__all__ = [
    # Container and factory
    "ServicesContainer",
    "create_services",
    # Ingestion
    "IngestionService",
    "IngestionResult",
    "IndexStats",
    # Memory
    "SessionMemory",
    "SessionStats",
    "ConversationMessage",
    "NO_HISTORY_SUMMARY",
    # Plugins
    "PluginRouter",
    "PluginContext",
    "MathPlugin",
    "WeatherPlugin",
    "MathOutcome",
    "WeatherOutcome",
    "PluginFailure",
    # Agent
    "AgentService",
    "AgentRequest",
    "AgentResponse",
    "HealthStatus",
    "FALLBACK_REPLY",
]
