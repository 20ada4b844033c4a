"""
Agent Service for ragent.

Runs one conversational turn: memory, retrieval, plugins, prompt assembly
and the chat completion.
"""

import logging
from datetime import datetime, timezone

from ragent.infrastructure.chat import ChatClientInterface, ChatMessage
from ragent.infrastructure.vector_index import SearchResult, VectorIndex
from ragent.services.agent_models import AgentRequest, AgentResponse, HealthStatus
from ragent.services.memory_service import SessionMemory, SessionStats
from ragent.services.plugins import PluginContext, PluginRouter
from ragent.services.prompts import build_system_prompt, format_context

logger = logging.getLogger(__name__)

FALLBACK_REPLY = (
    "I apologize, but I encountered an error while processing your message. "
    "Please try again."
)

FEATURES = [
    "Conversational AI with memory",
    "Retrieval-Augmented Generation (RAG)",
    "Plugin system for weather and math",
    "Session-based conversation history",
]


class AgentService:
    """
    Orchestrates a conversational turn.

    Only the chat completion can degrade a turn: retrieval failures yield no
    context, plugin failures are reported inside the prompt, and a failed
    completion is replaced by FALLBACK_REPLY.
    """

    def __init__(
        self,
        chat_client: ChatClientInterface,
        vector_index: VectorIndex,
        memory: SessionMemory,
        plugin_router: PluginRouter,
        top_k: int = 3,
        history_window: int = 4,
    ):
        self._chat_client = chat_client
        self._vector_index = vector_index
        self._memory = memory
        self._plugin_router = plugin_router
        self._top_k = top_k
        self._history_window = history_window

    @property
    def memory(self) -> SessionMemory:
        return self._memory

    async def process_message(self, request: AgentRequest) -> AgentResponse:
        """
        Answer one message.

        Args:
            request: The message and its session id

        Returns:
            AgentResponse; never raises for provider failures
        """
        message, session_id = request.message, request.session_id
        timestamp = datetime.now(timezone.utc).isoformat()
        logger.info(f"Processing message for session {session_id}")

        self._memory.add_message(session_id, "user", message)

        results = await self._retrieve(message)

        outcomes = await self._plugin_router.run(
            PluginContext(user_message=message, session_id=session_id)
        )

        # The window ends just before the message appended above
        window = self._memory.recent(session_id, self._history_window + 1)[:-1]
        memory_text = self._memory.summary(window)
        history = [ChatMessage(role=m.role, content=m.content) for m in window]

        system_prompt = build_system_prompt(
            capabilities=self._plugin_router.capabilities_manifest(),
            memory=memory_text,
            context=format_context(results),
            plugins=self._plugin_router.format_outcomes(outcomes),
        )

        try:
            reply = await self._chat_client.complete(system_prompt, message, history)
        except Exception as e:
            logger.error(
                f"Chat completion failed for session {session_id}: {e}", exc_info=True
            )
            reply = FALLBACK_REPLY

        self._memory.add_message(session_id, "assistant", reply)

        response = AgentResponse(
            reply=reply,
            session_id=session_id,
            timestamp=timestamp,
            plugins_used=[outcome.plugin_name for outcome in outcomes],
            context_retrieved=len(results) > 0,
        )
        logger.info(
            f"Response generated for session {session_id}",
            extra={
                "session_id": session_id,
                "plugins_used": response.plugins_used,
                "context_retrieved": response.context_retrieved,
            },
        )
        return response

    async def _retrieve(self, message: str) -> list[SearchResult]:
        try:
            return await self._vector_index.search(message, self._top_k)
        except Exception as e:
            logger.error(f"Context retrieval failed: {e}", exc_info=True)
            return []

    async def get_health_status(self) -> HealthStatus:
        """Probe the chat provider and plugins and summarize the result."""
        try:
            chat_ok = await self._chat_client.test_connection()
            plugin_status = await self._plugin_router.test_plugins()
            document_count = self._vector_index.count()
        except Exception as e:
            logger.error(f"Health check error: {e}", exc_info=True)
            return HealthStatus(
                status="unhealthy",
                services={"chat": False, "vector_index": False, "memory": False},
                document_count=0,
                plugin_status={},
            )

        healthy = chat_ok and all(plugin_status.values())
        return HealthStatus(
            status="healthy" if healthy else "degraded",
            services={
                "chat": chat_ok,
                "vector_index": document_count > 0,
                "memory": True,
            },
            document_count=document_count,
            plugin_status=plugin_status,
        )

    def get_session_stats(self, session_id: str) -> SessionStats | None:
        return self._memory.stats(session_id)

    def clear_session(self, session_id: str) -> bool:
        return self._memory.clear(session_id)

    def capabilities(self) -> dict:
        return {
            "features": list(FEATURES),
            "plugins": self._plugin_router.describe(),
        }
