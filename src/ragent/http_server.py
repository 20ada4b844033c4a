"""
HTTP layer for ragent.

Provides a FastAPI server exposing the agent turn and its administrative
endpoints. Documents are ingested in the lifespan hook, so requests are only
accepted once the index is ready.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import AliasChoices, BaseModel, Field

from ragent.services import AgentRequest, ServicesContainer, create_services

logger = logging.getLogger(__name__)

ENDPOINTS = [
    "POST /agent/message - Send message to agent",
    "GET /agent/health - Check system health",
    "GET /agent/session/{id}/stats - Get session statistics",
    "DELETE /agent/session/{id} - Clear session memory",
    "POST /agent/rebuild-vector-store - Force rebuild vector store cache",
    "GET /agent/vector-store-info - Get vector store information",
    "GET /agent/capabilities - Get this information",
]


class AgentMessageRequest(BaseModel):
    """Body of POST /agent/message; the session id may be sent as sessionId."""

    message: str = Field(min_length=1)
    session_id: str = Field(
        min_length=1, validation_alias=AliasChoices("session_id", "sessionId")
    )


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": {"message": message, "timestamp": _now()}},
    )


def _validation_message(exc: RequestValidationError) -> str:
    for error in exc.errors():
        loc = error.get("loc", ())
        if "message" in loc:
            return "Message is required and must be a non-empty string"
        if "session_id" in loc or "sessionId" in loc:
            return "Session ID is required and must be a non-empty string"
    return "Invalid request data"


def create_app(
    services: Optional[ServicesContainer] = None,
    ingest_on_startup: bool = True,
) -> FastAPI:
    """
    FastAPI application factory.

    Args:
        services: Prebuilt services; built from configuration and .env when None.
        ingest_on_startup: Whether to load the documents directory before
            serving.
    """
    if services is None:
        services = create_services()

    cfg = services.config
    agent_service = services.agent_service
    ingestion_service = services.ingestion_service
    snapshot_store = services.snapshot_store
    documents_dir = services.documents_dir

    # Serializes forced rebuilds against each other
    indexing_lock = asyncio.Lock()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if ingest_on_startup:
            logger.info(f"Loading documents from {documents_dir}")
            async with indexing_lock:
                await ingestion_service.load_directory(documents_dir)
        try:
            yield
        finally:
            await services.close()

    app = FastAPI(
        title="ragent",
        version="0.1.0",
        description="Retrieval-augmented conversational agent with tool plugins.",
        lifespan=lifespan,
    )
    app.state.services = services

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return _error(400, _validation_message(exc))

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info(f"{request.method} {request.url.path}")
        return await call_next(request)

    @app.get("/health")
    async def health():
        return {"status": "OK", "timestamp": _now()}

    @app.post("/agent/message")
    async def agent_message(req: AgentMessageRequest):
        if len(req.message) > cfg.server.max_message_length:
            return _error(
                400, f"Message too long (max {cfg.server.max_message_length} characters)"
            )
        try:
            response = await agent_service.process_message(
                AgentRequest(message=req.message, session_id=req.session_id)
            )
            return {"success": True, "data": response.to_dict()}
        except Exception as exc:
            logger.error(f"Error in /agent/message: {exc}", exc_info=True)
            return _error(500, "Failed to process message")

    @app.get("/agent/health")
    async def agent_health():
        try:
            status = await agent_service.get_health_status()
            return JSONResponse(
                status_code=status.http_status,
                content={"success": True, "data": status.to_dict()},
            )
        except Exception as exc:
            logger.error(f"Error in /agent/health: {exc}", exc_info=True)
            return _error(503, "Health check failed")

    @app.get("/agent/session/{session_id}/stats")
    async def session_stats(session_id: str):
        stats = agent_service.get_session_stats(session_id)
        if stats is None:
            return _error(404, "Session not found")
        return {"success": True, "data": {"session_id": session_id, **stats.to_dict()}}

    @app.delete("/agent/session/{session_id}")
    async def clear_session(session_id: str):
        agent_service.clear_session(session_id)
        return {
            "success": True,
            "message": f"Session {session_id} cleared successfully",
            "timestamp": _now(),
        }

    @app.post("/agent/rebuild-vector-store")
    async def rebuild_vector_store():
        try:
            async with indexing_lock:
                result = await ingestion_service.force_rebuild(documents_dir)
            return {
                "success": True,
                "message": "Vector store rebuilt successfully",
                "timestamp": _now(),
                "data": result.to_dict(),
            }
        except Exception as exc:
            logger.error(f"Error in /agent/rebuild-vector-store: {exc}", exc_info=True)
            return _error(500, "Failed to rebuild vector store")

    @app.get("/agent/vector-store-info")
    async def vector_store_info():
        try:
            info = await snapshot_store.info()
            data = info.to_dict()
            data["index"] = ingestion_service.stats().to_dict()
            return {"success": True, "data": data}
        except Exception as exc:
            logger.error(f"Error in /agent/vector-store-info: {exc}", exc_info=True)
            return _error(500, "Failed to get vector store info")

    @app.get("/agent/capabilities")
    async def capabilities():
        return {
            "success": True,
            "data": {**agent_service.capabilities(), "endpoints": list(ENDPOINTS)},
        }

    return app
