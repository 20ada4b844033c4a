"""
Agent Service data models.
"""

from dataclasses import asdict, dataclass, field


@dataclass(frozen=True)
class AgentRequest:
    """One inbound chat turn."""

    message: str
    session_id: str


@dataclass
class AgentResponse:
    """The reply to one chat turn."""

    reply: str
    session_id: str
    timestamp: str
    plugins_used: list[str] = field(default_factory=list)
    context_retrieved: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class HealthStatus:
    """Aggregate health of the agent and its collaborators."""

    status: str
    services: dict[str, bool]
    document_count: int
    plugin_status: dict[str, bool]

    @property
    def http_status(self) -> int:
        if self.status == "healthy":
            return 200
        if self.status == "degraded":
            return 206
        return 503

    def to_dict(self) -> dict:
        return asdict(self)
