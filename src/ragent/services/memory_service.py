"""
Per-session conversation memory.

Sessions are created on first write, capped at a fixed number of messages
(oldest dropped first) and never expire.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

logger = logging.getLogger(__name__)

NO_HISTORY_SUMMARY = "No previous conversation history."

VALID_ROLES = ("user", "assistant")


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class ConversationMessage:
    """One turn of a conversation."""

    role: str
    content: str
    timestamp: str = field(default_factory=_utc_now)

    def to_dict(self) -> dict:
        return {"role": self.role, "content": self.content, "timestamp": self.timestamp}


@dataclass
class Session:
    session_id: str
    messages: list[ConversationMessage] = field(default_factory=list)
    created_at: str = field(default_factory=_utc_now)
    updated_at: str = field(default_factory=_utc_now)


@dataclass
class SessionStats:
    message_count: int
    created_at: str
    updated_at: str

    def to_dict(self) -> dict:
        return {
            "message_count": self.message_count,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


class SessionMemory:
    """In-memory store of conversation sessions keyed by session id."""

    def __init__(self, max_messages: int = 20):
        if max_messages < 1:
            raise ValueError("max_messages must be at least 1")
        self._max_messages = max_messages
        self._sessions: dict[str, Session] = {}

    @property
    def max_messages(self) -> int:
        return self._max_messages

    def add_message(self, session_id: str, role: str, content: str) -> ConversationMessage:
        """
        Append a message, creating the session if needed.

        Raises:
            ValueError: If role is not "user" or "assistant"
        """
        if role not in VALID_ROLES:
            raise ValueError(f"Invalid role {role!r}, expected one of {VALID_ROLES}")

        session = self._sessions.get(session_id)
        if session is None:
            session = Session(session_id=session_id)
            self._sessions[session_id] = session
            logger.debug(f"Created session {session_id}")

        message = ConversationMessage(role=role, content=content)
        session.messages.append(message)
        session.updated_at = message.timestamp

        overflow = len(session.messages) - self._max_messages
        if overflow > 0:
            del session.messages[:overflow]

        return message

    def history(self, session_id: str) -> list[ConversationMessage]:
        """All retained messages in chronological order (a copy)."""
        session = self._sessions.get(session_id)
        return list(session.messages) if session else []

    def recent(self, session_id: str, n: int) -> list[ConversationMessage]:
        """The last ``n`` messages in chronological order."""
        if n <= 0:
            return []
        return self.history(session_id)[-n:]

    @staticmethod
    def summary(messages: list[ConversationMessage]) -> str:
        """Render messages as prompt text."""
        if not messages:
            return NO_HISTORY_SUMMARY
        lines = "\n".join(f"{m.role}: {m.content}" for m in messages)
        return f"Recent conversation context:\n{lines}"

    def clear(self, session_id: str) -> bool:
        """Forget a session. Returns True if it existed."""
        return self._sessions.pop(session_id, None) is not None

    def active_sessions(self) -> list[str]:
        return list(self._sessions)

    def stats(self, session_id: str) -> Optional[SessionStats]:
        session = self._sessions.get(session_id)
        if session is None:
            return None
        return SessionStats(
            message_count=len(session.messages),
            created_at=session.created_at,
            updated_at=session.updated_at,
        )
