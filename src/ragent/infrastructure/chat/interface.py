"""Abstract interface for chat-completion clients."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ragent.infrastructure.errors import ProviderError


@dataclass(frozen=True)
class ChatMessage:
    """A prior conversation turn passed to the chat provider."""

    role: str
    content: str


class ChatClientInterface(ABC):
    """Abstract interface for chat-completion clients."""

    @abstractmethod
    async def complete(
        self, system_prompt: str, message: str, history: list[ChatMessage]
    ) -> str:
        """
        Generate a reply to ``message``.

        Args:
            system_prompt: Instructions and retrieved context for the model
            message: The current user message
            history: Earlier turns in chronological order

        Returns:
            The generated reply text

        Raises:
            ChatClientError: If the provider call fails
        """
        pass

    async def test_connection(self) -> bool:
        """Return True when the provider answers a minimal request."""
        try:
            await self.complete("Reply with OK.", "ping", [])
            return True
        except ProviderError:
            return False

    async def close(self) -> None:
        """Release any held connections (optional)."""
        pass
