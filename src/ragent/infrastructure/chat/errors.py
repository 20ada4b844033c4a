"""Exception types for chat client."""

from ragent.infrastructure.errors import ProviderError


class ChatClientError(ProviderError):
    """Raised when a chat completion cannot be produced."""

    pass
