"""
Chat-completion client module for ragent.
"""

from .client import EMPTY_COMPLETION_REPLY, OpenAIChatClient, create_chat_client
from .errors import ChatClientError
from .interface import ChatClientInterface, ChatMessage

__all__ = [
    "ChatClientInterface",
    "ChatMessage",
    "OpenAIChatClient",
    "create_chat_client",
    "ChatClientError",
    "EMPTY_COMPLETION_REPLY",
]
