"""OpenAI-compatible chat-completion client."""

import logging
from typing import Optional

import httpx

from .errors import ChatClientError
from .interface import ChatClientInterface, ChatMessage

logger = logging.getLogger(__name__)

EMPTY_COMPLETION_REPLY = "No response generated"


class OpenAIChatClient(ChatClientInterface):
    """
    Chat client for OpenAI-compatible ``/chat/completions`` endpoints.

    The request carries the system prompt, the history turns and the current
    user message, in that order. Requests are attempted once.
    """

    def __init__(
        self,
        api_url: str,
        api_key: str,
        model: str = "gpt-4o-mini",
        temperature: float = 0.7,
        max_tokens: int = 1000,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_url = api_url.rstrip("/")
        self._api_key = api_key
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def model(self) -> str:
        return self._model

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client with connection pooling."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        return self._client

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def build_messages(
        self, system_prompt: str, message: str, history: list[ChatMessage]
    ) -> list[dict]:
        """Build the provider message list."""
        messages = [{"role": "system", "content": system_prompt}]
        messages.extend({"role": turn.role, "content": turn.content} for turn in history)
        messages.append({"role": "user", "content": message})
        return messages

    async def complete(
        self, system_prompt: str, message: str, history: list[ChatMessage]
    ) -> str:
        payload = {
            "model": self._model,
            "messages": self.build_messages(system_prompt, message, history),
            "max_tokens": self._max_tokens,
            "temperature": self._temperature,
            "stream": False,
        }
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

        client = await self._get_client()
        try:
            response = await client.post(self._api_url, headers=headers, json=payload)
        except httpx.RequestError as e:
            raise ChatClientError(f"Request error: {e}") from e

        if response.status_code != 200:
            raise ChatClientError(
                f"API error: {response.status_code} - {response.text} "
                f"(url={self._api_url}, model={self._model})"
            )

        try:
            choices = response.json().get("choices") or []
            if not choices:
                return EMPTY_COMPLETION_REPLY
            content = (choices[0].get("message") or {}).get("content")
        except (ValueError, AttributeError, TypeError, IndexError) as e:
            raise ChatClientError(f"Invalid response format: {e}") from e

        if content is not None and not isinstance(content, str):
            raise ChatClientError(
                f"Invalid response format: content is {type(content).__name__}, expected str"
            )
        return content or EMPTY_COMPLETION_REPLY


def create_chat_client(
    api_url: str,
    api_key: str,
    model: str = "gpt-4o-mini",
    temperature: float = 0.7,
    max_tokens: int = 1000,
    timeout: Optional[float] = None,
) -> ChatClientInterface:
    """Factory function to create a chat client."""
    return OpenAIChatClient(
        api_url=api_url,
        api_key=api_key,
        model=model,
        temperature=temperature,
        max_tokens=max_tokens,
        timeout=timeout,
    )
