"""
Fake implementations for testing.

Provides in-process implementations of the provider interfaces for use in
unit and integration tests, and for running offline without API keys.
"""

from __future__ import annotations

import hashlib
import math

from ragent.infrastructure.chat import ChatClientError, ChatClientInterface, ChatMessage
from ragent.infrastructure.embedding import EmbeddingClientError, EmbeddingClientInterface
from ragent.infrastructure.weather import (
    WeatherClientError,
    WeatherClientInterface,
    WeatherReport,
)


class LocalEmbeddingClient(EmbeddingClientInterface):
    """
    Local embedding client.

    Returns deterministic pseudo-random unit vectors based on text hash.
    No API calls required.
    """

    def __init__(self, dimension: int = 1536):
        """
        Initialize local embedding client.

        Args:
            dimension: Dimension of embedding vectors to generate
        """
        self._dimension = dimension
        self.calls = 0

    def get_dimension(self) -> int:
        return self._dimension

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """
        Generate deterministic embeddings for texts.

        Same text always produces same embedding.
        """
        self.calls += len(texts)
        return [self._text_to_vector(text) for text in texts]

    def _text_to_vector(self, text: str) -> list[float]:
        hash_bytes = hashlib.sha256(text.encode("utf-8")).digest()

        vector: list[float] = []
        while len(vector) < self._dimension:
            for byte in hash_bytes:
                if len(vector) >= self._dimension:
                    break
                # byte mapped into [-1, 1]
                vector.append((byte / 127.5) - 1.0)
            hash_bytes = hashlib.sha256(hash_bytes).digest()

        norm = math.sqrt(sum(v * v for v in vector))
        if norm > 0:
            vector = [v / norm for v in vector]
        return vector

    def embed_sync(self, text: str) -> list[float]:
        """Synchronous embedding for single text."""
        return self._text_to_vector(text)


class FixedEmbeddingClient(EmbeddingClientInterface):
    """
    Embedding client backed by a text → vector table.

    Texts missing from the table raise EmbeddingClientError, which lets tests
    exercise the lexical fallback for selected chunks.
    """

    def __init__(self, vectors: dict[str, list[float]], dimension: int | None = None):
        self._vectors = dict(vectors)
        first = next(iter(self._vectors.values()), [])
        self._dimension = dimension if dimension is not None else len(first)

    def get_dimension(self) -> int:
        return self._dimension

    def set_vector(self, text: str, vector: list[float]) -> None:
        self._vectors[text] = vector

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        missing = [t for t in texts if t not in self._vectors]
        if missing:
            raise EmbeddingClientError(f"No embedding for {missing[0]!r}")
        return [list(self._vectors[t]) for t in texts]


class FailingEmbeddingClient(EmbeddingClientInterface):
    """Embedding client whose every call fails."""

    def __init__(self, dimension: int = 8):
        self._dimension = dimension

    def get_dimension(self) -> int:
        return self._dimension

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        raise EmbeddingClientError("embedding provider unavailable")


class FakeChatClient(ChatClientInterface):
    """
    Chat client that records its calls and replies with a canned answer.

    Set ``fail`` to make every completion raise ChatClientError.
    """

    def __init__(self, reply: str = "This is a test reply.", fail: bool = False):
        self.reply = reply
        self.fail = fail
        self.calls: list[tuple[str, str, list[ChatMessage]]] = []

    async def complete(
        self, system_prompt: str, message: str, history: list[ChatMessage]
    ) -> str:
        self.calls.append((system_prompt, message, list(history)))
        if self.fail:
            raise ChatClientError("chat provider unavailable")
        return self.reply

    @property
    def last_call(self) -> tuple[str, str, list[ChatMessage]] | None:
        return self.calls[-1] if self.calls else None


class FakeWeatherClient(WeatherClientInterface):
    """Weather client returning a fixed report, or failing on demand."""

    def __init__(self, report: WeatherReport | None = None, fail: bool = False):
        self.report = report
        self.fail = fail
        self.locations: list[str] = []

    async def lookup(self, location: str) -> WeatherReport:
        self.locations.append(location)
        if self.fail:
            raise WeatherClientError(f"lookup failed for {location}")
        if self.report is not None:
            return self.report
        return WeatherReport(
            location=location, temperature=20, description="clear sky", humidity=50, wind_speed=10
        )
