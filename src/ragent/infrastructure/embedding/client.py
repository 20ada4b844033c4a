"""HTTP embedding provider speaking the OpenAI ``/embeddings`` protocol."""

import logging
from typing import Optional

import httpx

from .errors import EmbeddingClientError
from .interface import EmbeddingClientInterface
from .response_parser import parse_embedding_response

logger = logging.getLogger(__name__)


class OpenAIEmbeddingClient(EmbeddingClientInterface):
    """
    Embeds text through an OpenAI-compatible endpoint.

    There is no retry layer: one failed request fails the call with
    EmbeddingClientError, and the vector index decides how to degrade.
    Inputs longer than ``batch_size`` go out as consecutive requests on one
    pooled connection.
    """

    def __init__(
        self,
        api_url: str,
        api_key: str,
        model: str = "text-embedding-3-small",
        dimension: int = 1536,
        batch_size: int = 100,
        timeout: Optional[float] = None,
        encoding_format: str = "float",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            api_url: Embeddings endpoint, e.g. https://api.openai.com/v1/embeddings
            api_key: Bearer token sent with every request
            model: Embedding model name
            dimension: Vector length the model is expected to return
            batch_size: Upper bound on texts per request
            timeout: Transport timeout in seconds; None disables it
            encoding_format: Value of the ``encoding_format`` request field
            transport: Replacement httpx transport (tests use MockTransport)
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")

        self._api_url = api_url.rstrip("/")
        self._api_key = api_key
        self._model = model
        self._dimension = dimension
        self._batch_size = batch_size
        self._timeout = timeout
        self._encoding_format = encoding_format
        self._transport = transport

        self._client: Optional[httpx.AsyncClient] = None

    @property
    def batch_size(self) -> int:
        return self._batch_size

    def get_dimension(self) -> int:
        return self._dimension

    async def _get_client(self) -> httpx.AsyncClient:
        """Lazily open the pooled client, reopening it after close()."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """
        Embed ``texts``, returning one vector per text in input order.

        Raises:
            EmbeddingClientError: If any of the underlying requests fails
        """
        if not texts:
            return []

        vectors: list[list[float]] = []
        for offset in range(0, len(texts), self._batch_size):
            vectors.extend(await self._request(texts[offset : offset + self._batch_size]))
        return vectors

    async def _request(self, texts: list[str]) -> list[list[float]]:
        payload = {
            "input": texts,
            "model": self._model,
            "encoding_format": self._encoding_format,
        }
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

        client = await self._get_client()
        try:
            response = await client.post(self._api_url, headers=headers, json=payload)
        except httpx.TimeoutException as e:
            raise EmbeddingClientError(f"Embedding request timed out: {e}") from e
        except httpx.RequestError as e:
            raise EmbeddingClientError(f"Embedding request failed: {e}") from e

        if response.status_code != 200:
            raise EmbeddingClientError(
                f"Embedding API returned {response.status_code}: {response.text} "
                f"(model={self._model}, texts={len(texts)})"
            )

        try:
            body = response.json()
        except ValueError as e:
            raise EmbeddingClientError(f"Embedding response is not JSON: {e}") from e

        logger.debug(f"Embedded {len(texts)} texts with {self._model}")
        return parse_embedding_response(body, len(texts), self._dimension)


def create_embedding_client(
    api_url: str,
    api_key: str,
    model: str = "text-embedding-3-small",
    dimension: int = 1536,
    batch_size: int = 100,
    timeout: Optional[float] = None,
) -> EmbeddingClientInterface:
    """Build the HTTP embedding client from configuration values."""
    return OpenAIEmbeddingClient(
        api_url=api_url,
        api_key=api_key,
        model=model,
        dimension=dimension,
        batch_size=batch_size,
        timeout=timeout,
    )
