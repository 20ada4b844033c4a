"""
In-memory vector index over document chunks.

Chunks with an embedding are ranked by cosine similarity against the query
embedding; chunks without one are ranked by a lexical overlap heuristic so
that a partially embedded index still answers queries.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from ragent.core.chunker import Chunk
from ragent.core.similarity import cosine_similarity, lexical_similarity
from ragent.infrastructure.embedding import EmbeddingClientInterface
from ragent.infrastructure.errors import ProviderError

logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    """A chunk paired with its relevance score."""

    chunk: Chunk
    score: float

    def to_dict(self) -> dict:
        return {"chunk": self.chunk.to_dict(), "score": self.score}


class VectorIndex:
    """
    Ordered in-memory list of chunks.

    Insertion order is preserved and breaks ties between equal scores.
    """

    def __init__(self, embedding_client: EmbeddingClientInterface):
        self._embedding_client = embedding_client
        self._chunks: list[Chunk] = []

    async def add(self, chunks: Iterable[Chunk]) -> int:
        """
        Embed and insert chunks.

        Each chunk is embedded on its own; a chunk whose embedding fails is
        still inserted, without an embedding.

        Returns:
            Number of chunks that were embedded successfully
        """
        embedded = 0
        added = 0
        for chunk in chunks:
            try:
                chunk.embedding = await self._embedding_client.embed(chunk.content)
                embedded += 1
            except ProviderError as e:
                logger.warning(f"Failed to embed chunk {chunk.id} of {chunk.source_file}: {e}")
                chunk.embedding = None
            self._chunks.append(chunk)
            added += 1

        logger.debug(f"Added {added} chunks to index ({embedded} embedded)")
        return embedded

    def add_existing(self, chunks: Iterable[Chunk]) -> None:
        """Insert chunks as they are, without embedding them."""
        self._chunks.extend(chunks)

    async def search(self, query: str, k: int = 3) -> list[SearchResult]:
        """
        Return up to ``k`` chunks most relevant to ``query``.

        Results are ordered by score descending; equal scores keep insertion
        order. If the query cannot be embedded, every chunk is scored
        lexically.
        """
        if not self._chunks or k <= 0:
            return []

        query_embedding: Optional[list[float]]
        try:
            query_embedding = await self._embedding_client.embed(query)
        except ProviderError as e:
            logger.warning(f"Query embedding failed, falling back to lexical search: {e}")
            query_embedding = None

        results = [
            SearchResult(chunk=chunk, score=self._score(query, query_embedding, chunk))
            for chunk in self._chunks
        ]
        # sort is stable, so ties keep insertion order
        results.sort(key=lambda r: r.score, reverse=True)
        return results[:k]

    def _score(
        self, query: str, query_embedding: Optional[list[float]], chunk: Chunk
    ) -> float:
        if (
            query_embedding is not None
            and chunk.embedding is not None
            and len(chunk.embedding) == len(query_embedding)
        ):
            return cosine_similarity(query_embedding, chunk.embedding)
        return lexical_similarity(query, chunk.content)

    def remove_by_file(self, filename: str) -> int:
        """Remove every chunk of a file. Returns the number removed."""
        before = len(self._chunks)
        self._chunks = [c for c in self._chunks if c.source_file != filename]
        removed = before - len(self._chunks)
        if removed:
            logger.debug(f"Removed {removed} chunks for {filename}")
        return removed

    def clear(self) -> None:
        self._chunks = []

    def count(self) -> int:
        return len(self._chunks)

    def all_chunks(self) -> list[Chunk]:
        """Return the chunks in insertion order (a new list)."""
        return list(self._chunks)

    def chunks_for_file(self, filename: str) -> list[Chunk]:
        return [c for c in self._chunks if c.source_file == filename]

    def file_names(self) -> list[str]:
        """Distinct source file names, in order of first appearance."""
        return list(dict.fromkeys(c.source_file for c in self._chunks))
