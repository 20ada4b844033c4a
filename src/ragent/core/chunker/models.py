"""
Data models for the chunker module.

Contains Chunk and ChunkMetadata dataclasses. The ``to_dict``/``from_dict``
pair defines the on-disk representation used by the snapshot store.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class ChunkMetadata:
    """
    Metadata attached to every chunk.

    Attributes:
        source_file: Base name of the source document
        chunk_index: Position within the source file's chunk sequence
        title: First markdown heading of the document, if any
        author: ``**Author:**`` line of the document, if any
        source: URL from the ``**Source:**`` link of the document, if any
    """

    source_file: str
    chunk_index: int
    title: Optional[str] = None
    author: Optional[str] = None
    source: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "sourceFile": self.source_file,
            "chunkIndex": self.chunk_index,
        }
        if self.title is not None:
            data["title"] = self.title
        if self.author is not None:
            data["author"] = self.author
        if self.source is not None:
            data["source"] = self.source
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChunkMetadata":
        return cls(
            source_file=data["sourceFile"],
            chunk_index=int(data["chunkIndex"]),
            title=data.get("title"),
            author=data.get("author"),
            source=data.get("source"),
        )


@dataclass
class Chunk:
    """
    A bounded-length slice of a source document, the unit of retrieval.

    Attributes:
        content: The chunk text
        metadata: Source file, position and document metadata
        id: Unique identifier for the chunk
        embedding: Embedding vector, None if embedding failed or was skipped
    """

    content: str
    metadata: ChunkMetadata
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    embedding: Optional[list[float]] = None

    @property
    def source_file(self) -> str:
        return self.metadata.source_file

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "content": self.content,
            "metadata": self.metadata.to_dict(),
        }
        if self.embedding is not None:
            data["embedding"] = self.embedding
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Chunk":
        embedding = data.get("embedding")
        return cls(
            id=data["id"],
            content=data["content"],
            metadata=ChunkMetadata.from_dict(data["metadata"]),
            embedding=[float(v) for v in embedding] if embedding is not None else None,
        )
