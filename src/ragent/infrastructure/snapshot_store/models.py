"""
Data models for the snapshot store.
"""

from dataclasses import dataclass, field
from typing import Optional

from ragent.core.chunker import Chunk
from ragent.core.file_scanner import ScannedFile

SCHEMA_VERSION = "1.0.0"


class SnapshotStoreError(Exception):
    """Raised when the snapshot cannot be written or removed."""

    pass


@dataclass
class FileMetadata:
    """
    Bookkeeping for one ingested file.

    Describes exactly the chunks currently held for the file.
    """

    filename: str
    content_hash: str
    last_modified_time: float
    chunk_count: int
    processed_at: str

    def to_dict(self) -> dict:
        return {
            "filename": self.filename,
            "contentHash": self.content_hash,
            "lastModifiedTime": self.last_modified_time,
            "chunkCount": self.chunk_count,
            "processedAt": self.processed_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FileMetadata":
        return cls(
            filename=data["filename"],
            content_hash=data["contentHash"],
            last_modified_time=float(data["lastModifiedTime"]),
            chunk_count=int(data["chunkCount"]),
            processed_at=data["processedAt"],
        )


@dataclass
class IndexSnapshot:
    """The persisted state of the index: every chunk plus per-file metadata."""

    chunks: list[Chunk]
    metadata: dict[str, FileMetadata]
    schema_version: str = SCHEMA_VERSION
    created_at: Optional[str] = None
    last_updated: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "chunks": [chunk.to_dict() for chunk in self.chunks],
            "metadata": {name: meta.to_dict() for name, meta in self.metadata.items()},
            "schemaVersion": self.schema_version,
            "createdAt": self.created_at,
            "lastUpdated": self.last_updated,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "IndexSnapshot":
        return cls(
            chunks=[Chunk.from_dict(item) for item in data["chunks"]],
            metadata={
                name: FileMetadata.from_dict(item) for name, item in data["metadata"].items()
            },
            schema_version=data["schemaVersion"],
            created_at=data.get("createdAt"),
            last_updated=data.get("lastUpdated"),
        )


@dataclass
class ChangeSet:
    """
    Classification of a directory's files against stored metadata.

    ``new``, ``changed`` and ``unchanged`` hold scanned files; ``deleted``
    holds the names of files known to the metadata but gone from disk.
    """

    new: list[ScannedFile] = field(default_factory=list)
    changed: list[ScannedFile] = field(default_factory=list)
    unchanged: list[ScannedFile] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)

    @property
    def to_process(self) -> list[ScannedFile]:
        """Files whose chunks must be (re)built."""
        return self.new + self.changed

    @property
    def has_changes(self) -> bool:
        return bool(self.new or self.changed or self.deleted)


@dataclass
class SnapshotInfo:
    """Summary of the snapshot file on disk."""

    exists: bool
    size: Optional[int] = None
    document_count: Optional[int] = None
    last_updated: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "exists": self.exists,
            "size": self.size,
            "document_count": self.document_count,
            "last_updated": self.last_updated,
        }
