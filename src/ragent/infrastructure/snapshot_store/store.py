"""
JSON snapshot store for the document index.

The whole index (chunks with embeddings plus per-file metadata) is written to
a single JSON file so a restart can skip re-embedding unchanged documents.
"""

import asyncio
import functools
import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional, TypeVar

from ragent.core.chunker import Chunk
from ragent.core.file_scanner import FileScanner, ScannedFile

from .models import (
    SCHEMA_VERSION,
    ChangeSet,
    FileMetadata,
    IndexSnapshot,
    SnapshotInfo,
    SnapshotStoreError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

CHANGE_POLICIES = ("hash_or_mtime", "hash_only", "hash_and_mtime")


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def create_file_metadata(scanned_file: ScannedFile, chunk_count: int) -> FileMetadata:
    """Build the metadata record for a freshly chunked file."""
    return FileMetadata(
        filename=scanned_file.filename,
        content_hash=scanned_file.content_hash,
        last_modified_time=scanned_file.modified_time,
        chunk_count=chunk_count,
        processed_at=_utc_now(),
    )


class SnapshotStore:
    """
    Loads, saves and classifies against the on-disk index snapshot.

    Every public coroutine runs its file I/O in the default executor.
    """

    def __init__(
        self,
        snapshot_path: Path | str,
        scanner: Optional[FileScanner] = None,
        change_policy: str = "hash_or_mtime",
    ):
        if change_policy not in CHANGE_POLICIES:
            raise ValueError(
                f"Unknown change detection policy {change_policy!r}, "
                f"expected one of {', '.join(CHANGE_POLICIES)}"
            )
        self._path = Path(snapshot_path)
        self._scanner = scanner or FileScanner()
        self._change_policy = change_policy

    @property
    def path(self) -> Path:
        return self._path

    @property
    def change_policy(self) -> str:
        return self._change_policy

    async def _run(self, fn: Callable[..., T], *args) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(fn, *args))

    # ─────────────────────────────────────────────────────────────────
    # Load / save
    # ─────────────────────────────────────────────────────────────────

    def _load_sync(self) -> Optional[IndexSnapshot]:
        if not self._path.exists():
            logger.info(f"No existing snapshot found at {self._path}")
            return None

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read snapshot {self._path}: {e}")
            return None

        version = data.get("schemaVersion") if isinstance(data, dict) else None
        if version != SCHEMA_VERSION:
            logger.warning(
                f"Snapshot schema version mismatch ({version} vs {SCHEMA_VERSION}), "
                "ignoring snapshot"
            )
            return None

        try:
            snapshot = IndexSnapshot.from_dict(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.error(f"Snapshot {self._path} has an invalid shape: {e}")
            return None

        logger.info(
            f"Loaded snapshot with {len(snapshot.chunks)} chunks "
            f"from {len(snapshot.metadata)} files"
        )
        return snapshot

    async def load(self) -> Optional[IndexSnapshot]:
        """
        Read the snapshot.

        Returns:
            The snapshot, or None if it is absent, unreadable, malformed or
            written under a different schema version.
        """
        return await self._run(self._load_sync)

    def _save_sync(
        self,
        chunks: list[Chunk],
        metadata: dict[str, FileMetadata],
        created_at: Optional[str],
    ) -> IndexSnapshot:
        now = _utc_now()
        snapshot = IndexSnapshot(
            chunks=list(chunks),
            metadata=dict(metadata),
            schema_version=SCHEMA_VERSION,
            created_at=created_at or now,
            last_updated=now,
        )
        payload = json.dumps(snapshot.to_dict(), indent=2)

        directory = self._path.parent
        tmp_name: Optional[str] = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=str(directory)
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, self._path)
            tmp_name = None
        except OSError as e:
            raise SnapshotStoreError(f"Failed to write snapshot {self._path}: {e}") from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

        logger.info(f"Snapshot saved to {self._path} ({len(snapshot.chunks)} chunks)")
        return snapshot

    async def save(
        self,
        chunks: list[Chunk],
        metadata: dict[str, FileMetadata],
        created_at: Optional[str] = None,
    ) -> IndexSnapshot:
        """
        Atomically replace the snapshot with the given state.

        Args:
            chunks: Every chunk currently in the index
            metadata: Per-file metadata, keyed by file name
            created_at: Creation time of the previous snapshot, carried forward

        Raises:
            SnapshotStoreError: If the file cannot be written
        """
        return await self._run(self._save_sync, chunks, metadata, created_at)

    def _clear_sync(self) -> bool:
        try:
            self._path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise SnapshotStoreError(f"Failed to delete snapshot {self._path}: {e}") from e
        logger.info(f"Snapshot cleared: {self._path}")
        return True

    async def clear(self) -> bool:
        """Delete the snapshot file. Returns True if a file was removed."""
        return await self._run(self._clear_sync)

    def _info_sync(self) -> SnapshotInfo:
        try:
            size = self._path.stat().st_size
        except OSError:
            return SnapshotInfo(exists=False)

        snapshot = self._load_sync()
        return SnapshotInfo(
            exists=True,
            size=size,
            document_count=len(snapshot.chunks) if snapshot else 0,
            last_updated=snapshot.last_updated if snapshot else None,
        )

    async def info(self) -> SnapshotInfo:
        """Describe the snapshot file on disk."""
        return await self._run(self._info_sync)

    # ─────────────────────────────────────────────────────────────────
    # Change detection
    # ─────────────────────────────────────────────────────────────────

    def has_changed(self, scanned: ScannedFile, stored: FileMetadata) -> bool:
        """
        Decide whether a known file must be re-processed.

        A file whose stat or read failed always counts as changed.
        """
        if scanned.content_hash == "":
            return True

        hash_differs = scanned.content_hash != stored.content_hash
        mtime_differs = scanned.modified_time != stored.last_modified_time

        if self._change_policy == "hash_only":
            return hash_differs
        if self._change_policy == "hash_and_mtime":
            return hash_differs and mtime_differs
        return hash_differs or mtime_differs

    def _classify_sync(
        self, directory: Path, known_metadata: dict[str, FileMetadata]
    ) -> ChangeSet:
        changes = ChangeSet()
        seen: set[str] = set()

        for scanned in self._scanner.scan(directory):
            seen.add(scanned.filename)
            stored = known_metadata.get(scanned.filename)
            if stored is None:
                changes.new.append(scanned)
            elif self.has_changed(scanned, stored):
                changes.changed.append(scanned)
            else:
                changes.unchanged.append(scanned)

        changes.deleted = sorted(name for name in known_metadata if name not in seen)

        logger.info(
            f"Classified {directory}: {len(changes.new)} new, {len(changes.changed)} changed, "
            f"{len(changes.unchanged)} unchanged, {len(changes.deleted)} deleted",
            extra={
                "new_files": len(changes.new),
                "changed_files": len(changes.changed),
                "unchanged_files": len(changes.unchanged),
                "deleted_files": len(changes.deleted),
            },
        )
        return changes

    async def classify(
        self, directory: Path | str, known_metadata: dict[str, FileMetadata]
    ) -> ChangeSet:
        """
        Compare the directory's source files against stored metadata.

        Args:
            directory: Directory holding the source documents
            known_metadata: Metadata from the last snapshot, keyed by file name

        Returns:
            ChangeSet partitioning the files into new, changed, unchanged and
            deleted
        """
        return await self._run(self._classify_sync, Path(directory), known_metadata)
