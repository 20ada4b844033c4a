"""
Ingestion Service for ragent.

Coordinates the ingestion workflow: snapshot loading, change detection,
chunking, embedding and snapshot saving.
"""

import logging
import time
from pathlib import Path
from typing import Optional

from ragent.core.chunker import ChunkerInterface, DocumentReadError, create_chunker
from ragent.core.file_scanner import ScannedFile
from ragent.infrastructure.snapshot_store import (
    FileMetadata,
    SnapshotStore,
    SnapshotStoreError,
    create_file_metadata,
)
from ragent.infrastructure.vector_index import VectorIndex
from ragent.services.ingestion_models import IndexStats, IngestionResult

logger = logging.getLogger(__name__)


class IngestionService:
    """
    Populates the vector index from a directory of documents.

    Unchanged files are restored from the snapshot with their stored
    embeddings; new and changed files are chunked and embedded again. The
    complete state is then written back as the new snapshot.
    """

    def __init__(
        self,
        vector_index: VectorIndex,
        snapshot_store: SnapshotStore,
        chunker: Optional[ChunkerInterface] = None,
    ):
        self._vector_index = vector_index
        self._snapshot_store = snapshot_store
        self._chunker = chunker or create_chunker()
        self._metadata: dict[str, FileMetadata] = {}
        self._created_at: Optional[str] = None

    @property
    def metadata(self) -> dict[str, FileMetadata]:
        """Per-file metadata of the last ingestion (a copy)."""
        return dict(self._metadata)

    async def load_directory(self, directory: Path | str) -> IngestionResult:
        """
        Bring the index in line with ``directory``, reusing the snapshot.

        Args:
            directory: Directory holding the source documents

        Returns:
            IngestionResult describing what was (re)processed
        """
        start_time = time.time()
        directory = Path(directory)
        result = IngestionResult()

        snapshot = await self._snapshot_store.load()
        known: dict[str, FileMetadata] = dict(snapshot.metadata) if snapshot else {}
        self._created_at = snapshot.created_at if snapshot else None

        changes = await self._snapshot_store.classify(directory, known)
        result.new_files = len(changes.new)
        result.changed_files = len(changes.changed)
        result.unchanged_files = len(changes.unchanged)
        result.deleted_files = len(changes.deleted)

        self._vector_index.clear()
        metadata: dict[str, FileMetadata] = {}

        if snapshot and changes.unchanged:
            unchanged_names = {f.filename for f in changes.unchanged}
            cached = [c for c in snapshot.chunks if c.source_file in unchanged_names]
            self._vector_index.add_existing(cached)
            for name in unchanged_names:
                metadata[name] = known[name]
            logger.info(f"Restored {len(cached)} cached chunks for {len(unchanged_names)} files")

        if changes.deleted:
            logger.info(f"Dropping {len(changes.deleted)} deleted files: {', '.join(changes.deleted)}")

        files_to_process = changes.to_process
        if files_to_process:
            logger.info(f"Processing {len(files_to_process)} new/changed files...")
            await self._process_files(files_to_process, metadata, result)
        else:
            logger.info("All files are up to date, no processing needed")

        self._metadata = metadata
        await self._save(result)
        return self._finish(result, start_time)

    async def force_rebuild(self, directory: Path | str) -> IngestionResult:
        """
        Discard the snapshot and the in-memory index, then ingest every file.
        """
        start_time = time.time()
        directory = Path(directory)
        result = IngestionResult(rebuilt=True)

        logger.info("Force rebuilding index...")
        try:
            await self._snapshot_store.clear()
        except SnapshotStoreError as e:
            logger.error(f"Could not remove old snapshot: {e}")
        self._vector_index.clear()
        self._created_at = None

        changes = await self._snapshot_store.classify(directory, {})
        result.new_files = len(changes.new)

        metadata: dict[str, FileMetadata] = {}
        await self._process_files(changes.to_process, metadata, result)

        self._metadata = metadata
        await self._save(result)
        return self._finish(result, start_time)

    async def _process_files(
        self,
        files: list[ScannedFile],
        metadata: dict[str, FileMetadata],
        result: IngestionResult,
    ) -> None:
        for scanned in files:
            name = scanned.filename
            self._vector_index.remove_by_file(name)
            try:
                content = self._read(scanned)
            except DocumentReadError as e:
                logger.warning(str(e))
                result.failed_files.append(name)
                metadata.pop(name, None)
                continue

            chunks = self._chunker.chunk_document(content, name)
            await self._vector_index.add(chunks)
            metadata[name] = create_file_metadata(scanned, len(chunks))
            logger.debug(f"Processed {name}: {len(chunks)} chunks")

    @staticmethod
    def _read(scanned: ScannedFile) -> str:
        if not scanned.readable:
            raise DocumentReadError(scanned.path, scanned.error or "unreadable")
        assert scanned.content is not None
        return scanned.content

    async def _save(self, result: IngestionResult) -> None:
        try:
            snapshot = await self._snapshot_store.save(
                self._vector_index.all_chunks(), self._metadata, created_at=self._created_at
            )
            self._created_at = snapshot.created_at
            result.snapshot_saved = True
        except SnapshotStoreError as e:
            logger.error(f"Failed to save snapshot, continuing from memory: {e}")
            result.snapshot_saved = False

    def _finish(self, result: IngestionResult, start_time: float) -> IngestionResult:
        result.total_files = len(self._metadata)
        result.total_chunks = self._vector_index.count()
        result.duration_seconds = time.time() - start_time

        logger.info(
            "Ingestion completed",
            extra={
                "total_files": result.total_files,
                "total_chunks": result.total_chunks,
                "new_files": result.new_files,
                "changed_files": result.changed_files,
                "unchanged_files": result.unchanged_files,
                "deleted_files": result.deleted_files,
                "failed_files": len(result.failed_files),
                "snapshot_saved": result.snapshot_saved,
                "duration_seconds": result.duration_seconds,
            },
        )
        logger.info(
            f"Index ready with {result.total_chunks} chunks from {result.total_files} files "
            f"in {result.duration_seconds:.2f}s"
        )
        return result

    def stats(self) -> IndexStats:
        """Describe what is loaded into the index."""
        file_names = self._vector_index.file_names()
        return IndexStats(
            total_documents=len(file_names),
            total_chunks=self._vector_index.count(),
            file_names=file_names,
        )
