"""
Tests for SnapshotStore persistence and change classification.
"""

import asyncio
import json
import os
import shutil
import tempfile
from pathlib import Path

import pytest

from ragent.core.chunker import Chunk, ChunkMetadata
from ragent.core.file_scanner import ScannedFile
from ragent.infrastructure.snapshot_store import (
    SCHEMA_VERSION,
    FileMetadata,
    SnapshotStore,
    SnapshotStoreError,
    create_file_metadata,
)


def make_chunk(content: str, source_file: str = "doc.md", index: int = 0) -> Chunk:
    chunk = Chunk(
        content=content,
        metadata=ChunkMetadata(source_file=source_file, chunk_index=index, title="Doc"),
    )
    chunk.embedding = [0.1, 0.2, 0.3]
    return chunk


def make_metadata(filename: str, content_hash: str = "h", mtime: float = 100.0) -> FileMetadata:
    return FileMetadata(
        filename=filename,
        content_hash=content_hash,
        last_modified_time=mtime,
        chunk_count=1,
        processed_at="2024-01-01T00:00:00+00:00",
    )


def make_scanned(filename: str, content_hash: str = "h", mtime: float = 100.0) -> ScannedFile:
    return ScannedFile(
        path=Path("/docs") / filename,
        content="text",
        size_bytes=4,
        modified_time=mtime,
        content_hash=content_hash,
    )


class TestLoadAndSave:
    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.snapshot_path = Path(self.temp_dir) / "vector_store.json"
        self.store = SnapshotStore(self.snapshot_path)

    def teardown_method(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_load_missing_file_returns_none(self):
        assert asyncio.run(self.store.load()) is None

    def test_save_then_load(self):
        chunks = [make_chunk("first"), make_chunk("second", index=1)]
        metadata = {"doc.md": make_metadata("doc.md")}

        saved = asyncio.run(self.store.save(chunks, metadata))
        loaded = asyncio.run(self.store.load())

        assert loaded is not None
        assert [c.content for c in loaded.chunks] == ["first", "second"]
        assert [c.id for c in loaded.chunks] == [c.id for c in chunks]
        assert loaded.chunks[0].embedding == [0.1, 0.2, 0.3]
        assert loaded.metadata == metadata
        assert loaded.schema_version == SCHEMA_VERSION
        assert loaded.created_at == saved.created_at
        assert loaded.last_updated == saved.last_updated

    def test_file_uses_camel_case_keys(self):
        asyncio.run(self.store.save([make_chunk("x")], {"doc.md": make_metadata("doc.md")}))

        data = json.loads(self.snapshot_path.read_text(encoding="utf-8"))

        assert set(data) == {"chunks", "metadata", "schemaVersion", "createdAt", "lastUpdated"}
        assert data["schemaVersion"] == "1.0.0"
        assert set(data["metadata"]["doc.md"]) == {
            "filename",
            "contentHash",
            "lastModifiedTime",
            "chunkCount",
            "processedAt",
        }
        assert data["chunks"][0]["metadata"]["sourceFile"] == "doc.md"
        assert data["chunks"][0]["metadata"]["chunkIndex"] == 0

    def test_created_at_is_carried_forward(self):
        saved = asyncio.run(self.store.save([], {}, created_at="2020-01-01T00:00:00+00:00"))

        assert saved.created_at == "2020-01-01T00:00:00+00:00"
        assert saved.last_updated != saved.created_at

    def test_save_leaves_no_temporary_files(self):
        asyncio.run(self.store.save([make_chunk("x")], {}))
        asyncio.run(self.store.save([make_chunk("y")], {}))

        assert os.listdir(self.temp_dir) == ["vector_store.json"]

    def test_corrupt_file_returns_none(self):
        self.snapshot_path.write_text("{not json", encoding="utf-8")
        assert asyncio.run(self.store.load()) is None

    def test_version_mismatch_returns_none(self):
        asyncio.run(self.store.save([make_chunk("x")], {}))
        data = json.loads(self.snapshot_path.read_text(encoding="utf-8"))
        data["schemaVersion"] = "0.9.0"
        self.snapshot_path.write_text(json.dumps(data), encoding="utf-8")

        assert asyncio.run(self.store.load()) is None

    def test_invalid_shape_returns_none(self):
        self.snapshot_path.write_text(
            json.dumps({"schemaVersion": SCHEMA_VERSION, "chunks": [{"content": "x"}]}),
            encoding="utf-8",
        )
        assert asyncio.run(self.store.load()) is None

    def test_save_failure_raises(self):
        blocker = Path(self.temp_dir) / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        store = SnapshotStore(blocker / "vector_store.json")

        with pytest.raises(SnapshotStoreError):
            asyncio.run(store.save([], {}))

    def test_clear(self):
        asyncio.run(self.store.save([], {}))

        assert asyncio.run(self.store.clear()) is True
        assert not self.snapshot_path.exists()
        assert asyncio.run(self.store.clear()) is False

    def test_info(self):
        assert asyncio.run(self.store.info()).exists is False

        asyncio.run(self.store.save([make_chunk("a"), make_chunk("b", index=1)], {}))
        info = asyncio.run(self.store.info())

        assert info.exists is True
        assert info.size == self.snapshot_path.stat().st_size
        assert info.document_count == 2
        assert info.last_updated is not None

    def test_unknown_policy_rejected(self):
        with pytest.raises(ValueError):
            SnapshotStore(self.snapshot_path, change_policy="never")


class TestChangeDetection:
    @pytest.mark.parametrize(
        "policy,content_hash,mtime,expected",
        [
            ("hash_or_mtime", "h", 100.0, False),
            ("hash_or_mtime", "other", 100.0, True),
            ("hash_or_mtime", "h", 200.0, True),
            ("hash_only", "h", 200.0, False),
            ("hash_only", "other", 100.0, True),
            ("hash_and_mtime", "other", 100.0, False),
            ("hash_and_mtime", "h", 200.0, False),
            ("hash_and_mtime", "other", 200.0, True),
        ],
    )
    def test_policies(self, policy, content_hash, mtime, expected):
        store = SnapshotStore("unused.json", change_policy=policy)
        scanned = make_scanned("a.md", content_hash=content_hash, mtime=mtime)

        assert store.has_changed(scanned, make_metadata("a.md")) is expected

    @pytest.mark.parametrize("policy", ["hash_or_mtime", "hash_only", "hash_and_mtime"])
    def test_unreadable_file_always_changed(self, policy):
        store = SnapshotStore("unused.json", change_policy=policy)
        scanned = make_scanned("a.md", content_hash="")

        assert store.has_changed(scanned, make_metadata("a.md")) is True


class TestClassify:
    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.docs = Path(self.temp_dir) / "docs"
        self.docs.mkdir()
        self.store = SnapshotStore(Path(self.temp_dir) / "vector_store.json")

    def teardown_method(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write(self, name: str, content: str) -> None:
        (self.docs / name).write_text(content, encoding="utf-8")

    def test_all_files_new_without_metadata(self):
        self._write("a.md", "alpha")
        self._write("b.md", "beta")
        self._write("notes.txt", "ignored")

        changes = asyncio.run(self.store.classify(self.docs, {}))

        assert [f.filename for f in changes.new] == ["a.md", "b.md"]
        assert changes.changed == [] and changes.unchanged == [] and changes.deleted == []
        assert changes.has_changes

    def test_partition(self):
        self._write("same.md", "same")
        self._write("edited.md", "edited")
        self._write("fresh.md", "fresh")
        scanner_view = {
            f.filename: f for f in asyncio.run(self.store.classify(self.docs, {})).new
        }

        known = {
            "same.md": create_file_metadata(scanner_view["same.md"], 1),
            "edited.md": make_metadata("edited.md", content_hash="stale"),
            "zz_gone.md": make_metadata("zz_gone.md"),
            "gone.md": make_metadata("gone.md"),
        }
        changes = asyncio.run(self.store.classify(self.docs, known))

        assert [f.filename for f in changes.new] == ["fresh.md"]
        assert [f.filename for f in changes.changed] == ["edited.md"]
        assert [f.filename for f in changes.unchanged] == ["same.md"]
        assert changes.deleted == ["gone.md", "zz_gone.md"]
        assert [f.filename for f in changes.to_process] == ["fresh.md", "edited.md"]

    def test_no_changes(self):
        self._write("a.md", "alpha")
        scanned = asyncio.run(self.store.classify(self.docs, {})).new[0]

        changes = asyncio.run(
            self.store.classify(self.docs, {"a.md": create_file_metadata(scanned, 1)})
        )

        assert not changes.has_changes
        assert [f.filename for f in changes.unchanged] == ["a.md"]


class TestCreateFileMetadata:
    def test_copies_scan_fields(self):
        meta = create_file_metadata(make_scanned("a.md", content_hash="abc", mtime=42.5), 3)

        assert meta.filename == "a.md"
        assert meta.content_hash == "abc"
        assert meta.last_modified_time == 42.5
        assert meta.chunk_count == 3
        assert meta.processed_at
