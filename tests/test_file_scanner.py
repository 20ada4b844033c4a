"""
Tests for FileScanner.
"""

import hashlib
import shutil
import tempfile
from pathlib import Path

from ragent.core.file_scanner import FileScanner, compute_content_hash


class TestFileScanner:
    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.root = Path(self.temp_dir)
        (self.root / "b.md").write_text("bravo", encoding="utf-8")
        (self.root / "a.MD").write_text("alpha", encoding="utf-8")
        (self.root / "notes.txt").write_text("ignored", encoding="utf-8")
        nested = self.root / "nested"
        nested.mkdir()
        (nested / "c.md").write_text("charlie", encoding="utf-8")
        (nested / "b.md").write_text("duplicate name", encoding="utf-8")

    def teardown_method(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_top_level_markdown_only(self):
        names = [f.filename for f in FileScanner().scan(self.root)]

        assert names == ["a.MD", "b.md"]

    def test_recursive_skips_duplicate_names(self):
        names = [f.filename for f in FileScanner(recursive=True).scan(self.root)]

        assert sorted(names) == ["a.MD", "b.md", "c.md"]

    def test_custom_extensions(self):
        scanner = FileScanner(extensions={".txt"})

        assert [f.filename for f in scanner.scan(self.root)] == ["notes.txt"]

    def test_scanned_fields(self):
        scanned = FileScanner().scan_file(self.root / "b.md")

        assert scanned.content == "bravo"
        assert scanned.size_bytes == 5
        assert scanned.content_hash == hashlib.sha256(b"bravo").hexdigest()
        assert scanned.modified_time == (self.root / "b.md").stat().st_mtime
        assert scanned.readable

    def test_invalid_utf8_is_unreadable_but_hashed(self):
        path = self.root / "bad.md"
        path.write_bytes(b"\xff\xfe bad")

        scanned = FileScanner().scan_file(path)

        assert not scanned.readable
        assert scanned.content is None
        assert scanned.content_hash == compute_content_hash(b"\xff\xfe bad")
        assert "UTF-8" in scanned.error

    def test_missing_file(self):
        scanned = FileScanner().scan_file(self.root / "gone.md")

        assert not scanned.readable
        assert scanned.content_hash == ""

    def test_missing_root(self):
        assert list(FileScanner().scan(self.root / "absent")) == []
