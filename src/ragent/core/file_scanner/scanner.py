"""
File scanner implementation.
"""

import hashlib
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Set

from .interfaces import FileScannerInterface
from .models import ScannedFile

logger = logging.getLogger(__name__)

# Files larger than this are reported as unreadable instead of loaded
MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024


def compute_content_hash(data: bytes) -> str:
    """Compute the SHA-256 hash of raw file bytes."""
    return hashlib.sha256(data).hexdigest()


class FileScanner(FileScannerInterface):
    """
    Lists source documents in a directory.

    By default only the top level of the directory is scanned, matching how
    the knowledge base is laid out (a flat folder of markdown files).
    Snapshot metadata is keyed by file name, so a recursive scan that finds
    two files with the same name keeps the first one and logs a warning.
    """

    def __init__(
        self,
        extensions: Set[str] | None = None,
        recursive: bool = False,
    ):
        """
        Args:
            extensions: Suffixes to include, dot included; defaults to {".md"}
            recursive: Whether to descend into subdirectories
        """
        self._extensions: Set[str] = {e.lower() for e in (extensions or {".md"})}
        self._recursive = recursive

    def set_extensions(self, extensions: Set[str]) -> None:
        """Replace the extension filter (case-insensitive)."""
        self._extensions = {e.lower() for e in extensions}

    def _has_matching_extension(self, path: Path) -> bool:
        return path.suffix.lower() in self._extensions

    def scan(self, root_path: Path) -> Iterator[ScannedFile]:
        """Yield the matching files under ``root_path`` in path order."""
        root_path = Path(root_path).resolve()

        if not root_path.exists():
            logger.error(f"Documents directory not found: {root_path}")
            return

        if not root_path.is_dir():
            logger.error(f"Documents path is not a directory: {root_path}")
            return

        pattern = "**/*" if self._recursive else "*"
        seen_names: set[str] = set()
        for entry in sorted(root_path.glob(pattern)):
            if not entry.is_file() or not self._has_matching_extension(entry):
                continue
            if entry.name in seen_names:
                logger.warning(f"Skipping duplicate file name: {entry}")
                continue
            seen_names.add(entry.name)
            yield self.scan_file(entry)

    def scan_file(self, file_path: Path) -> ScannedFile:
        """
        Describe a single file.

        Args:
            file_path: Path to the file to scan

        Returns:
            ScannedFile object; ``error`` is set when the file couldn't be read
        """
        file_path = Path(file_path).resolve()
        try:
            stat = file_path.stat()
        except OSError as e:
            logger.warning(f"Cannot stat {file_path}: {e}")
            return ScannedFile(
                path=file_path,
                content=None,
                size_bytes=0,
                modified_time=0.0,
                content_hash="",
                error=str(e),
            )

        if stat.st_size > MAX_FILE_SIZE_BYTES:
            logger.warning(f"Skipping large file ({stat.st_size} bytes): {file_path}")
            return ScannedFile(
                path=file_path,
                content=None,
                size_bytes=stat.st_size,
                modified_time=stat.st_mtime,
                content_hash="",
                error=f"file too large ({stat.st_size} bytes)",
            )

        try:
            data = file_path.read_bytes()
        except OSError as e:
            logger.warning(f"Cannot read {file_path}: {e}")
            return ScannedFile(
                path=file_path,
                content=None,
                size_bytes=stat.st_size,
                modified_time=stat.st_mtime,
                content_hash="",
                error=str(e),
            )

        content_hash = compute_content_hash(data)
        try:
            content = data.decode("utf-8")
        except UnicodeDecodeError as e:
            logger.warning(f"{file_path} is not valid UTF-8: {e}")
            return ScannedFile(
                path=file_path,
                content=None,
                size_bytes=stat.st_size,
                modified_time=stat.st_mtime,
                content_hash=content_hash,
                error=f"not valid UTF-8: {e}",
            )

        return ScannedFile(
            path=file_path,
            content=content,
            size_bytes=stat.st_size,
            modified_time=stat.st_mtime,
            content_hash=content_hash,
        )
