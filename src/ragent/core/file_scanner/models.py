"""
Data models for the file scanner module.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class ScannedFile:
    """
    Represents a scanned source document.

    Attributes:
        path: Absolute path to the file
        content: File content decoded as UTF-8, or None if it could not be read
        size_bytes: File size in bytes
        modified_time: File modification timestamp (Unix epoch, seconds)
        content_hash: SHA-256 hash of the raw file bytes ("" if unreadable)
        error: Read/decode error message, None for readable files
    """

    path: Path
    content: Optional[str]
    size_bytes: int
    modified_time: float
    content_hash: str
    error: Optional[str] = None

    @property
    def filename(self) -> str:
        """Base name used as the file's key in the snapshot metadata."""
        return self.path.name

    @property
    def readable(self) -> bool:
        return self.error is None and self.content is not None
