"""
Abstract interfaces for file scanning operations.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from pathlib import Path

from .models import ScannedFile


class FileScannerInterface(ABC):
    """
    Abstract interface for file scanning operations.

    Implementations list the source documents of a directory, filtered by
    extension, and describe each with its hash and modification time.
    """

    @abstractmethod
    def scan(self, root_path: Path) -> Iterator[ScannedFile]:
        """
        Scan a directory and yield ScannedFile objects.

        Args:
            root_path: Directory to scan

        Yields:
            ScannedFile objects for each matching file, in name order

        Notes:
            - Unreadable files are still yielded, with ``error`` set
        """
        pass

    @abstractmethod
    def set_extensions(self, extensions: set[str]) -> None:
        """
        Set the file extensions to include in scanning.

        Args:
            extensions: Set of extensions including the dot (e.g., {'.md'})
        """
        pass
