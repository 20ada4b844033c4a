"""
Abstract interfaces for the chunker module.
"""

from abc import ABC, abstractmethod

from .models import Chunk


class ChunkerInterface(ABC):
    """Abstract interface for document chunking operations."""

    @abstractmethod
    def split_text(self, text: str) -> list[str]:
        """
        Split text into ordered, overlapping chunk strings.

        Args:
            text: Full document text

        Returns:
            Non-empty, stripped chunk strings in document order
        """
        pass

    @abstractmethod
    def chunk_document(self, content: str, filename: str) -> list[Chunk]:
        """
        Split a document into Chunk objects.

        Args:
            content: Full document text
            filename: Base name of the source document

        Returns:
            Chunks with fresh ids, chunk_index 0..n-1 and extracted metadata
        """
        pass
