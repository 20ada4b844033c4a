"""
Fixed-size text chunker with natural-boundary snapping.
"""

import logging
from pathlib import Path

from .interfaces import ChunkerInterface
from .metadata import extract_metadata
from .models import Chunk, ChunkMetadata

logger = logging.getLogger(__name__)

SENTENCE_TERMINATORS = (".", "!", "?")
PARAGRAPH_BREAK = "\n\n"


class DocumentReadError(Exception):
    """Raised when a source document cannot be read or decoded."""

    def __init__(self, path: Path | str, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Cannot read document {self.path}: {reason}")


class TextChunker(ChunkerInterface):
    """
    Splits text into overlapping chunks of at most ``max_size`` characters.

    Windows are ``max_size`` characters long. Inside a window the chunker
    looks for the last sentence terminator or blank-line break and ends the
    chunk there, but only when that boundary lies past the window midpoint;
    otherwise the window is hard-cut at ``max_size``. The next window starts
    ``overlap`` characters before the previous one ended, always at least one
    character further than the previous start.
    """

    def __init__(self, max_size: int = 1000, overlap: int = 200):
        """
        Initialize the chunker.

        Args:
            max_size: Maximum characters per chunk
            overlap: Characters shared by consecutive windows

        Raises:
            ValueError: If max_size < 1 or overlap is not in [0, max_size)
        """
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        if overlap < 0 or overlap >= max_size:
            raise ValueError("overlap must be >= 0 and smaller than max_size")
        self._max_size = max_size
        self._overlap = overlap

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def overlap(self) -> int:
        return self._overlap

    def _find_boundary(self, text: str, start: int, end: int) -> int | None:
        """
        Return the end offset of the last natural break in ``text[start:end]``.

        Only breaks past the window midpoint are accepted, so an early break
        never produces a near-empty chunk.
        """
        candidates = [text.rfind(t, start, end) for t in SENTENCE_TERMINATORS]
        best_position = max(candidates)
        best_end = best_position + 1

        paragraph = text.rfind(PARAGRAPH_BREAK, start, end)
        if paragraph > best_position:
            best_position = paragraph
            best_end = paragraph + len(PARAGRAPH_BREAK)

        if best_position > start + self._max_size // 2:
            return best_end
        return None

    def split_spans(self, text: str) -> list[tuple[int, int]]:
        """
        Compute the ``(start, end)`` window offsets covering ``text``.

        Consecutive windows overlap, and together they cover the whole text.
        """
        spans: list[tuple[int, int]] = []
        length = len(text)
        start = 0

        while start < length:
            end = min(start + self._max_size, length)
            if end < length:
                boundary = self._find_boundary(text, start, end)
                if boundary is not None:
                    end = boundary

            spans.append((start, end))
            if end >= length:
                break
            start = max(end - self._overlap, start + 1)

        return spans

    def split_text(self, text: str) -> list[str]:
        """Split text into stripped, non-empty chunk strings."""
        chunks = []
        for start, end in self.split_spans(text):
            piece = text[start:end].strip()
            if piece:
                chunks.append(piece)
        return chunks

    def chunk_document(self, content: str, filename: str) -> list[Chunk]:
        """Split a document into Chunk objects carrying its metadata."""
        doc_meta = extract_metadata(content)
        return [
            Chunk(
                content=piece,
                metadata=ChunkMetadata(
                    source_file=filename,
                    chunk_index=index,
                    title=doc_meta.title,
                    author=doc_meta.author,
                    source=doc_meta.source,
                ),
            )
            for index, piece in enumerate(self.split_text(content))
        ]

    def load_document(self, path: Path | str) -> list[Chunk]:
        """
        Read a UTF-8 document from disk and chunk it.

        Raises:
            DocumentReadError: If the file cannot be read or decoded
        """
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise DocumentReadError(path, f"not valid UTF-8: {e}") from e
        except OSError as e:
            raise DocumentReadError(path, str(e)) from e

        chunks = self.chunk_document(content, path.name)
        logger.debug(f"Chunked {path.name} into {len(chunks)} chunks")
        return chunks


def create_chunker(max_size: int = 1000, overlap: int = 200) -> TextChunker:
    """
    Factory function to create a TextChunker instance.

    Args:
        max_size: Maximum characters per chunk
        overlap: Overlap between consecutive chunks

    Returns:
        Configured TextChunker instance
    """
    return TextChunker(max_size=max_size, overlap=overlap)
