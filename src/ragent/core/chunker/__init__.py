"""
Chunker module for ragent.

Splits source documents into overlapping, bounded-length chunks and
extracts light metadata (title, author, source URL).
"""

from .chunker import DocumentReadError, TextChunker, create_chunker
from .interfaces import ChunkerInterface
from .metadata import DocumentMetadata, extract_metadata
from .models import Chunk, ChunkMetadata

__all__ = [
    # Main classes
    "TextChunker",
    "ChunkerInterface",
    "Chunk",
    "ChunkMetadata",
    "DocumentReadError",
    # Metadata extraction
    "DocumentMetadata",
    "extract_metadata",
    # Factory
    "create_chunker",
]
