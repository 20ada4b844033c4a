"""
Core layer - configuration, file scanning, chunking and similarity scoring.
"""

from ragent.core.chunker import (
    Chunk,
    ChunkerInterface,
    ChunkMetadata,
    DocumentReadError,
    TextChunker,
    create_chunker,
)
from ragent.core.config import (
    ConfigurationError,
    RagentConfig,
    configure_logging,
    load_config,
)
from ragent.core.file_scanner import FileScanner, FileScannerInterface, ScannedFile
from ragent.core.similarity import cosine_similarity, lexical_similarity

__all__ = [
    # Chunker
    "Chunk",
    "ChunkMetadata",
    "ChunkerInterface",
    "DocumentReadError",
    "TextChunker",
    "create_chunker",
    # Config
    "ConfigurationError",
    "RagentConfig",
    "configure_logging",
    "load_config",
    # File scanner
    "FileScanner",
    "FileScannerInterface",
    "ScannedFile",
    # Similarity
    "cosine_similarity",
    "lexical_similarity",
]
