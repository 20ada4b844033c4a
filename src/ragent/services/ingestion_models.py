"""
Ingestion Service data models.
"""

from dataclasses import asdict, dataclass, field


@dataclass
class IngestionResult:
    """Result of an ingestion run."""

    total_files: int = 0
    total_chunks: int = 0
    new_files: int = 0
    changed_files: int = 0
    unchanged_files: int = 0
    deleted_files: int = 0
    failed_files: list[str] = field(default_factory=list)
    snapshot_saved: bool = False
    duration_seconds: float = 0.0
    rebuilt: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class IndexStats:
    """What is currently loaded into the vector index."""

    total_documents: int
    total_chunks: int
    file_names: list[str]

    def to_dict(self) -> dict:
        return asdict(self)
