"""
Snapshot store module for ragent.

Persists the document index as one JSON file and detects which source
documents changed since it was written.
"""

from .models import (
    SCHEMA_VERSION,
    ChangeSet,
    FileMetadata,
    IndexSnapshot,
    SnapshotInfo,
    SnapshotStoreError,
)
from .store import CHANGE_POLICIES, SnapshotStore, create_file_metadata

__all__ = [
    "SnapshotStore",
    "SnapshotStoreError",
    "FileMetadata",
    "IndexSnapshot",
    "ChangeSet",
    "SnapshotInfo",
    "SCHEMA_VERSION",
    "CHANGE_POLICIES",
    "create_file_metadata",
]
