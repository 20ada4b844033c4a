"""
File scanner module for ragent.

Lists source documents in the documents directory together with the
content hash and modification time used for change detection.
"""

from .interfaces import FileScannerInterface
from .models import ScannedFile
from .scanner import FileScanner, compute_content_hash

__all__ = [
    "FileScannerInterface",
    "FileScanner",
    "ScannedFile",
    "compute_content_hash",
]
