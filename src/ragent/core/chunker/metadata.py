"""
Best-effort metadata extraction for markdown documents.
"""

import re
from dataclasses import dataclass
from typing import Optional

_TITLE_PATTERN = re.compile(r"^#\s+(.+)$", re.MULTILINE)
_AUTHOR_PATTERN = re.compile(r"\*\*Author:\*\*\s*(.+)$", re.MULTILINE)
_SOURCE_PATTERN = re.compile(r"\*\*Source:\*\*\s*\[([^\]]+)\]\(([^)]+)\)")


@dataclass(frozen=True)
class DocumentMetadata:
    title: Optional[str] = None
    author: Optional[str] = None
    source: Optional[str] = None


def extract_metadata(content: str) -> DocumentMetadata:
    """
    Extract title, author and source URL from markdown content.

    Each field comes from the first matching line; a missing field is None.
    """
    title_match = _TITLE_PATTERN.search(content)
    author_match = _AUTHOR_PATTERN.search(content)
    source_match = _SOURCE_PATTERN.search(content)

    return DocumentMetadata(
        title=title_match.group(1).strip() if title_match else None,
        author=author_match.group(1).strip() if author_match else None,
        source=source_match.group(2).strip() if source_match else None,
    )
