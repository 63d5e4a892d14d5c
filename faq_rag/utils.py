"""Utility functions for FAQ ingestion and retrieval."""

from __future__ import annotations

import os
import re
from datetime import datetime, timezone
from typing import List, Optional


# Sentence terminator followed by whitespace
_SENTENCE_BOUNDARY_RE = re.compile(r"(?<=[.!?])\s+")


def safe_relpath(path: str, base: str) -> str:
    """Get relative path, falling back to absolute on error."""
    try:
        return os.path.relpath(path, base)
    except ValueError:
        return path


def split_sentences(text: str) -> List[str]:
    """Split text after every '.', '!' or '?' that is followed by whitespace."""
    return _SENTENCE_BOUNDARY_RE.split(text)


def category_from_path(path: str, base: Optional[str] = None) -> str:
    """
    Derive a category label from a document path.

    A document nested under ``base`` takes the first directory below it
    ('Cards/Limits.md' -> 'Cards'); otherwise the file name is used
    ('Account_Setup.md' -> 'Account Setup').
    """
    if base is not None:
        parts = safe_relpath(path, base).replace("\\", "/").split("/")
        if len(parts) > 1 and parts[0] not in ("", ".", ".."):
            return parts[0].replace("_", " ")
    stem = os.path.splitext(os.path.basename(path))[0]
    return stem.replace("_", " ")


def chunk_record_id(source_id: str, index: int) -> str:
    """Deterministic record id for a chunk."""
    return f"{source_id}_chunk_{index}"


def utc_timestamp() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def shorten(text: str, limit: int = 80) -> str:
    """Truncate text to limit with ellipsis."""
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + "..."
