"""Split FAQ documents into overlapping, sentence-aligned chunks."""

from __future__ import annotations

from typing import List

from .schemas import Chunk
from .utils import split_sentences


DEFAULT_CHUNK_SIZE = 1000
DEFAULT_CHUNK_OVERLAP = 200

# Chunks at or below this trimmed length are dropped (stray headers etc.)
MIN_CHUNK_LENGTH = 50


def chunk_text(text: str, max_size: int = DEFAULT_CHUNK_SIZE, overlap: int = DEFAULT_CHUNK_OVERLAP) -> List[str]:
    """
    Split text into chunks along sentence boundaries.

    Sentences are accumulated until adding the next one would push the buffer
    past ``max_size``; the buffer is then emitted and the next one starts with
    the last ``overlap`` characters of the emitted text. A single sentence
    longer than ``max_size`` becomes its own oversized chunk.

    Args:
        text: Raw document text
        max_size: Target maximum chunk length in characters
        overlap: Characters carried over from the previous chunk

    Returns:
        Trimmed chunks longer than MIN_CHUNK_LENGTH, in document order
    """
    if not text or not text.strip():
        return []

    max_size = max(1, max_size)
    overlap = min(max(0, overlap), max_size - 1)

    chunks: List[str] = []
    current = ""

    for sentence in split_sentences(text):
        candidate = current + " " + sentence
        if len(candidate) > max_size and current:
            chunks.append(current.strip())
            tail = current[-overlap:] if overlap else ""
            current = tail + " " + sentence
        else:
            current = candidate

    if current.strip():
        chunks.append(current.strip())

    return [chunk for chunk in chunks if len(chunk) > MIN_CHUNK_LENGTH]


def chunk_document(
    text: str,
    source_id: str,
    category: str,
    max_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> List[Chunk]:
    """Chunk one document and number the pieces 0..n-1."""
    pieces = chunk_text(text, max_size=max_size, overlap=overlap)
    return [
        Chunk(
            text=piece,
            source_id=source_id,
            category=category,
            index=index,
            total_in_document=len(pieces),
        )
        for index, piece in enumerate(pieces)
    ]
