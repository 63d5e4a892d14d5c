"""Exceptions raised by the FAQ retrieval core."""

from __future__ import annotations

from typing import Optional


class FaqRagError(Exception):
    """Base exception for all FAQ RAG errors.

    ``stage`` names the step of the answer pipeline that failed
    (``input``, ``store_load``, ``embedding``, ``retrieval`` or ``generation``).
    """

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        self.stage = stage


class MalformedInput(FaqRagError):
    """Raised when the question is empty or missing."""

    def __init__(self, message: str = "Missing required parameter: question"):
        super().__init__(message, stage="input")


class UninitializedKnowledgeBase(FaqRagError):
    """Raised when the durable store holds no record collection yet."""

    def __init__(self, location: str = ""):
        message = "FAQ knowledge base not initialized. Please run ingestion first."
        if location:
            message = f"{message} (missing: {location})"
        super().__init__(message, stage="store_load")
        self.location = location


class StoreError(FaqRagError):
    """Durable store could not be read or written."""

    def __init__(self, message: str):
        super().__init__(message, stage="store_load")


class CorruptKnowledgeBase(StoreError):
    """Record collection violates its invariants (e.g. duplicate ids)."""


class DimensionMismatch(FaqRagError):
    """Vectors that must be compared disagree in length."""

    def __init__(self, expected: int, actual: int, stage: Optional[str] = None):
        super().__init__(f"Vector dimensions must match: {expected} != {actual}", stage=stage)
        self.expected = expected
        self.actual = actual


class ProviderUnavailable(FaqRagError):
    """
    Error communicating with an embedding or generation provider.

    Raised when:
    - Provider is unreachable
    - Request times out
    - Provider returns an error or an unusable response
    """

    def __init__(self, message: str, provider: Optional[str] = None, stage: Optional[str] = None):
        super().__init__(message, stage=stage)
        self.provider = provider
