"""
Shared test fixtures: in-memory fakes for the external providers.
"""

from typing import Dict, List, Optional

import pytest

from faq_rag.errors import ProviderUnavailable
from faq_rag.providers import EmbeddingProvider, GenerationProvider
from faq_rag.schemas import EmbeddedRecord, RecordMetadata


KEYWORDS = ["password", "card", "budget", "account"]


def keyword_vector(text: str) -> List[float]:
    """Bag-of-keywords embedding with a constant bias term."""
    lowered = text.lower()
    return [float(lowered.count(word)) for word in KEYWORDS] + [0.1]


class FakeEmbedder(EmbeddingProvider):
    """Keyword embedder that can be told to fail on certain texts."""

    name = "fake-embedder"

    def __init__(self, vectors: Optional[Dict[str, List[float]]] = None, fail_on: Optional[str] = None):
        self.vectors = vectors or {}
        self.fail_on = fail_on
        self.calls: List[str] = []

    def embed(self, text: str) -> List[float]:
        self.calls.append(text)
        if self.fail_on is not None and self.fail_on in text:
            raise ProviderUnavailable("embedding service timed out", provider=self.name)
        if text in self.vectors:
            return list(self.vectors[text])
        return keyword_vector(text)


class FakeGenerator(GenerationProvider):
    """Records prompts and returns a canned answer."""

    name = "fake-generator"

    def __init__(self, answer: str = "  Go to Settings > Security.  ", fail: bool = False):
        self.answer = answer
        self.fail = fail
        self.calls: List[Dict[str, object]] = []

    def complete(self, prompt: str, max_tokens: int, temperature: float) -> str:
        self.calls.append({"prompt": prompt, "max_tokens": max_tokens, "temperature": temperature})
        if self.fail:
            raise ProviderUnavailable("model overloaded", provider=self.name)
        return self.answer


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def make_record():
    """Factory for EmbeddedRecord instances."""
    def _make(record_id: str, embedding: List[float], text: str = "", category: str = "General") -> EmbeddedRecord:
        return EmbeddedRecord(
            id=record_id,
            text=text or f"Text of {record_id}",
            embedding=embedding,
            metadata=RecordMetadata(
                source=f"{category}.md",
                category=category,
                chunk_index=0,
                total_chunks=1,
                last_updated="2024-01-01T00:00:00Z",
            ),
        )
    return _make


@pytest.fixture
def faq_records(make_record):
    """Small FAQ collection embedded with keyword_vector."""
    texts = [
        ("Security", "Reset your password by going to Settings then Security then Change Password."),
        ("Cards", "You can freeze a lost card from the Cards screen in the app."),
        ("Budgeting", "Create a budget by choosing categories and setting monthly limits."),
        ("Account Setup", "Open an account by verifying your email and phone number."),
    ]
    return [
        make_record(f"{category}.md_chunk_0", keyword_vector(text), text=text, category=category)
        for category, text in texts
    ]


@pytest.fixture
def fake_embedder():
    return FakeEmbedder()


@pytest.fixture
def fake_generator():
    return FakeGenerator()


@pytest.fixture
def clock():
    return FakeClock()
