"""Tests for document chunking."""

import pytest

from faq_rag.chunker import MIN_CHUNK_LENGTH, chunk_document, chunk_text
from faq_rag.utils import split_sentences


PASSWORD_DOC = "Reset your password by going to Settings then Security then Change Password."


def _sentences(count: int) -> str:
    # Each sentence is 51 characters long
    return " ".join(f"Question {i} is answered by the support team quickly." for i in range(1, count + 1))


def test_chunk_text_empty():
    """Test empty and whitespace-only input."""
    assert chunk_text("") == []
    assert chunk_text("   \n\t ") == []


def test_chunk_text_single_short_document():
    """Test a document below the size limit becomes one trimmed chunk."""
    chunks = chunk_text("  " + PASSWORD_DOC + "\n", max_size=1000, overlap=200)
    assert chunks == [PASSWORD_DOC]


def test_chunk_text_filters_small_fragments():
    """Test chunks at or below the minimum length are dropped."""
    assert chunk_text("# Security", max_size=1000, overlap=200) == []
    assert chunk_text("x" * MIN_CHUNK_LENGTH, max_size=1000, overlap=200) == []
    assert chunk_text("x" * (MIN_CHUNK_LENGTH + 1), max_size=1000, overlap=200) == ["x" * (MIN_CHUNK_LENGTH + 1)]


def test_chunk_text_respects_max_size():
    """Test multi-sentence text is split into bounded chunks."""
    chunks = chunk_text(_sentences(9), max_size=120, overlap=20)
    assert len(chunks) > 1
    for chunk in chunks:
        assert len(chunk) <= 120
        assert len(chunk.strip()) > MIN_CHUNK_LENGTH


def test_chunk_text_overlap():
    """Test each chunk starts with the tail of the previous one."""
    chunks = chunk_text(_sentences(9), max_size=120, overlap=20)
    for i in range(len(chunks) - 1):
        assert chunks[i + 1].startswith(chunks[i][-20:].lstrip())


def test_chunk_text_covers_every_sentence_in_order():
    """Test no sentence is dropped and sentences keep document order."""
    text = _sentences(9)
    chunks = chunk_text(text, max_size=120, overlap=20)
    positions = []
    for sentence in split_sentences(text):
        containing = [idx for idx, chunk in enumerate(chunks) if sentence in chunk]
        assert containing, f"sentence dropped: {sentence}"
        positions.append(containing[0])
    assert positions == sorted(positions)


def test_chunk_text_keeps_oversized_sentence_whole():
    """Test a sentence longer than max_size is emitted unsplit."""
    long_sentence = "This sentence " + "keeps going " * 30 + "and finally ends."
    short_sentence = "A second sentence that is comfortably above the minimum length."
    chunks = chunk_text(f"{long_sentence} {short_sentence}", max_size=100, overlap=10)
    assert chunks[0] == long_sentence
    assert len(chunks[0]) > 100
    assert chunks[-1].endswith(short_sentence)


def test_chunk_text_overlap_not_below_max_size_terminates():
    """Test an overlap larger than max_size is clamped instead of looping."""
    chunks = chunk_text(_sentences(5), max_size=60, overlap=500)
    assert len(chunks) >= 5
    for chunk in chunks:
        assert len(chunk) > MIN_CHUNK_LENGTH


def test_chunk_text_zero_overlap():
    """Test zero overlap starts each chunk at a sentence."""
    chunks = chunk_text(_sentences(6), max_size=110, overlap=0)
    for chunk in chunks:
        assert chunk.startswith("Question")


def test_chunk_text_deterministic():
    """Test identical input yields identical output."""
    text = _sentences(20)
    assert chunk_text(text, 200, 50) == chunk_text(text, 200, 50)


@pytest.mark.parametrize("terminator", [".", "!", "?"])
def test_chunk_text_sentence_terminators(terminator):
    """Test all three terminators split sentences."""
    sentence = "Is this sentence long enough to stand on its own as a chunk" + terminator
    chunks = chunk_text(f"{sentence} {sentence}", max_size=80, overlap=0)
    assert chunks == [sentence, sentence]


def test_chunk_document_numbers_chunks():
    """Test chunk_document assigns contiguous indexes and totals."""
    chunks = chunk_document(_sentences(9), source_id="Support.md", category="Support", max_size=120, overlap=20)
    assert [chunk.index for chunk in chunks] == list(range(len(chunks)))
    assert all(chunk.total_in_document == len(chunks) for chunk in chunks)
    assert all(chunk.source_id == "Support.md" for chunk in chunks)
    assert all(chunk.category == "Support" for chunk in chunks)


def test_chunk_document_empty():
    """Test chunk_document on a document with nothing usable."""
    assert chunk_document("# Title", source_id="a.md", category="a") == []
