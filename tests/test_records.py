"""Tests for durable record stores."""

import json

import pytest

from faq_rag.errors import StoreError, UninitializedKnowledgeBase
from faq_rag.records import InMemoryRecordStore, JsonFileRecordStore, parse_records


def test_json_store_missing_file(tmp_path):
    """Test a missing collection file means the knowledge base is uninitialized."""
    store = JsonFileRecordStore(str(tmp_path / "kb" / "faq-embeddings.json"))
    with pytest.raises(UninitializedKnowledgeBase) as excinfo:
        store.get_records()
    assert "faq-embeddings.json" in str(excinfo.value)


def test_json_store_persisted_layout(tmp_path, faq_records):
    """Test records are written as one array using the storage field names."""
    path = tmp_path / "kb" / "faq-embeddings.json"
    JsonFileRecordStore(str(path)).put_records(faq_records)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert isinstance(data, list)
    assert len(data) == len(faq_records)
    first = data[0]
    assert set(first) == {"id", "text", "embedding", "metadata"}
    assert set(first["metadata"]) == {"source", "category", "chunkIndex", "totalChunks", "lastUpdated"}
    assert first["id"] == "Security.md_chunk_0"


def test_json_store_reads_back(tmp_path, faq_records):
    """Test a written collection is read back unchanged."""
    store = JsonFileRecordStore(str(tmp_path / "faq-embeddings.json"))
    store.put_records(faq_records)
    assert store.get_records() == faq_records


def test_json_store_replaces_whole_collection(tmp_path, faq_records):
    """Test put_records replaces rather than appends, leaving no temp files."""
    store = JsonFileRecordStore(str(tmp_path / "faq-embeddings.json"))
    store.put_records(faq_records)
    store.put_records(faq_records[:1])

    assert [record.id for record in store.get_records()] == [faq_records[0].id]
    assert sorted(p.name for p in tmp_path.iterdir()) == ["faq-embeddings.json"]


def test_json_store_reads_hand_written_collection(tmp_path):
    """Test a collection produced by another writer in the same layout."""
    path = tmp_path / "faq-embeddings.json"
    path.write_text(
        json.dumps(
            [
                {
                    "id": "Cards.md_chunk_0",
                    "text": "Freeze a lost card from the Cards screen.",
                    "embedding": [0.1, 0.2, 0.3],
                    "metadata": {
                        "source": "Cards.md",
                        "category": "Cards",
                        "chunkIndex": 0,
                        "totalChunks": 1,
                    },
                }
            ]
        ),
        encoding="utf-8",
    )

    records = JsonFileRecordStore(str(path)).get_records()
    assert records[0].metadata.chunk_index == 0
    assert records[0].metadata.total_chunks == 1
    assert records[0].metadata.last_updated is None


def test_parse_records_invalid_json():
    """Test unparsable payloads raise StoreError."""
    with pytest.raises(StoreError):
        parse_records("{not json")


def test_parse_records_not_a_list():
    """Test a JSON object instead of an array is rejected."""
    with pytest.raises(StoreError):
        parse_records('{"id": "x"}')


def test_parse_records_invalid_record():
    """Test a record missing fields is rejected."""
    with pytest.raises(StoreError):
        parse_records('[{"id": "x", "text": "y"}]')


def test_in_memory_store_uninitialized_until_put(faq_records):
    """Test the in-memory store mirrors the missing-object behaviour."""
    store = InMemoryRecordStore()
    with pytest.raises(UninitializedKnowledgeBase):
        store.get_records()

    store.put_records(faq_records)
    assert store.get_records() == faq_records
    assert store.reads == 2
