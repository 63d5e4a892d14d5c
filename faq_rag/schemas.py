"""Data schemas for the FAQ knowledge base."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, Sequence, Set, Tuple

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from .errors import CorruptKnowledgeBase, DimensionMismatch
from .utils import chunk_record_id


class Chunk(BaseModel):
    """A contiguous span of one source document."""
    model_config = ConfigDict(frozen=True)

    text: str
    source_id: str
    category: str
    index: int
    total_in_document: int


class RecordMetadata(BaseModel):
    """Per-record metadata, serialised with the camelCase storage names."""
    model_config = ConfigDict(populate_by_name=True)

    source: str
    category: str
    chunk_index: int = Field(alias="chunkIndex")
    total_chunks: int = Field(alias="totalChunks")
    last_updated: Optional[str] = Field(default=None, alias="lastUpdated")


class EmbeddedRecord(BaseModel):
    """A chunk together with its embedding vector."""
    id: str
    text: str
    embedding: List[float]
    metadata: RecordMetadata

    @classmethod
    def from_chunk(cls, chunk: Chunk, embedding: Sequence[float], last_updated: Optional[str] = None) -> "EmbeddedRecord":
        return cls(
            id=chunk_record_id(chunk.source_id, chunk.index),
            text=chunk.text,
            embedding=list(embedding),
            metadata=RecordMetadata(
                source=chunk.source_id,
                category=chunk.category,
                chunk_index=chunk.index,
                total_chunks=chunk.total_in_document,
                last_updated=last_updated,
            ),
        )

    def to_storage(self) -> dict:
        """Dump using the persisted field names."""
        return self.model_dump(by_alias=True)


class RetrievalResult(BaseModel):
    """One retrieved record and its cosine similarity to the query."""
    record: EmbeddedRecord
    similarity: float


class Answer(BaseModel):
    """Answer returned to the request-handling layer."""
    answer: str


class IngestReport(BaseModel):
    """Ingestion run summary with metadata."""
    build_time: str
    source_dir: str
    embedding_model: str
    doc_count: int
    chunk_count: int
    record_count: int
    failed_files: List[str] = Field(default_factory=list)
    failed_chunks: List[str] = Field(default_factory=list)


class KnowledgeBaseStatus(BaseModel):
    """Source document counts and embedding state of a knowledge base."""
    source_dir: str
    total_files: int
    categories: Dict[str, int] = Field(default_factory=dict)
    embeddings_status: Literal["ready", "not_generated"]
    total_records: int = 0
    last_updated: Optional[str] = None


@dataclass(frozen=True)
class Snapshot:
    """In-memory copy of the record collection used for retrieval."""
    records: Tuple[EmbeddedRecord, ...]
    loaded_at: float
    dimension: Optional[int] = None
    matrix: np.ndarray = field(default=None, repr=False, compare=False)

    @classmethod
    def build(cls, records: Sequence[EmbeddedRecord], loaded_at: float) -> "Snapshot":
        """
        Validate a record collection and stack its vectors.

        Raises:
            DimensionMismatch: If the vectors do not all share one length
            CorruptKnowledgeBase: If two records share an id
        """
        records = tuple(records)
        seen: Set[str] = set()
        dimension: Optional[int] = None

        for record in records:
            if record.id in seen:
                raise CorruptKnowledgeBase(f"Duplicate record id in collection: {record.id}")
            seen.add(record.id)
            if dimension is None:
                dimension = len(record.embedding)
            elif len(record.embedding) != dimension:
                raise DimensionMismatch(dimension, len(record.embedding), stage="store_load")

        if records:
            matrix = np.array([record.embedding for record in records], dtype=np.float64)
        else:
            matrix = np.zeros((0, 0), dtype=np.float64)

        return cls(records=records, loaded_at=loaded_at, dimension=dimension, matrix=matrix)

    def __len__(self) -> int:
        return len(self.records)
