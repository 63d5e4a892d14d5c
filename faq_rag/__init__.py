"""FAQ RAG - Retrieval-augmented FAQ answering."""

from .bot import FaqBot
from .chunker import chunk_document, chunk_text
from .config import Settings, load_settings
from .context import build_context, build_prompt
from .errors import (
    DimensionMismatch,
    FaqRagError,
    MalformedInput,
    ProviderUnavailable,
    StoreError,
    UninitializedKnowledgeBase,
)
from .ingest import ingest, kb_status
from .records import DurableStore, InMemoryRecordStore, JsonFileRecordStore
from .retriever import cosine_similarity, retrieve
from .schemas import (
    Answer,
    Chunk,
    EmbeddedRecord,
    IngestReport,
    KnowledgeBaseStatus,
    RetrievalResult,
    Snapshot,
)
from .store import VectorStore

__version__ = "0.1.0"

__all__ = [
    "FaqBot",
    "chunk_document",
    "chunk_text",
    "Settings",
    "load_settings",
    "build_context",
    "build_prompt",
    "DimensionMismatch",
    "FaqRagError",
    "MalformedInput",
    "ProviderUnavailable",
    "StoreError",
    "UninitializedKnowledgeBase",
    "ingest",
    "kb_status",
    "DurableStore",
    "InMemoryRecordStore",
    "JsonFileRecordStore",
    "cosine_similarity",
    "retrieve",
    "Answer",
    "Chunk",
    "EmbeddedRecord",
    "IngestReport",
    "KnowledgeBaseStatus",
    "RetrievalResult",
    "Snapshot",
    "VectorStore",
]
