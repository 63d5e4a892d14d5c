"""Build the embedded record collection from FAQ markdown documents."""

from __future__ import annotations

import os
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence, Tuple

from tqdm import tqdm

from .chunker import DEFAULT_CHUNK_OVERLAP, DEFAULT_CHUNK_SIZE, chunk_document
from .errors import ProviderUnavailable, UninitializedKnowledgeBase
from .providers import EmbeddingProvider
from .records import DurableStore
from .schemas import Chunk, EmbeddedRecord, IngestReport, KnowledgeBaseStatus, Snapshot
from .store import VectorStore
from .utils import category_from_path, safe_relpath, shorten, utc_timestamp


DOC_EXTENSIONS = {".md", ".markdown"}


def scan_documents(source_dir: str) -> Tuple[List[str], List[Dict[str, str]]]:
    """
    Scan directory for markdown documents.

    Returns:
        (included_files, skipped_files_with_reasons)
    """
    included: List[str] = []
    skipped: List[Dict[str, str]] = []

    for root, _, files in os.walk(source_dir):
        for filename in sorted(files):
            path = os.path.join(root, filename)
            ext = os.path.splitext(filename)[1].lower()

            if ext not in DOC_EXTENSIONS:
                skipped.append({"path": path, "reason": "unsupported_extension"})
                continue

            try:
                if os.path.getsize(path) == 0:
                    skipped.append({"path": path, "reason": "empty_file"})
                    continue
            except OSError:
                skipped.append({"path": path, "reason": "stat_failed"})
                continue

            included.append(path)

    included.sort()
    return included, skipped


def filter_categories(
    paths: Sequence[str],
    source_dir: str,
    categories: Sequence[str],
) -> Tuple[List[str], List[Dict[str, str]]]:
    """Keep only documents whose category label is in ``categories``."""
    wanted = set(categories)
    kept: List[str] = []
    skipped: List[Dict[str, str]] = []
    for path in paths:
        if category_from_path(path, source_dir) in wanted:
            kept.append(path)
        else:
            skipped.append({"path": path, "reason": "category_filtered"})
    return kept, skipped


def _embed_chunk(embedder: EmbeddingProvider, chunk: Chunk) -> Tuple[Chunk, Optional[List[float]], Optional[str]]:
    try:
        return chunk, embedder.embed(chunk.text), None
    except ProviderUnavailable as exc:
        return chunk, None, str(exc)


def embed_chunks(
    chunks: Sequence[Chunk],
    embedder: EmbeddingProvider,
    last_updated: str,
    workers: int = 1,
) -> Tuple[List[EmbeddedRecord], List[Dict[str, str]]]:
    """
    Embed each chunk once; failed chunks are skipped and reported.

    With ``workers > 1`` embeddings are requested from a bounded thread pool.
    Records always come back in chunk order.
    """
    records: List[EmbeddedRecord] = []
    failed: List[Dict[str, str]] = []

    with tqdm(total=len(chunks), desc="Embedding chunks") as progress:
        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                outcomes = executor.map(lambda chunk: _embed_chunk(embedder, chunk), chunks)
                for outcome in outcomes:
                    _collect(outcome, last_updated, records, failed)
                    progress.update(1)
        else:
            for chunk in chunks:
                _collect(_embed_chunk(embedder, chunk), last_updated, records, failed)
                progress.update(1)

    return records, failed


def _collect(outcome, last_updated: str, records: List[EmbeddedRecord], failed: List[Dict[str, str]]) -> None:
    chunk, vector, reason = outcome
    if vector is None:
        failed.append({"chunk": f"{chunk.source_id}#{chunk.index}", "reason": reason or "embedding_failed"})
        tqdm.write(f"[WARN] embedding failed; skipped chunk: {chunk.source_id}#{chunk.index} ({reason})")
        return
    records.append(EmbeddedRecord.from_chunk(chunk, vector, last_updated=last_updated))


def ingest(
    source_dir: str,
    embedder: EmbeddingProvider,
    store: DurableStore,
    embed_model: str = "",
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
    workers: int = 1,
    categories: Optional[Sequence[str]] = None,
    vector_store: Optional[VectorStore] = None,
) -> IngestReport:
    """
    Chunk, embed and store every FAQ document under ``source_dir``.

    The stored collection is replaced as a whole. When ``vector_store`` is
    given its cache is invalidated so the next query sees the new records.

    Args:
        source_dir: Directory containing markdown FAQ documents
        embedder: Embedding provider, called once per chunk
        store: Durable store receiving the full collection
        embed_model: Name of embedding model (for report metadata)
        chunk_size: Maximum chunk length
        overlap: Characters of overlap between chunks
        workers: Embedding requests in flight at once
        categories: Only ingest documents with these category labels
        vector_store: Serving cache to invalidate after the write

    Returns:
        IngestReport with run metadata

    Raises:
        FileNotFoundError: If source_dir does not exist
        RuntimeError: If no chunks or no embeddings were produced
        DimensionMismatch: If the embedder returned vectors of different lengths
    """
    if not os.path.isdir(source_dir):
        raise FileNotFoundError(f"FAQ directory not found: {source_dir}")

    start_time = time.perf_counter()
    included, skipped = scan_documents(source_dir)
    if categories is not None:
        included, filtered = filter_categories(included, source_dir, categories)
        skipped.extend(filtered)
    print(f"Scan summary: included={len(included)}, skipped={len(skipped)}")

    failed_files: List[str] = []
    chunks: List[Chunk] = []

    for path in tqdm(included, desc="Chunking documents"):
        source_id = safe_relpath(path, source_dir)
        try:
            with open(path, "r", encoding="utf-8") as handle:
                content = handle.read()
        except (OSError, UnicodeDecodeError) as exc:
            failed_files.append(source_id)
            tqdm.write(f"[WARN] read failed: {source_id} ({exc})")
            continue

        doc_chunks = chunk_document(
            content,
            source_id=source_id,
            category=category_from_path(path, source_dir),
            max_size=chunk_size,
            overlap=overlap,
        )
        if not doc_chunks:
            tqdm.write(f"[WARN] no chunks: {source_id} ({shorten(content.strip())!r})")
        chunks.extend(doc_chunks)

    if not chunks:
        raise RuntimeError("No chunks generated; check the FAQ directory.")

    build_time = utc_timestamp()
    records, failed_chunks = embed_chunks(chunks, embedder, last_updated=build_time, workers=workers)
    if failed_chunks:
        tqdm.write(f"[WARN] embedding failures: {len(failed_chunks)} chunk(s) skipped.")
    if not records:
        raise RuntimeError("Embedding returned no vectors.")

    # Nothing is written unless the collection would load
    Snapshot.build(records, loaded_at=0.0)
    store.put_records(records)
    if vector_store is not None:
        vector_store.invalidate()

    elapsed = time.perf_counter() - start_time
    print(f"Ingest summary: documents={len(included)}, chunks={len(chunks)}, records={len(records)}, duration={elapsed:.1f}s")

    return IngestReport(
        build_time=build_time,
        source_dir=source_dir,
        embedding_model=embed_model,
        doc_count=len(included),
        chunk_count=len(chunks),
        record_count=len(records),
        failed_files=failed_files,
        failed_chunks=[item["chunk"] for item in failed_chunks],
    )


def kb_status(source_dir: str, store: DurableStore) -> KnowledgeBaseStatus:
    """
    Report source documents per category and whether embeddings exist.

    A missing or empty record collection is reported as ``not_generated``.
    Other store errors propagate.
    """
    included, _ = scan_documents(source_dir)
    categories: Dict[str, int] = {}
    for path in included:
        category = category_from_path(path, source_dir)
        categories[category] = categories.get(category, 0) + 1

    try:
        records = store.get_records()
    except UninitializedKnowledgeBase:
        records = []

    stamps = [record.metadata.last_updated for record in records if record.metadata.last_updated]
    return KnowledgeBaseStatus(
        source_dir=source_dir,
        total_files=len(included),
        categories=categories,
        embeddings_status="ready" if records else "not_generated",
        total_records=len(records),
        last_updated=max(stamps) if stamps else None,
    )
