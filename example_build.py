#!/usr/bin/env python3
"""Example: Build the FAQ knowledge base from markdown documents."""

import os
import sys

from faq_rag import JsonFileRecordStore, ingest, kb_status, load_settings
from faq_rag.providers import OllamaEmbeddingProvider


def main():
    settings = load_settings()
    categories = [name.strip() for name in os.getenv("FAQ_CATEGORIES", "").split(",") if name.strip()] or None

    # Validate source directory
    if not os.path.isdir(settings.faq_dir):
        print(f"Error: FAQ directory not found: {settings.faq_dir}")
        print("Set FAQ_DIR environment variable or create ./faq directory")
        sys.exit(1)

    print("=" * 60)
    print("FAQ Knowledge Base Builder")
    print("=" * 60)
    print(f"FAQ directory:    {settings.faq_dir}")
    print(f"Embeddings file:  {settings.store_path}")
    print(f"Embedding model:  {settings.embed_model}")
    print(f"Ollama base URL:  {settings.ollama_base_url}")
    print(f"Max chunk length: {settings.chunk_size}")
    print(f"Chunk overlap:    {settings.chunk_overlap}")
    print(f"Workers:          {settings.ingest_workers}")
    print(f"Categories:       {', '.join(categories) if categories else 'all'}")
    print("=" * 60)
    print()

    embedder = OllamaEmbeddingProvider(settings.embed_model, base_url=settings.ollama_base_url)
    store = JsonFileRecordStore(settings.store_path)

    try:
        report = ingest(
            source_dir=settings.faq_dir,
            embedder=embedder,
            store=store,
            embed_model=settings.embed_model,
            chunk_size=settings.chunk_size,
            overlap=settings.chunk_overlap,
            workers=settings.ingest_workers,
            categories=categories,
        )

        print()
        print("=" * 60)
        print("Build completed successfully!")
        print("=" * 60)
        print(f"Document count: {report.doc_count}")
        print(f"Chunk count:    {report.chunk_count}")
        print(f"Record count:   {report.record_count}")
        print(f"Failed files:   {len(report.failed_files)}")
        if report.failed_chunks:
            print(f"Skipped chunks: {len(report.failed_chunks)}")
            for chunk in report.failed_chunks[:10]:
                print(f"  - {chunk}")
            if len(report.failed_chunks) > 10:
                print(f"  ... and {len(report.failed_chunks) - 10} more")
        print()
        status = kb_status(settings.faq_dir, store)
        print(f"Source documents by category ({status.embeddings_status}):")
        for category, count in sorted(status.categories.items()):
            print(f"  {category}: {count} document(s)")
        print()
        print(f"Knowledge base available at: {settings.store_path}")
        print("=" * 60)

    except Exception as e:
        print(f"\nError during ingestion: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
