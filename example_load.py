#!/usr/bin/env python3
"""Example: Ask the FAQ bot questions interactively."""

import logging
import sys

from faq_rag import FaqBot, FaqRagError, UninitializedKnowledgeBase, load_settings


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    settings = load_settings()

    print("=" * 60)
    print("FAQ Bot")
    print("=" * 60)
    print(f"Embeddings file: {settings.store_path}")
    print(f"Embedding model: {settings.embed_model}")
    print(f"Chat model:      {settings.chat_model}")
    print(f"Ollama base URL: {settings.ollama_base_url}")
    print()

    bot = FaqBot.from_settings(settings)

    # Fail early if ingestion has not been run
    try:
        snapshot = bot.vector_store.load()
    except UninitializedKnowledgeBase as e:
        print(f"Error: {e}")
        print("Run example_build.py first or set EMBEDDINGS_FILE environment variable")
        sys.exit(1)

    print(f"✓ Loaded {len(snapshot)} records ({snapshot.dimension} dimensions)")
    print()
    print("Enter questions (or 'quit' to exit, 'reload' to refresh the cache)")
    print()

    while True:
        question = input("Question: ").strip()
        if not question or question.lower() in ("quit", "exit", "q"):
            break
        if question.lower() == "reload":
            bot.refresh()
            print("Cache invalidated.\n")
            continue

        try:
            result = bot.answer(question)
            print()
            print(result.answer)
            print()
        except FaqRagError as e:
            print(f"Error ({e.stage}): {e}", file=sys.stderr)
            print()

    print("Goodbye!")


if __name__ == "__main__":
    main()
