"""Answer FAQ questions with retrieval-augmented generation."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from .config import Settings
from .context import DEFAULT_ASSISTANT_DESCRIPTION, build_context, build_prompt
from .errors import FaqRagError, MalformedInput, ProviderUnavailable
from .providers import (
    EmbeddingProvider,
    GenerationProvider,
    OllamaEmbeddingProvider,
    OllamaGenerationProvider,
)
from .records import JsonFileRecordStore
from .retriever import DEFAULT_TOP_K, retrieve
from .schemas import Answer
from .store import VectorStore

logger = logging.getLogger(__name__)

_PROVIDER_STAGES = ("embedding", "generation")


@contextmanager
def _stage(name: str, provider: Optional[str] = None) -> Iterator[None]:
    """
    Tag FAQ errors raised inside the block with the pipeline stage.

    Other exceptions escaping a provider stage are re-raised as
    ProviderUnavailable.
    """
    try:
        yield
    except FaqRagError as exc:
        if exc.stage is None:
            exc.stage = name
        logger.error("FAQ pipeline failed at %s: %s", exc.stage, exc)
        raise
    except Exception as exc:
        if name not in _PROVIDER_STAGES:
            raise
        logger.error("FAQ pipeline failed at %s: %s", name, exc)
        raise ProviderUnavailable(str(exc) or type(exc).__name__, provider=provider, stage=name) from exc


class FaqBot:
    """
    Composes embedding, retrieval and generation into ``answer(question)``.

    Example:
        >>> bot = FaqBot.from_settings(load_settings())
        >>> bot.answer("How do I reset my password?").answer
    """

    def __init__(
        self,
        embedder: EmbeddingProvider,
        vector_store: VectorStore,
        generator: GenerationProvider,
        top_k: int = DEFAULT_TOP_K,
        max_tokens: int = 500,
        temperature: float = 0.7,
        min_similarity: Optional[float] = None,
        assistant_description: str = DEFAULT_ASSISTANT_DESCRIPTION,
    ):
        self.embedder = embedder
        self.vector_store = vector_store
        self.generator = generator
        self.top_k = top_k
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.min_similarity = min_similarity
        self.assistant_description = assistant_description

    @classmethod
    def from_settings(cls, settings: Settings) -> "FaqBot":
        """Wire Ollama providers and a JSON file store from settings."""
        vector_store = VectorStore(JsonFileRecordStore(settings.store_path), ttl=settings.cache_ttl)
        return cls(
            embedder=OllamaEmbeddingProvider(settings.embed_model, base_url=settings.ollama_base_url),
            vector_store=vector_store,
            generator=OllamaGenerationProvider(settings.chat_model, base_url=settings.ollama_base_url),
            top_k=settings.top_k,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
        )

    def answer(self, question: Optional[str]) -> Answer:
        """
        Answer a question from the FAQ knowledge base.

        Raises:
            MalformedInput: If the question is empty
            UninitializedKnowledgeBase: If ingestion has not been run
            ProviderUnavailable: If embedding or generation fails
            DimensionMismatch: If the query and stored vectors disagree
        """
        if not isinstance(question, str) or not question.strip():
            raise MalformedInput()
        question = question.strip()

        with _stage("store_load"):
            snapshot = self.vector_store.load()

        with _stage("embedding", provider=getattr(self.embedder, "name", None)):
            query_vector = self.embedder.embed(question)

        with _stage("retrieval"):
            results = retrieve(query_vector, snapshot, self.top_k)

        if self.min_similarity is not None:
            results = [result for result in results if result.similarity >= self.min_similarity]

        context = build_context(results)
        prompt = build_prompt(question, context, assistant_description=self.assistant_description)

        with _stage("generation", provider=getattr(self.generator, "name", None)):
            text = self.generator.complete(prompt, max_tokens=self.max_tokens, temperature=self.temperature)

        logger.info("Answered question using %d sources", len(results))
        return Answer(answer=text.strip())

    def refresh(self) -> None:
        """Drop the cached snapshot; the next question reloads the store."""
        self.vector_store.invalidate()
