"""Embedding and generation providers.

The retrieval core only talks to the two abstract base classes below. The
concrete providers adapt langchain clients (Ollama by default) and turn any
client failure into ProviderUnavailable.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import List

from .errors import ProviderUnavailable

logger = logging.getLogger(__name__)


class EmbeddingProvider(ABC):
    """Converts text to a fixed-length vector."""

    name = "embedding"

    @abstractmethod
    def embed(self, text: str) -> List[float]:  # pragma: no cover - interface
        """Return the embedding of ``text``.

        Raises:
            ProviderUnavailable: If the embedding backend fails.
        """
        raise NotImplementedError


class GenerationProvider(ABC):
    """Produces answer text from a prompt."""

    name = "generation"

    @abstractmethod
    def complete(self, prompt: str, max_tokens: int, temperature: float) -> str:  # pragma: no cover - interface
        """Return the model's completion of ``prompt``.

        Raises:
            ProviderUnavailable: If the generation backend fails.
        """
        raise NotImplementedError


class LangChainEmbeddingProvider(EmbeddingProvider):
    """Adapts a langchain ``Embeddings`` instance (e.g. OllamaEmbeddings)."""

    def __init__(self, embeddings, name: str = "langchain"):
        self.embeddings = embeddings
        self.name = name

    def embed(self, text: str) -> List[float]:
        try:
            vector = self.embeddings.embed_query(text.strip())
        except Exception as exc:
            raise ProviderUnavailable(
                f"Embedding request failed: {exc}", provider=self.name, stage="embedding"
            ) from exc

        if not vector:
            raise ProviderUnavailable("Embedding provider returned an empty vector", provider=self.name, stage="embedding")
        return [float(value) for value in vector]


class OllamaEmbeddingProvider(LangChainEmbeddingProvider):
    """Embeddings served by a local Ollama instance."""

    def __init__(self, model: str, base_url: str = "http://localhost:11434"):
        from langchain_community.embeddings import OllamaEmbeddings

        super().__init__(OllamaEmbeddings(model=model, base_url=base_url), name=f"ollama:{model}")
        self.model = model


class OllamaGenerationProvider(GenerationProvider):
    """Completions from a local Ollama model via langchain."""

    def __init__(self, model: str, base_url: str = "http://localhost:11434", llm=None):
        if llm is None:
            from langchain_community.llms import Ollama

            llm = Ollama(model=model, base_url=base_url)
        self.llm = llm
        self.model = model
        self.name = f"ollama:{model}"

    def complete(self, prompt: str, max_tokens: int, temperature: float) -> str:
        try:
            # Ollama option names; forwarded per request
            text = self.llm.invoke(prompt, temperature=temperature, num_predict=max_tokens)
        except Exception as exc:
            raise ProviderUnavailable(
                f"Generation request failed: {exc}", provider=self.name, stage="generation"
            ) from exc

        if not isinstance(text, str):
            # Chat models return a message object
            text = getattr(text, "content", None)
        if not text:
            raise ProviderUnavailable("Generation provider returned no text", provider=self.name, stage="generation")
        logger.debug("Generated %d characters with %s", len(text), self.name)
        return text
