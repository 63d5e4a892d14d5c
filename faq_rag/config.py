"""Runtime settings read from environment variables."""

from __future__ import annotations

import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field


class Settings(BaseModel):
    """FAQ bot configuration; every field can be overridden from the environment."""
    faq_dir: str = "./faq"
    store_path: str = "./kb/faq-embeddings.json"
    embed_model: str = "mxbai-embed-large"
    chat_model: str = "llama3.1"
    ollama_base_url: str = "http://localhost:11434"
    chunk_size: int = Field(default=1000, gt=0)
    chunk_overlap: int = Field(default=200, ge=0)
    cache_ttl: float = Field(default=3600.0, gt=0)
    top_k: int = Field(default=3, gt=0)
    max_tokens: int = Field(default=500, gt=0)
    temperature: float = Field(default=0.7, ge=0)
    ingest_workers: int = Field(default=1, gt=0)


ENV_VARS = {
    "faq_dir": "FAQ_DIR",
    "store_path": "EMBEDDINGS_FILE",
    "embed_model": "EMBED_MODEL",
    "chat_model": "CHAT_MODEL",
    "ollama_base_url": "OLLAMA_BASE_URL",
    "chunk_size": "CHUNK_SIZE",
    "chunk_overlap": "CHUNK_OVERLAP",
    "cache_ttl": "CACHE_TTL",
    "top_k": "TOP_K",
    "max_tokens": "MAX_TOKENS",
    "temperature": "TEMPERATURE",
    "ingest_workers": "INGEST_WORKERS",
}


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from environment variables.

    Raises:
        pydantic.ValidationError: If a value cannot be parsed or is out of range
    """
    environ = os.environ if environ is None else environ
    overrides = {
        field_name: environ[var]
        for field_name, var in ENV_VARS.items()
        if environ.get(var)
    }
    return Settings(**overrides)
