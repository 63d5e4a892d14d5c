"""In-memory vector store with time-based cache invalidation."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional, Tuple

from .errors import FaqRagError, StoreError, UninitializedKnowledgeBase
from .records import DurableStore
from .schemas import Snapshot

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL = 3600.0


class VectorStore:
    """
    Caches the record collection of a durable store as a Snapshot.

    ``load()`` serves the cached snapshot while it is younger than ``ttl``
    seconds and refetches otherwise. ``invalidate()`` makes the next load
    refetch regardless of age. The cache is an optimization only: a cold
    instance always works.

    Example:
        >>> store = VectorStore(JsonFileRecordStore("kb/faq-embeddings.json"))
        >>> snapshot = store.load()
    """

    def __init__(
        self,
        durable_store: DurableStore,
        ttl: float = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.durable_store = durable_store
        self.ttl = ttl
        self.clock = clock
        # (snapshot, generation it was loaded under), swapped as one reference
        self._cached: Optional[Tuple[Snapshot, int]] = None
        self._generation = 0
        self._reload_lock = threading.Lock()

    @property
    def snapshot(self) -> Optional[Snapshot]:
        """Currently cached snapshot, if any."""
        cached = self._cached
        return cached[0] if cached else None

    def _fresh_snapshot(self) -> Optional[Snapshot]:
        cached = self._cached
        if cached is None:
            return None
        snapshot, generation = cached
        if generation != self._generation:
            return None
        if self.clock() - snapshot.loaded_at >= self.ttl:
            return None
        return snapshot

    def load(self, force: bool = False) -> Snapshot:
        """
        Return a fully loaded snapshot, refetching when stale or forced.

        Concurrent callers that find the cache stale wait for a single
        refetch instead of each reading the durable store.

        Raises:
            UninitializedKnowledgeBase: If the durable store has no records
            StoreError: If the collection cannot be read or parsed
            DimensionMismatch: If stored vectors disagree in length
        """
        if not force:
            snapshot = self._fresh_snapshot()
            if snapshot is not None:
                logger.debug("Using cached snapshot (%d records)", len(snapshot))
                return snapshot

        with self._reload_lock:
            if not force:
                # Another caller may have refreshed while we waited
                snapshot = self._fresh_snapshot()
                if snapshot is not None:
                    return snapshot
            return self._refetch()

    def _refetch(self) -> Snapshot:
        generation = self._generation
        logger.info("Loading record collection from durable store")
        try:
            records = self.durable_store.get_records()
            if not records:
                raise UninitializedKnowledgeBase("empty record collection")
            snapshot = Snapshot.build(records, loaded_at=self.clock())
        except FaqRagError:
            raise
        except Exception as exc:
            raise StoreError(f"Failed to load record collection: {exc}") from exc

        self._cached = (snapshot, generation)
        logger.info("Loaded %d records (dimension=%s)", len(snapshot), snapshot.dimension)
        return snapshot

    def invalidate(self) -> None:
        """Force the next load to refetch. Safe to call with nothing cached."""
        self._generation += 1
        logger.info("Vector store cache invalidated")
