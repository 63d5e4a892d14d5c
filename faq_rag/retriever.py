"""Top-K cosine similarity retrieval over a loaded snapshot."""

from __future__ import annotations

import logging
from typing import List, Sequence

import numpy as np

from .errors import DimensionMismatch
from .schemas import RetrievalResult, Snapshot

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 3


def cosine_similarity(vec_a: Sequence[float], vec_b: Sequence[float]) -> float:
    """
    Compute cosine similarity between two vectors.

    Returns 0.0 when either vector has zero magnitude.

    Raises:
        DimensionMismatch: If the vectors have different lengths
    """
    a = np.asarray(vec_a, dtype=np.float64)
    b = np.asarray(vec_b, dtype=np.float64)
    if a.shape != b.shape:
        raise DimensionMismatch(len(a), len(b), stage="retrieval")

    denominator = np.linalg.norm(a) * np.linalg.norm(b)
    if denominator == 0:
        return 0.0
    return float(np.dot(a, b) / denominator)


def _score_all(query: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    """Cosine similarity of query against every row; zero-norm rows score 0."""
    query_norm = np.linalg.norm(query)
    row_norms = np.linalg.norm(matrix, axis=1)
    denominators = row_norms * query_norm
    dots = matrix @ query
    scores = np.zeros(len(matrix), dtype=np.float64)
    np.divide(dots, denominators, out=scores, where=denominators != 0)
    return scores


def retrieve(query_vector: Sequence[float], snapshot: Snapshot, k: int = DEFAULT_TOP_K) -> List[RetrievalResult]:
    """
    Return the ``k`` records most similar to ``query_vector``.

    Every record is scored (linear scan). Results are ordered by similarity,
    highest first; equal scores keep snapshot order.

    Raises:
        DimensionMismatch: If the query length differs from the stored vectors
    """
    if k <= 0 or not snapshot.records:
        return []

    query = np.asarray(query_vector, dtype=np.float64)
    if query.ndim != 1 or len(query) != snapshot.dimension:
        raise DimensionMismatch(snapshot.dimension, query.size, stage="retrieval")

    scores = _score_all(query, snapshot.matrix)
    order = np.argsort(-scores, kind="stable")[:k]

    results = [
        RetrievalResult(record=snapshot.records[idx], similarity=float(scores[idx]))
        for idx in order
    ]
    logger.debug(
        "Top %d of %d similarities: %s",
        len(results),
        len(snapshot),
        [f"{result.similarity:.3f}" for result in results],
    )
    return results
