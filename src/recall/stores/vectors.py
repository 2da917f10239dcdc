# src/recall/stores/vectors.py
"""Vector validation and cosine ranking shared by VectorStore implementations."""

from collections.abc import Sequence
from datetime import datetime
from typing import NamedTuple

import numpy as np

from recall.exceptions import InvalidDimension, InvalidScope


class Candidate(NamedTuple):
    """A stored row considered for ranking."""

    record_id: str
    created_at: datetime
    seq: int  # Insertion order, breaks created_at ties


def validate_scope(owner_scope: str) -> str:
    """Reject empty or blank owner scopes."""
    if not owner_scope or not owner_scope.strip():
        raise InvalidScope("owner_scope must be a non-empty string")
    return owner_scope


def validate_vector(vector: Sequence[float], dimension: int) -> np.ndarray:
    """Check dimension, finiteness and magnitude; return a float64 array.

    Raises:
        InvalidDimension: If the vector has the wrong length, contains NaN or
            infinity, or is all zeros (cosine similarity is undefined).
    """
    if len(vector) != dimension:
        raise InvalidDimension(f"Expected vector of dimension {dimension}, got {len(vector)}")
    arr = np.asarray(vector, dtype=np.float64)
    if not np.all(np.isfinite(arr)):
        raise InvalidDimension("Vector contains non-finite values")
    if not np.any(arr):
        raise InvalidDimension("Zero vector has no direction; cosine similarity is undefined")
    return arr


def validate_query(k: int, min_similarity: float) -> None:
    """Check query parameters."""
    if k <= 0:
        raise ValueError(f"k must be positive, got {k}")
    if not -1.0 <= min_similarity <= 1.0:
        raise ValueError(f"min_similarity must be within [-1, 1], got {min_similarity}")


def cosine_similarities(matrix: np.ndarray, query: np.ndarray) -> np.ndarray:
    """Cosine similarity of each row of ``matrix`` against ``query``.

    Formula: cos(θ) = (a · b) / (||a|| * ||b||). Results are clipped to
    [-1, 1] to absorb floating point drift.
    """
    if matrix.size == 0:
        return np.empty(0, dtype=np.float64)
    norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
    sims = (matrix @ query) / norms
    return np.clip(sims, -1.0, 1.0)


def rank(
    candidates: list[Candidate],
    similarities: np.ndarray,
    k: int,
    min_similarity: float,
) -> list[tuple[Candidate, float]]:
    """Select the top-k candidates at or above min_similarity.

    Ordering is similarity descending, then created_at ascending, then
    insertion order, so identical store states always rank identically.
    """
    scored = [
        (candidate, float(sim))
        for candidate, sim in zip(candidates, similarities, strict=True)
        if sim >= min_similarity
    ]
    scored.sort(key=lambda item: (-item[1], item[0].created_at, item[0].seq))
    return scored[:k]
