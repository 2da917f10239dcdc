# src/recall/stores/base.py
"""Abstract base classes for storage."""

from abc import ABC, abstractmethod

from recall.models import Chunk, EmbeddingRecord, RetrievalResult, SourceType


class VectorStore(ABC):
    """Abstract base class for owner-scoped embedding storage.

    Every read and write is partitioned by ``owner_scope``: records written
    under one scope are never considered by a query issued under another.
    ``put`` only ever inserts, so concurrent ingests of the same source yield
    duplicate rows rather than corrupted ones.
    """

    dimension: int

    @abstractmethod
    def put(self, owner_scope: str, chunk: Chunk, vector: list[float]) -> EmbeddingRecord:
        """Insert a new record.

        Raises:
            InvalidScope: If owner_scope is empty
            InvalidDimension: If the vector length differs from the store's
                dimension, or the vector is zero / non-finite
        """
        ...

    @abstractmethod
    def query(
        self,
        owner_scope: str,
        query_vector: list[float],
        k: int,
        min_similarity: float = -1.0,
    ) -> list[RetrievalResult]:
        """Return up to k records in scope with similarity >= min_similarity.

        Ordered by similarity descending; ties go to the earlier record.
        """
        ...

    @abstractmethod
    def delete_by_source(self, owner_scope: str, source_type: SourceType, source_id: str) -> int:
        """Delete every record of one source. Returns the number removed (0 if none)."""
        ...

    @abstractmethod
    def get_by_source(
        self, owner_scope: str, source_type: SourceType, source_id: str
    ) -> list[EmbeddingRecord]:
        """Get all records of one source, ordered by ordinal."""
        ...

    @abstractmethod
    def list_sources(self, owner_scope: str) -> list[tuple[SourceType, str]]:
        """List distinct (source_type, source_id) pairs stored under a scope."""
        ...

    @abstractmethod
    def count(self, owner_scope: str | None = None) -> int:
        """Count records, optionally restricted to one scope."""
        ...

    def close(self) -> None:  # noqa: B027
        """Release resources. No-op unless the backend holds handles."""
