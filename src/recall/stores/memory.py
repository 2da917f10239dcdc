# src/recall/stores/memory.py
"""In-memory vector store implementation."""

import itertools
import threading

import numpy as np

from recall.models import Chunk, EmbeddingRecord, RetrievalResult, SourceType
from recall.stores.base import VectorStore
from recall.stores.vectors import (
    Candidate,
    cosine_similarities,
    rank,
    validate_query,
    validate_scope,
    validate_vector,
)


class InMemoryVectorStore(VectorStore):
    """Process-local vector store. Useful for tests and short-lived sessions."""

    def __init__(self, dimension: int) -> None:
        if dimension <= 0:
            raise ValueError(f"dimension must be positive, got {dimension}")
        self.dimension = dimension
        self._lock = threading.Lock()
        self._seq = itertools.count()
        # record id -> (seq, record, vector)
        self._rows: dict[str, tuple[int, EmbeddingRecord, np.ndarray]] = {}

    def put(self, owner_scope: str, chunk: Chunk, vector: list[float]) -> EmbeddingRecord:
        validate_scope(owner_scope)
        arr = validate_vector(vector, self.dimension)
        record = EmbeddingRecord(owner_scope=owner_scope, chunk=chunk, vector=arr.tolist())
        with self._lock:
            self._rows[record.id] = (next(self._seq), record, arr)
        return record

    def _in_scope(self, owner_scope: str) -> list[tuple[int, EmbeddingRecord, np.ndarray]]:
        with self._lock:
            return [row for row in self._rows.values() if row[1].owner_scope == owner_scope]

    def query(
        self,
        owner_scope: str,
        query_vector: list[float],
        k: int,
        min_similarity: float = -1.0,
    ) -> list[RetrievalResult]:
        validate_scope(owner_scope)
        validate_query(k, min_similarity)
        query = validate_vector(query_vector, self.dimension)

        rows = self._in_scope(owner_scope)
        if not rows:
            return []
        matrix = np.vstack([row[2] for row in rows])
        candidates = [Candidate(row[1].id, row[1].created_at, row[0]) for row in rows]
        records = {row[1].id: row[1] for row in rows}

        return [
            RetrievalResult(
                source_type=records[c.record_id].chunk.source_type,
                source_id=records[c.record_id].chunk.source_id,
                ordinal=records[c.record_id].chunk.ordinal,
                text=records[c.record_id].chunk.text,
                similarity=similarity,
                record_id=c.record_id,
            )
            for c, similarity in rank(
                candidates, cosine_similarities(matrix, query), k, min_similarity
            )
        ]

    def _matches(
        self, record: EmbeddingRecord, owner_scope: str, source_type: SourceType, source_id: str
    ) -> bool:
        return (
            record.owner_scope == owner_scope
            and record.chunk.source_type == SourceType(source_type)
            and record.chunk.source_id == source_id
        )

    def delete_by_source(self, owner_scope: str, source_type: SourceType, source_id: str) -> int:
        validate_scope(owner_scope)
        with self._lock:
            doomed = [
                record_id
                for record_id, (_, record, _) in self._rows.items()
                if self._matches(record, owner_scope, source_type, source_id)
            ]
            for record_id in doomed:
                del self._rows[record_id]
        return len(doomed)

    def get_by_source(
        self, owner_scope: str, source_type: SourceType, source_id: str
    ) -> list[EmbeddingRecord]:
        validate_scope(owner_scope)
        with self._lock:
            rows = [
                (record.chunk.ordinal, seq, record)
                for seq, record, _ in self._rows.values()
                if self._matches(record, owner_scope, source_type, source_id)
            ]
        return [record for _, _, record in sorted(rows, key=lambda r: (r[0], r[1]))]

    def list_sources(self, owner_scope: str) -> list[tuple[SourceType, str]]:
        validate_scope(owner_scope)
        sources = {
            (record.chunk.source_type, record.chunk.source_id)
            for _, record, _ in self._in_scope(owner_scope)
        }
        return sorted(sources, key=lambda s: (s[0].value, s[1]))

    def count(self, owner_scope: str | None = None) -> int:
        if owner_scope is None:
            with self._lock:
                return len(self._rows)
        return len(self._in_scope(owner_scope))
