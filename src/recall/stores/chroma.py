# src/recall/stores/chroma.py
"""ChromaDB embedded vector store implementation."""

import time
from datetime import datetime
from pathlib import Path
from typing import Any, cast

import chromadb
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


class ChromaVectorStore(VectorStore):
    """ChromaDB-based vector store.

    Candidates come from Chroma's approximate HNSW index, filtered by owner
    scope and over-fetched by ``oversample``. They are then re-scored with
    exact cosine similarity and re-sorted, so similarity values and
    tie-breaking match the SQLite store. With fewer than ``k * oversample``
    records in scope the search is exhaustive.
    """

    def __init__(
        self,
        persist_dir: str,
        dimension: int,
        collection_name: str = "recall",
        oversample: int = 4,
    ) -> None:
        """Initialize the ChromaDB store."""
        if dimension <= 0:
            raise ValueError(f"dimension must be positive, got {dimension}")
        self.dimension = dimension
        self.oversample = max(1, oversample)
        Path(persist_dir).mkdir(parents=True, exist_ok=True)
        self._client = chromadb.PersistentClient(path=persist_dir)
        self._collection = self._client.get_or_create_collection(
            name=collection_name,
            metadata={"hnsw:space": "cosine"},
        )

    def close(self) -> None:
        """Close the store and release resources.

        ChromaDB has no official close method; the internal system is stopped
        to release file handles (https://github.com/chroma-core/chroma/issues/5868).
        """
        self._collection = None  # type: ignore[assignment]
        if self._client is not None and hasattr(self._client, "_system"):
            self._client._system.stop()
        self._client = None  # type: ignore[assignment]

    @staticmethod
    def _source_filter(owner_scope: str, source_type: SourceType, source_id: str) -> dict:
        return {
            "$and": [
                {"owner_scope": owner_scope},
                {"source_type": SourceType(source_type).value},
                {"source_id": source_id},
            ]
        }

    def put(self, owner_scope: str, chunk: Chunk, vector: list[float]) -> EmbeddingRecord:
        """Insert a new record."""
        validate_scope(owner_scope)
        arr = validate_vector(vector, self.dimension)
        record = EmbeddingRecord(owner_scope=owner_scope, chunk=chunk, vector=arr.tolist())
        self._collection.add(
            ids=[record.id],
            embeddings=[record.vector],  # type: ignore[arg-type]
            documents=[chunk.text],
            metadatas=[
                {
                    "owner_scope": owner_scope,
                    "source_type": chunk.source_type.value,
                    "source_id": chunk.source_id,
                    "ordinal": chunk.ordinal,
                    "created_at": record.created_at.isoformat(timespec="microseconds"),
                    "seq": time.time_ns(),
                }
            ],
        )
        return record

    def _scope_ids(self, where: dict) -> list[str]:
        return self._collection.get(where=where, include=[])["ids"]  # type: ignore[arg-type]

    def query(
        self,
        owner_scope: str,
        query_vector: list[float],
        k: int,
        min_similarity: float = -1.0,
    ) -> list[RetrievalResult]:
        """Search within one scope, re-scoring candidates exactly."""
        validate_scope(owner_scope)
        validate_query(k, min_similarity)
        query = validate_vector(query_vector, self.dimension)

        in_scope = len(self._scope_ids({"owner_scope": owner_scope}))
        if in_scope == 0:
            return []

        results = self._collection.query(
            query_embeddings=[query.tolist()],  # type: ignore[arg-type]
            n_results=min(k * self.oversample, in_scope),
            where={"owner_scope": owner_scope},
            include=["embeddings", "documents", "metadatas"],
        )
        ids = results["ids"][0]
        if not ids:
            return []
        documents = cast(list, results["documents"])[0]
        metadatas = cast(list, results["metadatas"])[0]
        embeddings = cast(list, results["embeddings"])[0]

        matrix = np.vstack([np.asarray(e, dtype=np.float64) for e in embeddings])
        candidates = [
            Candidate(rid, datetime.fromisoformat(str(meta["created_at"])), int(meta["seq"]))
            for rid, meta in zip(ids, metadatas, strict=True)
        ]
        rows = {
            rid: (doc, meta) for rid, doc, meta in zip(ids, documents, metadatas, strict=True)
        }

        ranked = []
        for candidate, similarity in rank(
            candidates, cosine_similarities(matrix, query), k, min_similarity
        ):
            doc, meta = rows[candidate.record_id]
            ranked.append(
                RetrievalResult(
                    source_type=SourceType(meta["source_type"]),
                    source_id=str(meta["source_id"]),
                    ordinal=int(meta["ordinal"]),
                    text=doc,
                    similarity=similarity,
                    record_id=candidate.record_id,
                )
            )
        return ranked

    def delete_by_source(self, owner_scope: str, source_type: SourceType, source_id: str) -> int:
        """Delete every record of one source."""
        validate_scope(owner_scope)
        ids = self._scope_ids(self._source_filter(owner_scope, source_type, source_id))
        if ids:
            self._collection.delete(ids=ids)
        return len(ids)

    def get_by_source(
        self, owner_scope: str, source_type: SourceType, source_id: str
    ) -> list[EmbeddingRecord]:
        """Get all records of one source, ordered by ordinal."""
        validate_scope(owner_scope)
        where = self._source_filter(owner_scope, source_type, source_id)
        results = self._collection.get(
            where=where,  # type: ignore[arg-type]
            include=["embeddings", "documents", "metadatas"],
        )
        records: list[tuple[int, int, EmbeddingRecord]] = []
        for rid, doc, meta, embedding in zip(
            results["ids"],
            cast(list, results["documents"]),
            cast(list, results["metadatas"]),
            cast(Any, results["embeddings"]),
            strict=True,
        ):
            record = EmbeddingRecord(
                id=rid,
                owner_scope=owner_scope,
                chunk=Chunk(
                    source_type=SourceType(meta["source_type"]),
                    source_id=str(meta["source_id"]),
                    ordinal=int(meta["ordinal"]),
                    text=doc,
                ),
                vector=[float(x) for x in embedding],
                created_at=datetime.fromisoformat(str(meta["created_at"])),
            )
            records.append((record.chunk.ordinal, int(meta["seq"]), record))
        return [record for _, _, record in sorted(records, key=lambda r: (r[0], r[1]))]

    def list_sources(self, owner_scope: str) -> list[tuple[SourceType, str]]:
        """List distinct sources stored under a scope."""
        validate_scope(owner_scope)
        results = self._collection.get(where={"owner_scope": owner_scope}, include=["metadatas"])
        sources = {
            (SourceType(meta["source_type"]), str(meta["source_id"]))
            for meta in results["metadatas"] or []
        }
        return sorted(sources, key=lambda s: (s[0].value, s[1]))

    def count(self, owner_scope: str | None = None) -> int:
        """Count records, optionally restricted to one scope."""
        if owner_scope is None:
            return self._collection.count()
        return len(self._scope_ids({"owner_scope": owner_scope}))
