# src/recall/stores/sqlite_vector.py
"""SQLite vector store implementation."""

import sqlite3
from datetime import UTC, datetime
from pathlib import Path

import numpy as np

from recall.exceptions import InvalidDimension
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

# Vectors are stored as little-endian float64 so records read back exactly
_VECTOR_DTYPE = np.dtype("<f8")

_RECORD_COLUMNS = "id, owner_scope, source_type, source_id, ordinal, content, vector, created_at"


class SQLiteVectorStore(VectorStore):
    """SQLite-based vector store with exact cosine search.

    Each operation opens its own connection, so one instance can be shared
    across threads. The dimension is fixed when the database is created; later
    opens with a different dimension are refused.
    """

    def __init__(self, db_path: str, dimension: int) -> None:
        """Initialize the SQLite store.

        Raises:
            ValueError: If dimension is not positive
            InvalidDimension: If the database was created with another dimension
        """
        if dimension <= 0:
            raise ValueError(f"dimension must be positive, got {dimension}")
        self.db_path = db_path
        self.dimension = dimension
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path, timeout=30.0)

    def _init_db(self) -> None:
        """Create tables if they don't exist and pin the dimension."""
        with self._connect() as conn:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("""
                CREATE TABLE IF NOT EXISTS embeddings (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    id TEXT NOT NULL UNIQUE,
                    owner_scope TEXT NOT NULL,
                    source_type TEXT NOT NULL,
                    source_id TEXT NOT NULL,
                    ordinal INTEGER NOT NULL,
                    content TEXT NOT NULL,
                    vector BLOB NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_scope ON embeddings(owner_scope)")
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_scope_source "
                "ON embeddings(owner_scope, source_type, source_id)"
            )
            conn.execute("""
                CREATE TABLE IF NOT EXISTS store_meta (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)
            conn.execute(
                "INSERT OR IGNORE INTO store_meta (key, value) VALUES ('dimension', ?)",
                (str(self.dimension),),
            )
            row = conn.execute("SELECT value FROM store_meta WHERE key = 'dimension'").fetchone()
            conn.commit()
        stored = int(row[0])
        if stored != self.dimension:
            raise InvalidDimension(
                f"Database {self.db_path} holds {stored}-dimensional vectors, "
                f"store configured for {self.dimension}"
            )

    @staticmethod
    def _row_to_record(row: tuple) -> EmbeddingRecord:
        vector = np.frombuffer(row[6], dtype=_VECTOR_DTYPE)
        return EmbeddingRecord(
            id=row[0],
            owner_scope=row[1],
            chunk=Chunk(
                source_type=SourceType(row[2]),
                source_id=row[3],
                ordinal=row[4],
                text=row[5],
            ),
            vector=vector.tolist(),
            created_at=datetime.fromisoformat(row[7]),
        )

    def put(self, owner_scope: str, chunk: Chunk, vector: list[float]) -> EmbeddingRecord:
        """Insert a new record."""
        validate_scope(owner_scope)
        arr = validate_vector(vector, self.dimension)
        record = EmbeddingRecord(owner_scope=owner_scope, chunk=chunk, vector=arr.tolist())
        with self._connect() as conn:
            conn.execute(
                f"""
                INSERT INTO embeddings ({_RECORD_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    record.id,
                    owner_scope,
                    chunk.source_type.value,
                    chunk.source_id,
                    chunk.ordinal,
                    chunk.text,
                    arr.astype(_VECTOR_DTYPE).tobytes(),
                    record.created_at.isoformat(timespec="microseconds"),
                ),
            )
            conn.commit()
        return record

    def query(
        self,
        owner_scope: str,
        query_vector: list[float],
        k: int,
        min_similarity: float = -1.0,
    ) -> list[RetrievalResult]:
        """Exact cosine search over every record in scope."""
        validate_scope(owner_scope)
        validate_query(k, min_similarity)
        query = validate_vector(query_vector, self.dimension)

        with self._connect() as conn:
            rows = conn.execute(
                "SELECT seq, id, source_type, source_id, ordinal, content, vector, created_at "
                "FROM embeddings WHERE owner_scope = ?",
                (owner_scope,),
            ).fetchall()
        if not rows:
            return []

        matrix = np.vstack([np.frombuffer(row[6], dtype=_VECTOR_DTYPE) for row in rows])
        candidates = [
            Candidate(record_id=row[1], created_at=datetime.fromisoformat(row[7]), seq=row[0])
            for row in rows
        ]
        by_id = {row[1]: row for row in rows}

        results = []
        for candidate, similarity in rank(
            candidates, cosine_similarities(matrix, query), k, min_similarity
        ):
            row = by_id[candidate.record_id]
            results.append(
                RetrievalResult(
                    source_type=SourceType(row[2]),
                    source_id=row[3],
                    ordinal=row[4],
                    text=row[5],
                    similarity=similarity,
                    record_id=row[1],
                )
            )
        return results

    def delete_by_source(self, owner_scope: str, source_type: SourceType, source_id: str) -> int:
        """Delete every record of one source."""
        validate_scope(owner_scope)
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM embeddings "
                "WHERE owner_scope = ? AND source_type = ? AND source_id = ?",
                (owner_scope, SourceType(source_type).value, source_id),
            )
            conn.commit()
            return cursor.rowcount

    def get_by_source(
        self, owner_scope: str, source_type: SourceType, source_id: str
    ) -> list[EmbeddingRecord]:
        """Get all records of one source, ordered by ordinal."""
        validate_scope(owner_scope)
        with self._connect() as conn:
            cursor = conn.execute(
                f"SELECT {_RECORD_COLUMNS} FROM embeddings "
                "WHERE owner_scope = ? AND source_type = ? AND source_id = ? "
                "ORDER BY ordinal, seq",
                (owner_scope, SourceType(source_type).value, source_id),
            )
            return [self._row_to_record(row) for row in cursor.fetchall()]

    def list_sources(self, owner_scope: str) -> list[tuple[SourceType, str]]:
        """List distinct sources stored under a scope."""
        validate_scope(owner_scope)
        with self._connect() as conn:
            cursor = conn.execute(
                "SELECT DISTINCT source_type, source_id FROM embeddings "
                "WHERE owner_scope = ? ORDER BY source_type, source_id",
                (owner_scope,),
            )
            return [(SourceType(row[0]), row[1]) for row in cursor.fetchall()]

    def count(self, owner_scope: str | None = None) -> int:
        """Count records, optionally restricted to one scope."""
        with self._connect() as conn:
            if owner_scope is None:
                cursor = conn.execute("SELECT COUNT(seq) FROM embeddings")
            else:
                cursor = conn.execute(
                    "SELECT COUNT(seq) FROM embeddings WHERE owner_scope = ?", (owner_scope,)
                )
            count = cursor.fetchone()
            return count[0] if count else 0
