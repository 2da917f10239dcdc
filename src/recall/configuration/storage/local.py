# src/recall/configuration/storage/local.py
"""Local filesystem storage configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from recall.stores import KnowledgeGraphStore, VectorStore


@dataclass(frozen=True)
class LocalStorage:
    """Local filesystem storage.

    All data is persisted to the specified directory:
    - vectors.db: Embedding records (SQLite backend)
    - chroma/: Embedding records (Chroma backend, needs recall-rag[chroma])
    - knowledge.db: Knowledge graph nodes and relations (SQLite)

    Args:
        data_dir: Base directory for all storage files. Created if missing.
        backend: Vector store backend, "sqlite" (default) or "chroma".

    Example:
        storage = LocalStorage("./recall_data")
    """

    data_dir: str
    backend: Literal["sqlite", "chroma"] = "sqlite"

    def __post_init__(self) -> None:
        if self.backend not in ("sqlite", "chroma"):
            raise ValueError(f"Unknown storage backend '{self.backend}'. Use 'sqlite' or 'chroma'")

    def build_vector_store(self, dimension: int) -> VectorStore:
        """Build the vector store, creating the data directory if needed."""
        from recall.stores import ChromaVectorStore, SQLiteVectorStore

        Path(self.data_dir).mkdir(parents=True, exist_ok=True)
        if self.backend == "chroma":
            return ChromaVectorStore(os.path.join(self.data_dir, "chroma"), dimension=dimension)
        return SQLiteVectorStore(os.path.join(self.data_dir, "vectors.db"), dimension=dimension)

    def build_knowledge_graph(self) -> KnowledgeGraphStore:
        """Build the SQLite knowledge graph store."""
        from recall.stores import SQLiteKnowledgeGraph

        Path(self.data_dir).mkdir(parents=True, exist_ok=True)
        return SQLiteKnowledgeGraph(os.path.join(self.data_dir, "knowledge.db"))
