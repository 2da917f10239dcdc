# src/recall/stores/__init__.py
"""Storage abstractions for Recall."""

from recall.stores.base import VectorStore
from recall.stores.knowledge_graph import KnowledgeGraphStore, SQLiteKnowledgeGraph
from recall.stores.memory import InMemoryVectorStore
from recall.stores.sqlite_vector import SQLiteVectorStore

try:
    from recall.stores.chroma import ChromaVectorStore
except ImportError:
    from recall._optional import _create_missing_dependency_class

    ChromaVectorStore = _create_missing_dependency_class(  # type: ignore[misc,assignment]
        "ChromaVectorStore", "chroma"
    )

__all__ = [
    "VectorStore",
    "KnowledgeGraphStore",
    "SQLiteVectorStore",
    "InMemoryVectorStore",
    "ChromaVectorStore",
    "SQLiteKnowledgeGraph",
]
