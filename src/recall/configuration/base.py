# src/recall/configuration/base.py
"""Protocol definitions for configuration objects.

Configuration factories use Protocols (structural typing): any frozen
dataclass with the right methods satisfies the interface. Stores and
embedders use ABCs because implementations inherit shared behavior.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from recall.embedder import Embedder
    from recall.providers import LLMClient
    from recall.settings import Settings
    from recall.stores import KnowledgeGraphStore, VectorStore


@runtime_checkable
class ProviderConfig(Protocol):
    """Protocol for provider configurations.

    Example implementation:
        @dataclass(frozen=True)
        class MyProvider:
            embedding: str

            def build_embedder(self, settings: Settings) -> Embedder: ...
            def build_llm_client(self, settings: Settings | None = None) -> LLMClient: ...
    """

    def build_embedder(self, settings: Settings) -> Embedder:
        """Build an embedder for creating vector embeddings."""
        ...

    def build_llm_client(self, settings: Settings | None = None) -> LLMClient:
        """Build an LLM client, used for knowledge extraction."""
        ...


@runtime_checkable
class StorageConfig(Protocol):
    """Protocol for storage configurations."""

    def build_vector_store(self, dimension: int) -> VectorStore:
        """Build the vector store for ``dimension``-length embeddings."""
        ...

    def build_knowledge_graph(self) -> KnowledgeGraphStore:
        """Build the knowledge graph store."""
        ...
