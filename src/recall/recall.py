# src/recall/recall.py
"""Central object bundling Recall's embedder, store and settings."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from recall.models import SourceType
from recall.retry import RetryPolicy
from recall.settings import Settings

if TYPE_CHECKING:
    from recall.configuration import ProviderConfig, StorageConfig
    from recall.embedder import Embedder
    from recall.extractors import ExtractorRegistry
    from recall.knowledge import KnowledgeExtractor, KnowledgeService
    from recall.ingestor import CancelCallback, Ingestor, ProgressCallback
    from recall.models import IngestResult, RetrievalResult
    from recall.providers import LLMClient
    from recall.retriever import Retriever
    from recall.stores import KnowledgeGraphStore, VectorStore


class Recall:
    """Retrieval-augmented context engine.

    Recall owns one embedder and one vector store, both injected at
    construction; nothing is held in module globals. It exposes the three
    core operations (ingest, retrieve_context, remove_source) and builds
    Ingestors/Retrievers for finer control.

    There are two ways to create a Recall instance:

    1. With configuration objects:

        from recall import Recall, LiteLLMProvider, LocalStorage

        recall = Recall(
            provider=LiteLLMProvider(embedding="openai/text-embedding-3-small"),
            storage=LocalStorage("./recall_data"),
        )

    2. With explicit components:

        recall = Recall.from_components(
            embedder=my_embedder,
            store=SQLiteVectorStore("./data/vectors.db", dimension=1536),
        )
    """

    def __init__(
        self,
        *,
        provider: ProviderConfig | None = None,
        storage: StorageConfig | None = None,
        embedder: Embedder | None = None,
        store: VectorStore | None = None,
        settings: Settings | None = None,
        extractor_registry: ExtractorRegistry | None = None,
    ) -> None:
        """Create a Recall instance.

        Args:
            provider: Provider configuration (builds the embedder and LLM client).
                      Mutually exclusive with ``embedder``.
            storage: Storage configuration (builds the vector store).
                     Mutually exclusive with ``store``.
            embedder: Explicit embedder.
            store: Explicit vector store.
            settings: Behavioral settings (chunk size, k, retries, ...).
            extractor_registry: Registry used by ingest_file. If None, uses default.

        Raises:
            ValueError: If an embedder source or store source is missing or
                given twice.
        """
        self._settings = settings if settings is not None else Settings()
        self._provider = provider
        self._storage = storage

        if (provider is None) == (embedder is None):
            raise ValueError("Provide exactly one of 'provider' or 'embedder'")
        if (storage is None) == (store is None):
            raise ValueError("Provide exactly one of 'storage' or 'store'")

        if provider is not None:
            self.embedder = provider.build_embedder(self._settings)
        else:
            assert embedder is not None
            self.embedder = embedder

        if storage is not None:
            self.store = storage.build_vector_store(self._settings.embedding_dimension)
        else:
            assert store is not None
            self.store = store

        self._extractor_registry = extractor_registry
        self._retry_policy = RetryPolicy.from_settings(self._settings)

    @classmethod
    def from_components(
        cls,
        *,
        embedder: Embedder,
        store: VectorStore,
        settings: Settings | None = None,
        extractor_registry: ExtractorRegistry | None = None,
    ) -> Recall:
        """Create Recall with an explicit embedder and store."""
        return cls(
            embedder=embedder,
            store=store,
            settings=settings,
            extractor_registry=extractor_registry,
        )

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def storage(self) -> StorageConfig | None:
        """Storage configuration this instance was built from, if any."""
        return self._storage

    def _get_extractor_registry(self) -> ExtractorRegistry:
        """Get or create the extractor registry."""
        if self._extractor_registry is None:
            from recall.extractors import ExtractorRegistry

            self._extractor_registry = ExtractorRegistry.default()
        return self._extractor_registry

    def build_llm_client(self) -> LLMClient:
        """Build an LLM client from the provider configuration.

        Raises:
            ValueError: If this instance was built from explicit components
        """
        if self._provider is None:
            raise ValueError("Recall was created without a provider; pass an LLM client explicitly")
        return self._provider.build_llm_client(self._settings)

    def ingestor(self, *, max_concurrency: int | None = None) -> Ingestor:
        """Create an Ingestor using this instance's embedder and store."""
        from recall.chunker import ParagraphChunker
        from recall.ingestor import Ingestor

        return Ingestor(
            store=self.store,
            embedder=self.embedder,
            chunker=ParagraphChunker(self._settings.max_chunk_size),
            retry_policy=self._retry_policy,
            max_concurrency=(
                self._settings.max_concurrent_embeddings
                if max_concurrency is None
                else max_concurrency
            ),
        )

    def retriever(
        self,
        *,
        default_k: int | None = None,
        min_similarity: float | None = None,
    ) -> Retriever:
        """Create a Retriever using this instance's embedder and store."""
        from recall.retriever import Retriever

        return Retriever(
            store=self.store,
            embedder=self.embedder,
            default_k=default_k if default_k is not None else self._settings.default_k,
            min_similarity=(
                min_similarity if min_similarity is not None else self._settings.min_similarity
            ),
            retry_policy=self._retry_policy,
        )

    def knowledge(
        self,
        *,
        extractor: KnowledgeExtractor | None = None,
        graph: KnowledgeGraphStore | None = None,
    ) -> KnowledgeService:
        """Create a KnowledgeService sharing this instance's embedder and store.

        Args:
            extractor: Knowledge extractor. Defaults to an LLMKnowledgeExtractor
                built from the provider's LLM client.
            graph: Knowledge graph store. Defaults to the storage configuration's.

        Raises:
            ValueError: If a default cannot be built from the configuration
        """
        from recall.knowledge import KnowledgeService, LLMKnowledgeExtractor

        if graph is None:
            if self._storage is None:
                raise ValueError("Recall was created without storage; pass a graph store")
            graph = self._storage.build_knowledge_graph()
        if extractor is None:
            extractor = LLMKnowledgeExtractor(self.build_llm_client())
        return KnowledgeService(self, graph, extractor)

    def ingest(
        self,
        owner_scope: str,
        source_type: SourceType,
        source_id: str,
        text: str,
        max_chunk_size: int | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> IngestResult:
        """Chunk, embed and store one source. See Ingestor.ingest."""
        return self.ingestor().ingest(
            owner_scope, source_type, source_id, text, max_chunk_size, on_progress
        )

    async def aingest(
        self,
        owner_scope: str,
        source_type: SourceType,
        source_id: str,
        text: str,
        max_chunk_size: int | None = None,
        on_progress: ProgressCallback | None = None,
        on_cancel: CancelCallback | None = None,
    ) -> IngestResult:
        """Async variant of ingest. See Ingestor.aingest."""
        return await self.ingestor().aingest(
            owner_scope, source_type, source_id, text, max_chunk_size, on_progress, on_cancel
        )

    def reingest(
        self,
        owner_scope: str,
        source_type: SourceType,
        source_id: str,
        text: str,
        max_chunk_size: int | None = None,
    ) -> IngestResult:
        """Replace a source: remove its records, then ingest the new text.

        Not atomic; a concurrent reader may briefly see the source missing.
        """
        removed = self.remove_source(owner_scope, source_type, source_id)
        logger.debug(f"Re-ingesting {source_id}: removed {removed} old records")
        return self.ingest(owner_scope, source_type, source_id, text, max_chunk_size)

    def retrieve_context(
        self,
        owner_scope: str,
        query_text: str,
        k: int | None = None,
        min_similarity: float | None = None,
    ) -> list[RetrievalResult]:
        """Return the snippets most similar to the query within one scope.

        Provider failures are raised, not swallowed.
        """
        return self.retriever().get_context(owner_scope, query_text, k, min_similarity)

    async def aretrieve_context(
        self,
        owner_scope: str,
        query_text: str,
        k: int | None = None,
        min_similarity: float | None = None,
    ) -> list[RetrievalResult]:
        """Async variant of retrieve_context."""
        return await self.retriever().aget_context(owner_scope, query_text, k, min_similarity)

    def context_text(
        self,
        owner_scope: str,
        query_text: str,
        k: int | None = None,
        min_similarity: float | None = None,
        max_chars: int | None = None,
    ) -> str:
        """Retrieve context and render it as a prompt-ready string."""
        return self.retriever().get_context_text(
            owner_scope, query_text, k, min_similarity, max_chars
        )

    def remove_source(self, owner_scope: str, source_type: SourceType, source_id: str) -> int:
        """Delete every record of a source. Returns the number removed (0 if none)."""
        removed = self.store.delete_by_source(owner_scope, source_type, source_id)
        logger.info(f"Removed {removed} records of {source_id} from {owner_scope!r}")
        return removed

    def list_sources(self, owner_scope: str) -> list[tuple[SourceType, str]]:
        """List the sources stored under a scope."""
        return self.store.list_sources(owner_scope)

    def ingest_file(
        self,
        owner_scope: str,
        path: str | Path,
        source_id: str | None = None,
        content_type: str | None = None,
        max_chunk_size: int | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> IngestResult:
        """Extract text from a file and ingest it as a ``file`` source.

        Args:
            owner_scope: Partition the records belong to
            path: Path to the file
            source_id: Optional source identifier. Defaults to the absolute path.
            content_type: MIME type. Guessed from the filename if omitted.
            max_chunk_size: Override of the configured maximum chunk size
            on_progress: Optional callback(event, current, total, message)

        Raises:
            FileNotFoundError: If the file does not exist
            ExtractionError: If the content type is unknown or unsupported
        """
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        text = self._get_extractor_registry().extract(
            file_path.read_bytes(), content_type=content_type, filename=file_path.name
        )
        return self.ingest(
            owner_scope,
            SourceType.FILE,
            source_id or str(file_path.resolve()),
            text,
            max_chunk_size,
            on_progress,
        )

    def close(self) -> None:
        """Release store resources. The instance should not be used afterwards."""
        self.store.close()

    def __enter__(self) -> Recall:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
