"""Recall - owner-scoped retrieval context engine.

Text from files, messages and knowledge-graph nodes is chunked, embedded and
stored per owner scope. Queries return the most similar snippets of one
scope, ready to be placed in an LLM prompt.

Quick Start (LiteLLM + Local Storage):
    from recall import Recall, LiteLLMProvider, LocalStorage, SourceType

    recall = Recall(
        provider=LiteLLMProvider(embedding="openai/text-embedding-3-small"),
        storage=LocalStorage("./recall_data"),
    )

    # Ingest
    recall.ingest("user-1", SourceType.MESSAGE, "msg-42", "The deploy runs on Fridays.")
    recall.ingest_file("user-1", "handbook.pdf")

    # Retrieve
    results = recall.retrieve_context("user-1", "When do we deploy?")
    prompt_context = recall.context_text("user-1", "When do we deploy?")

Background ingestion:
    from recall import IngestionQueue

    async with IngestionQueue(recall) as queue:
        task = queue.submit("user-1", SourceType.FILE, "notes.md", text)
        result = await task.wait()

Log output is disabled by default; call ``recall.log.configure_logging()``
to see it.
"""

from loguru import logger

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("recall-rag")
except PackageNotFoundError:
    # Development / source-tree fallback (e.g. running tests without installing the wheel).
    try:
        import tomllib
        from pathlib import Path

        def _read_version_from_pyproject() -> str | None:
            for parent in Path(__file__).resolve().parents:
                pyproject = parent / "pyproject.toml"
                if pyproject.exists():
                    data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
                    version = data.get("project", {}).get("version")
                    return str(version) if version is not None else None
            return None

        __version__ = _read_version_from_pyproject() or "unknown"
    except Exception:
        __version__ = "unknown"

# Chunking
from recall.chunker import Chunker, ParagraphChunker, chunk_text

# Configuration objects
from recall.configuration import (
    LiteLLMProvider,
    LocalStorage,
    ProviderConfig,
    StorageConfig,
)
from recall.embedder import ClientEmbedder, Embedder

# Errors
from recall.exceptions import (
    ExtractionError,
    IngestCancelled,
    InvalidDimension,
    InvalidScope,
    KnowledgeExtractionError,
    ProviderError,
    ProviderRejected,
    ProviderUnavailable,
    RecallError,
    StoreError,
)

# Text extraction
from recall.extractors import ExtractorRegistry, TextExtractor

# Pipelines
from recall.ingestor import Ingestor

# Knowledge graph
from recall.knowledge import KnowledgeExtractor, KnowledgeService, LLMKnowledgeExtractor
from recall.models import (
    Chunk,
    EmbeddingRecord,
    Entity,
    IngestResult,
    KnowledgeExtraction,
    KnowledgeNode,
    KnowledgeQueryResult,
    KnowledgeRelation,
    Relationship,
    RetrievalResult,
    SourceType,
)

# Provider ABCs
from recall.providers import EmbeddingClient, LLMClient

# Central configuration
from recall.recall import Recall
from recall.retriever import Retriever, format_context
from recall.retry import RetryPolicy
from recall.settings import Settings

# Storage
from recall.stores import (
    ChromaVectorStore,
    InMemoryVectorStore,
    KnowledgeGraphStore,
    SQLiteKnowledgeGraph,
    SQLiteVectorStore,
    VectorStore,
)
from recall.tasks import IngestionQueue, IngestionTask

# Library default: silent until the application opts in
logger.disable("recall")

__all__ = [
    # Version
    "__version__",
    # Models
    "Chunk",
    "SourceType",
    "EmbeddingRecord",
    "RetrievalResult",
    "IngestResult",
    "Entity",
    "Relationship",
    "KnowledgeExtraction",
    "KnowledgeNode",
    "KnowledgeRelation",
    "KnowledgeQueryResult",
    # Errors
    "RecallError",
    "ProviderError",
    "ProviderUnavailable",
    "ProviderRejected",
    "StoreError",
    "InvalidDimension",
    "InvalidScope",
    "ExtractionError",
    "IngestCancelled",
    "KnowledgeExtractionError",
    # Config
    "Settings",
    "RetryPolicy",
    # Configuration objects
    "ProviderConfig",
    "StorageConfig",
    "LiteLLMProvider",
    "LocalStorage",
    # Storage
    "VectorStore",
    "SQLiteVectorStore",
    "InMemoryVectorStore",
    "ChromaVectorStore",
    "KnowledgeGraphStore",
    "SQLiteKnowledgeGraph",
    # Chunking
    "Chunker",
    "ParagraphChunker",
    "chunk_text",
    # Embedding
    "Embedder",
    "ClientEmbedder",
    # Provider ABCs
    "EmbeddingClient",
    "LLMClient",
    # Text extraction
    "TextExtractor",
    "ExtractorRegistry",
    # Pipelines
    "Ingestor",
    "Retriever",
    "format_context",
    "IngestionQueue",
    "IngestionTask",
    # Knowledge graph
    "KnowledgeExtractor",
    "LLMKnowledgeExtractor",
    "KnowledgeService",
    # Central configuration
    "Recall",
]
