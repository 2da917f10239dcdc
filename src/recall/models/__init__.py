"""Data models for Recall."""

from recall.models.chunk import Chunk, SourceType
from recall.models.knowledge import (
    Entity,
    KnowledgeExtraction,
    KnowledgeNode,
    KnowledgeQueryResult,
    KnowledgeRelation,
    KnowledgeUpdate,
    Relationship,
)
from recall.models.record import EmbeddingRecord
from recall.models.results import IngestResult, RetrievalResult

__all__ = [
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
    "KnowledgeUpdate",
    "KnowledgeQueryResult",
]
