# src/recall/models/record.py
"""Embedding record data model."""

from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from recall.models.chunk import Chunk


class EmbeddingRecord(BaseModel):
    """A chunk's vector as persisted by a VectorStore.

    Records are created once at ingestion and never mutated; they are only
    removed when their source is deleted.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    owner_scope: str
    chunk: Chunk
    vector: list[float]
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
