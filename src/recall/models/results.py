# src/recall/models/results.py
"""Result data models for Recall operations."""

from pydantic import BaseModel, ConfigDict, Field

from recall.models.chunk import SourceType
from recall.models.record import EmbeddingRecord


class RetrievalResult(BaseModel):
    """A single ranked snippet returned for a query. Never persisted."""

    model_config = ConfigDict(frozen=True)

    source_type: SourceType
    source_id: str
    text: str
    similarity: float  # Cosine similarity in [-1, 1], higher = more relevant
    ordinal: int = 0
    record_id: str | None = None


class IngestResult(BaseModel):
    """Outcome of ingesting one source.

    Ingestion is not transactional across chunks. A partial outcome is always
    visible here: every ordinal is either backed by a record or listed in
    ``failed_ordinals``.
    """

    owner_scope: str
    source_type: SourceType
    source_id: str
    total_chunks: int = 0
    records: list[EmbeddingRecord] = Field(default_factory=list)
    failed_ordinals: list[int] = Field(default_factory=list)
    rejected_ordinals: list[int] = Field(default_factory=list)
    unavailable_ordinals: list[int] = Field(default_factory=list)
    aborted: bool = False  # Provider stayed unavailable after retries
    cancelled: bool = False

    @property
    def succeeded_ordinals(self) -> list[int]:
        """Ordinals that have a persisted record, ascending."""
        return sorted(record.chunk.ordinal for record in self.records)

    @property
    def is_partial(self) -> bool:
        """True if at least one chunk was not stored."""
        return bool(self.failed_ordinals)
