# src/recall/models/knowledge.py
"""Knowledge graph data models."""

from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field

from recall.models.results import IngestResult


class Entity(BaseModel):
    """An entity mentioned in text, as proposed by a KnowledgeExtractor."""

    type: str
    name: str
    attributes: dict[str, Any] = Field(default_factory=dict)


class Relationship(BaseModel):
    """A typed edge between two entity names, as proposed by an extractor."""

    source: str
    target: str
    type: str


class KnowledgeExtraction(BaseModel):
    """Raw extractor output for one piece of text."""

    entities: list[Entity] = Field(default_factory=list)
    relationships: list[Relationship] = Field(default_factory=list)


class KnowledgeNode(BaseModel):
    """A stored entity."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    owner_scope: str
    type: str
    name: str
    content: str = ""
    source: str = ""
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def description(self) -> str:
        """Text used to embed this node."""
        return f"{self.type}: {self.name} - {self.content}"


class KnowledgeRelation(BaseModel):
    """A stored edge between two nodes of the same owner scope."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    owner_scope: str
    source_id: str
    target_id: str
    type: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class KnowledgeUpdate(BaseModel):
    """What processing one text added to the graph."""

    nodes: list[KnowledgeNode] = Field(default_factory=list)
    relations: list[KnowledgeRelation] = Field(default_factory=list)
    skipped_relationships: list[Relationship] = Field(default_factory=list)
    ingest_results: list[IngestResult] = Field(default_factory=list)


class KnowledgeQueryResult(BaseModel):
    """Nodes matching a topic plus their one-hop neighbourhood."""

    direct: list[KnowledgeNode] = Field(default_factory=list)
    related: list[KnowledgeNode] = Field(default_factory=list)
    relations: list[KnowledgeRelation] = Field(default_factory=list)
