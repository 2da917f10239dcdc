# src/recall/models/chunk.py
"""Chunk data model."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SourceType(str, Enum):
    """Kind of source a chunk was cut from."""

    FILE = "file"
    MESSAGE = "message"
    KNOWLEDGE_NODE = "knowledge_node"


class Chunk(BaseModel):
    """A contiguous slice of a source's text, the unit of embedding."""

    model_config = ConfigDict(frozen=True)

    source_id: str
    source_type: SourceType
    ordinal: int = Field(ge=0)  # Position within the source, 0-based
    text: str
