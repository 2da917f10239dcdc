# src/recall/chunker/base.py
"""Chunker abstract base class."""

from abc import ABC, abstractmethod

from recall.models import Chunk, SourceType


class Chunker(ABC):
    """Abstract base class for chunking."""

    @abstractmethod
    def chunk(self, text: str) -> list[str]:
        """Split text into ordered, bounded-size pieces."""
        ...

    def split(self, text: str, source_type: SourceType, source_id: str) -> list[Chunk]:
        """Split text and wrap each piece in a Chunk with its ordinal."""
        return [
            Chunk(source_id=source_id, source_type=source_type, ordinal=ordinal, text=piece)
            for ordinal, piece in enumerate(self.chunk(text))
        ]
