# src/recall/extractors/base.py
"""Text extractor abstract base class."""

from abc import ABC, abstractmethod


def normalize_content_type(content_type: str) -> str:
    """Lower-case a MIME type and drop parameters such as ``; charset=utf-8``."""
    return content_type.split(";", 1)[0].strip().lower()


class TextExtractor(ABC):
    """Abstract base class for turning raw file bytes into plain text."""

    CONTENT_TYPES: frozenset[str] = frozenset()

    def supports(self, content_type: str) -> bool:
        """Check if this extractor handles the given content type."""
        return normalize_content_type(content_type) in self.CONTENT_TYPES

    @abstractmethod
    def extract(self, data: bytes, filename: str | None = None) -> str:
        """Extract text from file contents.

        Args:
            data: Raw file bytes
            filename: Optional original filename, used in error messages

        Raises:
            ExtractionError: If the bytes cannot be decoded as this type
        """
        ...
