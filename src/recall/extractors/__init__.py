# src/recall/extractors/__init__.py
"""Text extractors for Recall."""

from recall.extractors.base import TextExtractor, normalize_content_type
from recall.extractors.registry import ExtractorRegistry, guess_content_type
from recall.extractors.text import PlainTextExtractor

# Optional extractors - imported lazily to avoid ImportError when deps not installed
__all__ = [
    "TextExtractor",
    "ExtractorRegistry",
    "PlainTextExtractor",
    "guess_content_type",
    "normalize_content_type",
]


def __getattr__(name: str) -> type:
    """Lazy import optional extractors."""
    if name == "PDFExtractor":
        from recall.extractors.pdf import PDFExtractor

        return PDFExtractor
    elif name == "HTMLExtractor":
        from recall.extractors.html import HTMLExtractor

        return HTMLExtractor
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
