# src/recall/extractors/text.py
"""Plain text and Markdown extractor."""

from recall.extractors.base import TextExtractor


class PlainTextExtractor(TextExtractor):
    """Decode text files as UTF-8; undecodable bytes become U+FFFD."""

    CONTENT_TYPES = frozenset({"text/plain", "text/markdown", "text/x-markdown", "text/csv"})

    def extract(self, data: bytes, filename: str | None = None) -> str:
        return data.decode("utf-8", errors="replace")
