# src/recall/extractors/registry.py
"""Extractor registry for selecting a text extractor by content type."""

import mimetypes

from loguru import logger

from recall.exceptions import ExtractionError
from recall.extractors.base import TextExtractor, normalize_content_type
from recall.extractors.text import PlainTextExtractor

# Extensions some platforms' mimetypes tables lack
_EXTENSION_TYPES = {
    ".md": "text/markdown",
    ".markdown": "text/markdown",
    ".txt": "text/plain",
    ".text": "text/plain",
    ".htm": "text/html",
    ".html": "text/html",
    ".pdf": "application/pdf",
}


def guess_content_type(filename: str) -> str | None:
    """Guess a MIME type from a filename's extension."""
    guessed, _ = mimetypes.guess_type(filename)
    if guessed is not None:
        return guessed
    suffix = "." + filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return _EXTENSION_TYPES.get(suffix)


class ExtractorRegistry:
    """Registry of text extractors, consulted in registration order."""

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._extractors: list[TextExtractor] = []

    def register(self, extractor: TextExtractor) -> None:
        """Register an extractor. Earlier registrations win on overlap."""
        self._extractors.append(extractor)

    def find(self, content_type: str) -> TextExtractor | None:
        """Find an extractor for the content type, if any."""
        for extractor in self._extractors:
            if extractor.supports(content_type):
                return extractor
        return None

    def extract(
        self,
        data: bytes,
        content_type: str | None = None,
        filename: str | None = None,
    ) -> str:
        """Extract text, guessing the content type from filename if not given.

        Raises:
            ExtractionError: If no content type can be determined, or no
                extractor supports it
        """
        if content_type is None and filename is not None:
            content_type = guess_content_type(filename)
        if content_type is None:
            raise ExtractionError(f"Cannot determine content type of {filename or '<bytes>'}")

        extractor = self.find(content_type)
        if extractor is None:
            raise ExtractionError(
                f"Unsupported content type: {normalize_content_type(content_type)}"
            )
        return extractor.extract(data, filename)

    @classmethod
    def default(cls) -> "ExtractorRegistry":
        """Create a registry with all available extractors registered.

        PlainTextExtractor is always available; PDF and HTML extractors are
        registered when their optional dependencies are installed.
        """
        registry = cls()
        registry.register(PlainTextExtractor())

        try:
            from recall.extractors.pdf import PDFExtractor

            registry.register(PDFExtractor())
        except ImportError:
            logger.debug("pypdf not installed; PDF extraction unavailable")

        try:
            from recall.extractors.html import HTMLExtractor

            registry.register(HTMLExtractor())
        except ImportError:
            logger.debug("beautifulsoup4/markdownify not installed; HTML extraction unavailable")

        return registry
