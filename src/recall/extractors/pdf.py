# src/recall/extractors/pdf.py
"""PDF extractor using pypdf - lightweight, pure Python.

Requires: pip install recall-rag[pdf]
"""

import io

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from recall.exceptions import ExtractionError
from recall.extractors.base import TextExtractor


class PDFExtractor(TextExtractor):
    """Extract page text from PDFs. Pages are separated by blank lines."""

    CONTENT_TYPES = frozenset({"application/pdf"})

    def extract(self, data: bytes, filename: str | None = None) -> str:
        try:
            reader = PdfReader(io.BytesIO(data))
            pages = [(page.extract_text() or "").strip() for page in reader.pages]
        except PyPdfError as e:
            raise ExtractionError(f"Cannot read PDF {filename or '<bytes>'}: {e}") from e
        return "\n\n".join(page for page in pages if page)
