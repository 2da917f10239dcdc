"""Text chunking for Recall.

This module exports:
- Chunker: Abstract base class for chunkers
- ParagraphChunker: Paragraph -> sentence -> fixed-width splitter
- chunk_text: Functional shortcut for ParagraphChunker

Example:
    from recall.chunker import chunk_text

    pieces = chunk_text(document, max_chunk_size=8000)
"""

from recall.chunker.base import Chunker
from recall.chunker.paragraph import ParagraphChunker, chunk_text

__all__ = ["Chunker", "ParagraphChunker", "chunk_text"]
