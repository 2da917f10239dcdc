# src/recall/chunker/paragraph.py
"""Paragraph-first chunker implementation."""

import re

from recall.chunker.base import Chunker

# Blank-line-delimited blocks
PARAGRAPH_BOUNDARY = re.compile(r"\n\s*\n")
# Whitespace that follows terminal punctuation
SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")

PARAGRAPH_SEPARATOR = "\n\n"
SENTENCE_SEPARATOR = " "


class ParagraphChunker(Chunker):
    """Split text on paragraphs, then sentences, then fixed-width slices.

    Paragraphs are accumulated into a buffer until the next one would push it
    past ``max_chunk_size``; the buffer is then emitted and a new one started.
    A paragraph that is too long on its own is split into sentences with the
    same accumulate-and-flush strategy, and a sentence that is still too long
    is cut into slices of exactly ``max_chunk_size`` characters.

    Every emitted chunk is at most ``max_chunk_size`` characters long and
    chunks come out in source order. Text already within the limit is
    returned unchanged as a single chunk, including the empty string.
    Longer text with no non-blank paragraph yields the single chunk "", so
    blank input of any length reaches the embedder as one rejectable chunk.
    Whitespace at split boundaries is normalised to the separator used when
    joining (a blank line between paragraphs, a space between sentences).
    """

    def __init__(self, max_chunk_size: int = 8000) -> None:
        """Initialize the chunker.

        Args:
            max_chunk_size: Maximum characters per chunk. Must be positive.

        Raises:
            ValueError: If max_chunk_size is not positive
        """
        if max_chunk_size <= 0:
            raise ValueError(f"max_chunk_size must be positive, got {max_chunk_size}")
        self.max_chunk_size = max_chunk_size

    def chunk(self, text: str) -> list[str]:
        """Split text into chunks no longer than max_chunk_size."""
        if len(text) <= self.max_chunk_size:
            return [text]

        chunks: list[str] = []
        buffer = ""

        for paragraph in PARAGRAPH_BOUNDARY.split(text):
            paragraph = paragraph.strip()
            if not paragraph:
                continue

            if self._fits(buffer, paragraph, PARAGRAPH_SEPARATOR):
                buffer = self._join(buffer, paragraph, PARAGRAPH_SEPARATOR)
                continue

            if buffer:
                chunks.append(buffer)
                buffer = ""

            if len(paragraph) <= self.max_chunk_size:
                buffer = paragraph
            else:
                buffer = self._split_paragraph(paragraph, chunks)

        if buffer:
            chunks.append(buffer)

        return chunks or [""]

    def _split_paragraph(self, paragraph: str, chunks: list[str]) -> str:
        """Emit sentence-level chunks for an oversized paragraph.

        Returns the trailing buffer, which later paragraphs may extend.
        """
        buffer = ""
        for sentence in SENTENCE_BOUNDARY.split(paragraph):
            if not sentence:
                continue

            if self._fits(buffer, sentence, SENTENCE_SEPARATOR):
                buffer = self._join(buffer, sentence, SENTENCE_SEPARATOR)
                continue

            if buffer:
                chunks.append(buffer)
                buffer = ""

            if len(sentence) <= self.max_chunk_size:
                buffer = sentence
            else:
                chunks.extend(self._slice(sentence))

        return buffer

    def _slice(self, text: str) -> list[str]:
        """Cut text into fixed-width pieces of max_chunk_size characters."""
        size = self.max_chunk_size
        return [text[i : i + size] for i in range(0, len(text), size)]

    def _fits(self, buffer: str, piece: str, separator: str) -> bool:
        """Check whether piece can be appended to buffer within the limit."""
        extra = len(separator) if buffer else 0
        return len(buffer) + extra + len(piece) <= self.max_chunk_size

    @staticmethod
    def _join(buffer: str, piece: str, separator: str) -> str:
        return f"{buffer}{separator}{piece}" if buffer else piece


def chunk_text(text: str, max_chunk_size: int = 8000) -> list[str]:
    """Split text into bounded-size chunks.

    Shortcut for ``ParagraphChunker(max_chunk_size).chunk(text)``.
    """
    return ParagraphChunker(max_chunk_size).chunk(text)
