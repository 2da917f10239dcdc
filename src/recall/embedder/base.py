# src/recall/embedder/base.py
"""Embedder interface used by the ingest and retrieval pipelines."""

from abc import ABC, abstractmethod


class Embedder(ABC):
    """Maps text to a vector.

    Raises ProviderUnavailable or ProviderRejected on failure and never
    retries; backoff belongs to the pipeline's RetryPolicy.
    """

    @abstractmethod
    def embed_text(self, text: str) -> list[float]:
        """Vector for one text."""
        ...

    @abstractmethod
    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        """Vectors for several texts, in input order."""
        ...

    async def aembed_text(self, text: str) -> list[float]:
        """Async ``embed_text``; blocks the loop unless overridden."""
        return self.embed_text(text)
