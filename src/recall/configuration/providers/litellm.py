# src/recall/configuration/providers/litellm.py
"""LiteLLM provider configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from recall.embedder import Embedder
    from recall.providers import LLMClient
    from recall.settings import Settings


@dataclass(frozen=True)
class LiteLLMProvider:
    """Provider configuration using LiteLLM for embedding and LLM calls.

    Args:
        embedding: LiteLLM model identifier for embeddings.
                   Examples: "openai/text-embedding-3-small", "gemini/gemini-embedding-001"
        llm: Optional LiteLLM model identifier for completions. Only needed
             for knowledge extraction.
        dimensions: Optional output dimension for embedding models that
                    support shortening (e.g. text-embedding-3-*).
        embedding_api_key: Optional API key for the embedding provider.
        llm_api_key: Optional API key for the LLM provider.

    Example:
        provider = LiteLLMProvider(
            embedding="openai/text-embedding-3-small",
            llm="openai/gpt-4o-mini",
        )
    """

    embedding: str
    llm: str | None = None
    dimensions: int | None = None
    embedding_api_key: str | None = None
    llm_api_key: str | None = None

    def build_embedder(self, settings: Settings) -> Embedder:
        """Build a ClientEmbedder using the LiteLLM embedding client.

        Args:
            settings: Settings containing num_retries for LiteLLM's own retries.
        """
        from recall.embedder import ClientEmbedder
        from recall.providers.litellm import LiteLLMEmbeddingClient

        embedding_client = LiteLLMEmbeddingClient(
            model=self.embedding,
            num_retries=settings.num_retries,
            dimensions=self.dimensions,
            api_key=self.embedding_api_key,
        )
        return ClientEmbedder(embedding_client=embedding_client)

    def build_llm_client(self, settings: Settings | None = None) -> LLMClient:
        """Build a LiteLLMClient for completions.

        Raises:
            ValueError: If no llm model was configured
        """
        from recall.providers.litellm import LiteLLMClient

        if self.llm is None:
            raise ValueError("LiteLLMProvider has no llm model configured")
        num_retries = settings.num_retries if settings else 3
        return LiteLLMClient(model=self.llm, num_retries=num_retries, api_key=self.llm_api_key)
