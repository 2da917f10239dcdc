# src/recall/embedder/client.py
"""Client-based embedder implementation."""

from recall.embedder.base import Embedder
from recall.exceptions import ProviderRejected
from recall.providers.base import EmbeddingClient


class ClientEmbedder(Embedder):
    """Embedder that uses an EmbeddingClient for generating embeddings.

    Blank input is rejected locally with ProviderRejected instead of spending
    a network round trip on a request the provider would refuse.

    Example:
        from recall.providers.litellm import LiteLLMEmbeddingClient
        from recall.embedder import ClientEmbedder

        client = LiteLLMEmbeddingClient(model="openai/text-embedding-3-small")
        embedder = ClientEmbedder(embedding_client=client)
    """

    def __init__(self, embedding_client: EmbeddingClient) -> None:
        """Initialize the embedder.

        Args:
            embedding_client: Any EmbeddingClient implementation
        """
        self._client = embedding_client

    @property
    def model(self) -> str | None:
        """Model name of the wrapped client, if it exposes one."""
        return getattr(self._client, "model", None)

    def _check(self, texts: list[str]) -> None:
        for text in texts:
            if not text.strip():
                raise ProviderRejected("Cannot embed empty text", model=self.model)

    def _single(self, result: list[list[float]]) -> list[float]:
        if len(result) != 1 or not result[0]:
            raise ProviderRejected("Provider returned no embedding", model=self.model)
        return result[0]

    def embed_text(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text."""
        self._check([text])
        return self._single(self._client.embed([text]))

    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for multiple texts (batched)."""
        if not texts:
            return []
        self._check(texts)
        embeddings = self._client.embed(texts)
        if len(embeddings) != len(texts):
            raise ProviderRejected(
                f"Embedding count mismatch: {len(texts)} texts, {len(embeddings)} embeddings",
                model=self.model,
            )
        return embeddings

    async def aembed_text(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text (async)."""
        self._check([text])
        return self._single(await self._client.aembed([text]))
