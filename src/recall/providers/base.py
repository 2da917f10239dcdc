# src/recall/providers/base.py
"""Provider interfaces: batch embedding and chat completion.

Implementations talk to one backend and report failures with the Recall
provider errors. ProviderUnavailable means "try again later";
ProviderRejected means "this input will never work".
"""

from abc import ABC, abstractmethod


class EmbeddingClient(ABC):
    """Turns a batch of texts into vectors.

    Example:
        class MyEmbeddingClient(EmbeddingClient):
            def embed(self, texts):
                return my_api.embed_batch(texts)
    """

    @abstractmethod
    def embed(self, texts: list[str]) -> list[list[float]]:
        """Embed ``texts``; ``result[i]`` is the vector of ``texts[i]``.

        Raises:
            ProviderUnavailable: Transient backend failure
            ProviderRejected: Backend refused the input
        """
        ...

    async def aembed(self, texts: list[str]) -> list[list[float]]:
        """Async ``embed``. Falls back to the blocking call."""
        return self.embed(texts)


class LLMClient(ABC):
    """Chat completion backend, used for knowledge extraction."""

    @abstractmethod
    def complete(self, messages: list[dict], temperature: float | None = None) -> str:
        """Return the assistant reply to ``messages`` (``role``/``content`` dicts).

        A ``temperature`` of None leaves the backend default.
        """
        ...

    async def acomplete(self, messages: list[dict], temperature: float | None = None) -> str:
        """Async ``complete``. Falls back to the blocking call."""
        return self.complete(messages, temperature)
