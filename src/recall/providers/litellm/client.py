"""LiteLLM client implementations for embedding and LLM APIs."""

from typing import Any

import litellm

from recall.exceptions import ProviderError, ProviderRejected, ProviderUnavailable
from recall.providers.base import EmbeddingClient, LLMClient
from recall.providers.litellm.models import ChatModels, EmbeddingModels

# Failures worth retrying: the same request may succeed later.
UNAVAILABLE_ERRORS: tuple[type[Exception], ...] = (
    litellm.Timeout,
    litellm.APIConnectionError,
    litellm.RateLimitError,
    litellm.ServiceUnavailableError,
    litellm.InternalServerError,
)

# Failures tied to the request itself (ContextWindowExceededError and
# ContentPolicyViolationError subclass BadRequestError).
REJECTED_ERRORS: tuple[type[Exception], ...] = (
    litellm.BadRequestError,
    litellm.AuthenticationError,
    litellm.PermissionDeniedError,
    litellm.NotFoundError,
    litellm.UnprocessableEntityError,
)


def translate_error(exc: Exception, model: str) -> ProviderError:
    """Map a LiteLLM exception onto the Recall provider error taxonomy."""
    if isinstance(exc, UNAVAILABLE_ERRORS):
        return ProviderUnavailable(f"{model} unavailable: {exc}", model=model)
    if isinstance(exc, REJECTED_ERRORS):
        return ProviderRejected(f"{model} rejected input: {exc}", model=model)
    # Remaining APIError subclasses are server-side faults
    if isinstance(exc, litellm.APIError):
        return ProviderUnavailable(f"{model} failed: {exc}", model=model)
    return ProviderRejected(f"{model} failed: {exc}", model=model)


_LITELLM_ERRORS = UNAVAILABLE_ERRORS + REJECTED_ERRORS + (litellm.APIError,)


class LiteLLMEmbeddingClient(EmbeddingClient):
    """LiteLLM-based embedding client.

    Supports any embedding model available through LiteLLM. Retries are left
    to the caller by default (``num_retries=0``) so that the ingest pipeline
    controls backoff and can report which chunks were lost.

    Example:
        from recall.providers.litellm import LiteLLMEmbeddingClient, EmbeddingModels

        client = LiteLLMEmbeddingClient(model=EmbeddingModels.TEXT_3_SMALL)
        embeddings = client.embed(["Hello world", "How are you?"])
    """

    def __init__(
        self,
        model: str = EmbeddingModels.TEXT_3_SMALL,
        num_retries: int = 0,
        dimensions: int | None = None,
        api_key: str | None = None,
        timeout: float | None = 30.0,
    ) -> None:
        """Initialize the LiteLLM embedding client.

        Args:
            model: LiteLLM embedding model identifier.
                   Examples: "openai/text-embedding-3-small", "gemini/gemini-embedding-001"
            num_retries: Retries LiteLLM performs internally before raising.
            dimensions: Optional output dimension for models that support it.
            api_key: Optional API key. If None, LiteLLM reads the provider's env var.
            timeout: Per-request timeout in seconds.
        """
        self.model = model
        self.num_retries = num_retries
        self.dimensions = dimensions
        self.api_key = api_key
        self.timeout = timeout

    def _request_kwargs(self, texts: list[str]) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "model": self.model,
            "input": texts,
            "num_retries": self.num_retries,
        }
        if self.dimensions is not None:
            kwargs["dimensions"] = self.dimensions
        if self.api_key is not None:
            kwargs["api_key"] = self.api_key
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        return kwargs

    @staticmethod
    def _vectors(response: Any) -> list[list[float]]:
        # Sort by index to maintain order
        sorted_data = sorted(response.data, key=lambda x: x["index"])
        return [item["embedding"] for item in sorted_data]

    def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings using LiteLLM."""
        if not texts:
            return []

        try:
            response = litellm.embedding(**self._request_kwargs(texts))
        except _LITELLM_ERRORS as e:
            raise translate_error(e, self.model) from e
        return self._vectors(response)

    async def aembed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings using LiteLLM (async)."""
        if not texts:
            return []

        try:
            response = await litellm.aembedding(**self._request_kwargs(texts))
        except _LITELLM_ERRORS as e:
            raise translate_error(e, self.model) from e
        return self._vectors(response)


class LiteLLMClient(LLMClient):
    """LiteLLM-based LLM client for text generation.

    Example:
        from recall.providers.litellm import LiteLLMClient, ChatModels

        client = LiteLLMClient(model=ChatModels.GPT_4O_MINI)
        response = client.complete([{"role": "user", "content": "Hello"}])
    """

    def __init__(
        self,
        model: str = ChatModels.GPT_4O_MINI,
        num_retries: int = 3,
        api_key: str | None = None,
    ) -> None:
        """Initialize the LiteLLM client.

        Args:
            model: LiteLLM model identifier.
            num_retries: Number of retries on rate limit errors. LiteLLM handles
                        exponential backoff automatically. Default: 3.
            api_key: Optional API key. If None, LiteLLM reads the provider's env var.
        """
        self.model = model
        self.num_retries = num_retries
        self.api_key = api_key

    def _completion_kwargs(self, messages: list[dict], temperature: float | None) -> dict:
        completion_kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "drop_params": True,
            "num_retries": self.num_retries,
        }
        if temperature is not None:
            completion_kwargs["temperature"] = temperature
        if self.api_key is not None:
            completion_kwargs["api_key"] = self.api_key
        return completion_kwargs

    def _content(self, response: Any) -> str:
        if not response.choices:
            raise ProviderRejected(f"LLM returned no choices for model {self.model}", self.model)
        content = response.choices[0].message.content
        if content is None:
            raise ProviderRejected(f"LLM returned None content for model {self.model}", self.model)
        return str(content)

    def complete(
        self,
        messages: list[dict],
        temperature: float | None = None,
    ) -> str:
        """Generate a completion using LiteLLM."""
        try:
            response = litellm.completion(**self._completion_kwargs(messages, temperature))
        except _LITELLM_ERRORS as e:
            raise translate_error(e, self.model) from e
        return self._content(response)

    async def acomplete(
        self,
        messages: list[dict],
        temperature: float | None = None,
    ) -> str:
        """Generate a completion using LiteLLM (async)."""
        try:
            response = await litellm.acompletion(**self._completion_kwargs(messages, temperature))
        except _LITELLM_ERRORS as e:
            raise translate_error(e, self.model) from e
        return self._content(response)
