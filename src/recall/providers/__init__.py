"""Provider implementations for Recall.

This module contains LLM and embedding provider abstractions:
- EmbeddingClient: Abstract base class for embedding providers
- LLMClient: Abstract base class for LLM completion providers
- LiteLLM implementations

Usage:
    from recall.providers import EmbeddingClient, LLMClient
    from recall.providers.litellm import LiteLLMEmbeddingClient, EmbeddingModels
"""

from recall.providers.base import EmbeddingClient, LLMClient
from recall.providers.litellm import (
    ChatModels,
    EmbeddingModels,
    LiteLLMClient,
    LiteLLMEmbeddingClient,
)

__all__ = [
    # ABCs
    "EmbeddingClient",
    "LLMClient",
    # Model constants
    "ChatModels",
    "EmbeddingModels",
    # LiteLLM clients
    "LiteLLMClient",
    "LiteLLMEmbeddingClient",
]
