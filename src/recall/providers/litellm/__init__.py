"""LiteLLM provider clients for Recall.

This module contains LiteLLM-based client implementations:
- LiteLLMEmbeddingClient: Embeddings using LiteLLM
- LiteLLMClient: LLM completion using LiteLLM (knowledge extraction)
- EmbeddingModels / ChatModels: Curated model constants

Usage:
    from recall.providers.litellm import LiteLLMEmbeddingClient, EmbeddingModels

    client = LiteLLMEmbeddingClient(model=EmbeddingModels.TEXT_3_SMALL)
"""

from recall.providers.litellm.client import LiteLLMClient, LiteLLMEmbeddingClient
from recall.providers.litellm.models import ChatModels, EmbeddingModels

__all__ = [
    # Model constants
    "ChatModels",
    "EmbeddingModels",
    # Clients
    "LiteLLMClient",
    "LiteLLMEmbeddingClient",
]
