# src/recall/configuration/providers/__init__.py
"""Provider configurations for Recall."""

from recall.configuration.providers.litellm import LiteLLMProvider

__all__ = ["LiteLLMProvider"]
