# src/recall/configuration/__init__.py
"""Configuration objects for Recall.

Instead of factory methods, you pass configuration objects that know how to
build their components.

Provider configurations (build embedding and LLM clients):
- LiteLLMProvider: Uses LiteLLM for embedding and completion calls

Storage configurations (build data stores):
- LocalStorage: SQLite (or Chroma) under a local directory

Example:
    from recall import Recall, LiteLLMProvider, LocalStorage

    recall = Recall(
        provider=LiteLLMProvider(embedding="openai/text-embedding-3-small"),
        storage=LocalStorage("./recall_data"),
    )
"""

from recall.configuration.base import ProviderConfig, StorageConfig
from recall.configuration.providers import LiteLLMProvider
from recall.configuration.storage import LocalStorage

__all__ = [
    "ProviderConfig",
    "StorageConfig",
    "LiteLLMProvider",
    "LocalStorage",
]
