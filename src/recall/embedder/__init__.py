"""Embedding functionality for Recall."""

from recall.embedder.base import Embedder
from recall.embedder.client import ClientEmbedder

__all__ = ["Embedder", "ClientEmbedder"]
