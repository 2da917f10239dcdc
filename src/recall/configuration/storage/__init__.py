# src/recall/configuration/storage/__init__.py
"""Storage configurations for Recall."""

from recall.configuration.storage.local import LocalStorage

__all__ = ["LocalStorage"]
