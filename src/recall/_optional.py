# src/recall/_optional.py
"""Placeholders for classes whose optional dependency is not installed."""

from typing import Any


def _create_missing_dependency_class(class_name: str, extra: str) -> type:
    """Create a placeholder class that raises ImportError on instantiation.

    The placeholder can still be imported and used in type hints; only
    constructing it fails, with a message naming the extra to install.

    Args:
        class_name: Name of the unavailable class
        extra: Name of the ``recall-rag`` extra that provides it
    """

    class MissingDependencyClass:
        def __init__(self, *args: Any, **kwargs: Any) -> None:
            raise ImportError(
                f"{class_name} requires the '{extra}' extra. "
                f"Install it with: pip install recall-rag[{extra}]"
            )

    MissingDependencyClass.__name__ = class_name
    MissingDependencyClass.__qualname__ = class_name
    MissingDependencyClass.__module__ = "recall"

    return MissingDependencyClass
