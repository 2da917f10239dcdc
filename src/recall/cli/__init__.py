# src/recall/cli/__init__.py
"""``recall`` console script (needs the ``cli`` extra)."""

from recall.cli.app import app, console

__all__ = ["app", "console"]
