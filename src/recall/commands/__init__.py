# src/recall/commands/__init__.py
"""UI-agnostic command layer for Recall.

Commands return data structures, allowing UIs to render results appropriately.

Usage:
    from recall.commands import ingest, query

    result = ingest.ingest("./docs", owner_scope="user-1")
    result = query.query("How does authentication work?", owner_scope="user-1")
"""

from recall.commands import config_cmd, ingest, query, remove, sources
from recall.commands.base import (
    CommandResult,
    CommandStage,
    ConfigResult,
    FileIngestResult,
    IngestCommandResult,
    ProgressCallback,
    ProgressUpdate,
    QueryResult,
    RemoveResult,
    SearchResult,
    SettingInfo,
    SourceInfo,
    SourcesResult,
)

__all__ = [
    # Base types
    "CommandStage",
    "ProgressUpdate",
    "ProgressCallback",
    "CommandResult",
    # Result types
    "IngestCommandResult",
    "FileIngestResult",
    "QueryResult",
    "SearchResult",
    "SourcesResult",
    "SourceInfo",
    "RemoveResult",
    "ConfigResult",
    "SettingInfo",
    # Command modules
    "ingest",
    "query",
    "remove",
    "sources",
    "config_cmd",
]
