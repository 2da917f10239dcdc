# src/recall/commands/base.py
"""Result and progress types shared by the command functions.

The command functions never print. They return these dataclasses and the
CLI (or any other front end) decides how to show them.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum


class CommandStage(Enum):
    """Pipeline phase reported to progress callbacks."""

    CHUNKING = "Chunking"
    EMBEDDING = "Embedding"
    COMPLETE = "Complete"


@dataclass
class ProgressUpdate:
    """One progress tick of an ingest.

    ``total`` is 0 while the number of chunks is not yet known.
    """

    stage: CommandStage
    current: int
    total: int
    message: str | None = None


ProgressCallback = Callable[[ProgressUpdate], None]


@dataclass
class CommandResult:
    """Base result type for commands."""

    success: bool
    error: str | None = None


@dataclass
class FileIngestResult:
    """Result for a single file ingestion."""

    filepath: str
    source_id: str = ""
    chunks: int = 0
    stored: int = 0
    failed_ordinals: list[int] = field(default_factory=list)
    aborted: bool = False
    error: str | None = None

    @property
    def partial(self) -> bool:
        return bool(self.failed_ordinals)


@dataclass
class IngestCommandResult(CommandResult):
    """Result of the ingest command.

    Attributes:
        files_processed: Files whose text reached the ingest pipeline
        files_failed: Files that could not be read or extracted
        total_chunks: Chunks produced across all files
        total_stored: Chunks embedded and stored
        file_results: Per-file results
    """

    files_processed: int = 0
    files_failed: int = 0
    total_chunks: int = 0
    total_stored: int = 0
    file_results: list[FileIngestResult] = field(default_factory=list)


@dataclass
class SearchResult:
    """A single search result."""

    source_type: str
    source_id: str
    text: str
    similarity: float
    ordinal: int = 0


@dataclass
class QueryResult(CommandResult):
    """Result of the query command.

    Attributes:
        query: The original query
        results: Ranked results
        context: Prompt-ready rendering of the results (None in raw mode)
    """

    query: str = ""
    results: list[SearchResult] = field(default_factory=list)
    context: str | None = None


@dataclass
class SourceInfo:
    """Information about an indexed source."""

    source_type: str
    source_id: str
    record_count: int


@dataclass
class SourcesResult(CommandResult):
    """Result of the sources command."""

    owner_scope: str = ""
    sources: list[SourceInfo] = field(default_factory=list)


@dataclass
class RemoveResult(CommandResult):
    """Result of the remove command."""

    source_type: str = ""
    source_id: str = ""
    records_removed: int = 0


@dataclass
class SettingInfo:
    """Information about a single setting."""

    name: str
    value: str
    source: str  # "env var", "yaml", "default"


@dataclass
class ConfigResult(CommandResult):
    """Result of the config command."""

    provider: str = "litellm"
    embedding_model: str | None = None
    llm_model: str | None = None
    data_dir: str = ""
    storage_backend: str = "sqlite"
    settings: list[SettingInfo] = field(default_factory=list)
    config_path: str | None = None
