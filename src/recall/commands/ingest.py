# src/recall/commands/ingest.py
"""Ingest command - index files under an owner scope."""

from __future__ import annotations

import os
from pathlib import Path

from recall.commands.base import (
    CommandStage,
    FileIngestResult,
    IngestCommandResult,
    ProgressCallback,
    ProgressUpdate,
)
from recall.config import ConfigError, create_recall, get_recall_config
from recall.exceptions import ExtractionError
from recall.extractors import ExtractorRegistry, guess_content_type
from recall.models import SourceType

STAGE_MAP = {
    "chunking": CommandStage.CHUNKING,
    "embedding": CommandStage.EMBEDDING,
}


def _discover(path: Path, registry: ExtractorRegistry) -> list[Path]:
    if path.is_file():
        return [path]
    files = []
    for root, _, filenames in os.walk(path):
        for filename in sorted(filenames):
            content_type = guess_content_type(filename)
            if content_type and registry.find(content_type):
                files.append(Path(root) / filename)
    return sorted(files)


def ingest(
    path: str | Path,
    owner_scope: str,
    source_id: str | None = None,
    source_type: SourceType = SourceType.FILE,
    content_type: str | None = None,
    max_chunk_size: int | None = None,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
    on_progress: ProgressCallback | None = None,
) -> IngestCommandResult:
    """Ingest a file, or every supported file under a directory.

    Args:
        path: File or directory to ingest
        owner_scope: Partition the records belong to
        source_id: Source identifier (single file only; default: absolute path)
        source_type: Source type recorded for the ingested text
        content_type: MIME type override (single file only)
        max_chunk_size: Override of the configured maximum chunk size
        data_dir: Override data directory
        config_path: Override config file path
        on_progress: Callback for progress updates
    """
    path = Path(path)
    if not path.exists():
        return IngestCommandResult(success=False, error=f"Path not found: {path}")
    if path.is_dir() and (source_id or content_type):
        return IngestCommandResult(
            success=False, error="--source-id and --content-type apply to a single file only"
        )

    config = get_recall_config(data_dir, config_path)
    if isinstance(config, ConfigError):
        return IngestCommandResult(success=False, error=config.message)

    try:
        recall = create_recall(config)
    except Exception as e:
        return IngestCommandResult(success=False, error=f"Failed to create Recall: {e}")

    registry = ExtractorRegistry.default()
    files = _discover(path, registry)
    if not files:
        recall.close()
        return IngestCommandResult(success=True, error="No supported files found")

    def progress(event: str, current: int, total: int, message: str) -> None:
        if on_progress and event in STAGE_MAP:
            on_progress(ProgressUpdate(STAGE_MAP[event], current, total, message))

    result = IngestCommandResult(success=True)
    try:
        for filepath in files:
            file_source_id = source_id or str(filepath.resolve())
            file_result = FileIngestResult(filepath=str(filepath), source_id=file_source_id)
            try:
                text = registry.extract(
                    filepath.read_bytes(), content_type=content_type, filename=filepath.name
                )
            except (OSError, ExtractionError) as e:
                file_result.error = str(e)
                result.files_failed += 1
                result.file_results.append(file_result)
                continue

            outcome = recall.ingest(
                owner_scope, source_type, file_source_id, text, max_chunk_size, progress
            )
            file_result.chunks = outcome.total_chunks
            file_result.stored = len(outcome.records)
            file_result.failed_ordinals = outcome.failed_ordinals
            file_result.aborted = outcome.aborted
            result.files_processed += 1
            result.total_chunks += outcome.total_chunks
            result.total_stored += len(outcome.records)
            result.file_results.append(file_result)
    except Exception as e:
        result.success = False
        result.error = f"Ingest failed: {e}"
    finally:
        recall.close()

    if on_progress:
        on_progress(ProgressUpdate(CommandStage.COMPLETE, len(files), len(files)))
    return result
