# src/recall/commands/sources.py
"""Sources command - list indexed sources of a scope."""

from __future__ import annotations

from pathlib import Path

from recall.commands.base import SourceInfo, SourcesResult
from recall.config import get_store


def list_sources(
    owner_scope: str,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> SourcesResult:
    """List sources stored under a scope with their record counts."""
    try:
        store = get_store(data_dir, config_path)
    except Exception as e:
        return SourcesResult(success=False, error=f"Failed to access store: {e}")

    try:
        result = SourcesResult(success=True, owner_scope=owner_scope)
        for source_type, source_id in store.list_sources(owner_scope):
            records = store.get_by_source(owner_scope, source_type, source_id)
            result.sources.append(
                SourceInfo(
                    source_type=source_type.value,
                    source_id=source_id,
                    record_count=len(records),
                )
            )
    except Exception as e:
        return SourcesResult(success=False, error=f"Listing sources failed: {e}")
    finally:
        store.close()

    return result
