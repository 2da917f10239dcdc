# src/recall/commands/remove.py
"""Remove command - delete a source's records."""

from __future__ import annotations

from pathlib import Path

from recall.commands.base import RemoveResult
from recall.config import get_store
from recall.models import SourceType


def remove(
    owner_scope: str,
    source_type: SourceType,
    source_id: str,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> RemoveResult:
    """Remove every record of a source. Removing an absent source succeeds with 0."""
    source_type = SourceType(source_type)
    try:
        store = get_store(data_dir, config_path)
    except Exception as e:
        return RemoveResult(
            success=False,
            source_type=source_type.value,
            source_id=source_id,
            error=f"Failed to access store: {e}",
        )

    try:
        removed = store.delete_by_source(owner_scope, source_type, source_id)
    except Exception as e:
        return RemoveResult(
            success=False,
            source_type=source_type.value,
            source_id=source_id,
            error=f"Remove failed: {e}",
        )
    finally:
        store.close()

    return RemoveResult(
        success=True,
        source_type=source_type.value,
        source_id=source_id,
        records_removed=removed,
    )
