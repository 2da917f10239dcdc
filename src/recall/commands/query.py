# src/recall/commands/query.py
"""Query command - retrieve context for a question."""

from __future__ import annotations

from pathlib import Path

from recall.commands.base import QueryResult, SearchResult
from recall.config import ConfigError, create_recall, get_recall_config
from recall.retriever import format_context


def query(
    text: str,
    owner_scope: str,
    k: int | None = None,
    min_similarity: float | None = None,
    raw: bool = False,
    max_chars: int | None = None,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> QueryResult:
    """Retrieve the snippets most relevant to ``text`` within a scope.

    Args:
        text: Query text
        owner_scope: Partition to search
        k: Number of results (None for the configured default)
        min_similarity: Similarity floor (None for the configured default)
        raw: If True, skip rendering the prompt-ready context
        max_chars: Size limit for the rendered context
        data_dir: Override data directory
        config_path: Override config file path
    """
    config = get_recall_config(data_dir, config_path)
    if isinstance(config, ConfigError):
        return QueryResult(success=False, query=text, error=config.message)

    try:
        recall = create_recall(config)
    except Exception as e:
        return QueryResult(success=False, query=text, error=f"Failed to create Recall: {e}")

    try:
        results = recall.retrieve_context(owner_scope, text, k, min_similarity)
    except Exception as e:
        return QueryResult(success=False, query=text, error=f"Query failed: {e}")
    finally:
        recall.close()

    return QueryResult(
        success=True,
        query=text,
        results=[
            SearchResult(
                source_type=r.source_type.value,
                source_id=r.source_id,
                text=r.text,
                similarity=r.similarity,
                ordinal=r.ordinal,
            )
            for r in results
        ],
        context=None if raw else format_context(results, max_chars),
    )
