"""Tests for the query command."""

import os

import pytest

from recall.commands import ingest, query


@pytest.fixture
def indexed(config_file, patched_create_recall, docs_dir):
    ingest.ingest(docs_dir, "user-1", config_path=config_file, max_chunk_size=12)
    return config_file


def test_query_returns_ranked_results(indexed):
    result = query.query("alpha", "user-1", config_path=indexed)

    assert result.success
    assert result.query == "alpha"
    assert result.results[0].text == "alpha one."
    assert result.results[0].source_type == "file"
    assert result.results[0].ordinal == 0
    similarities = [r.similarity for r in result.results]
    assert similarities == sorted(similarities, reverse=True)
    assert result.context is not None
    assert "alpha one." in result.context


def test_query_k(indexed):
    result = query.query("alpha", "user-1", k=1, config_path=indexed)
    assert len(result.results) == 1


def test_query_raw_skips_context(indexed):
    result = query.query("alpha", "user-1", raw=True, config_path=indexed)
    assert result.context is None
    assert result.results


def test_query_min_similarity(indexed):
    result = query.query("alpha", "user-1", min_similarity=0.9, config_path=indexed)
    assert [r.text for r in result.results] == ["alpha one."]


def test_query_other_scope_is_empty(indexed):
    result = query.query("alpha", "user-2", config_path=indexed)
    assert result.success
    assert result.results == []


def test_query_blank_scope_fails(indexed):
    result = query.query("alpha", "   ", config_path=indexed)
    assert not result.success
    assert result.error.startswith("Query failed")


def test_query_provider_failure(indexed):
    result = query.query("DOWN", "user-1", config_path=indexed)
    assert not result.success
    assert "Query failed" in result.error


def test_query_config_error(temp_dir):
    path = os.path.join(temp_dir, "empty.yaml")
    with open(path, "w", encoding="utf-8") as f:
        f.write("provider: nope\n")

    result = query.query("alpha", "user-1", config_path=path)

    assert not result.success
    assert "nope" in result.error
