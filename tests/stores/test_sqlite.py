"""Tests for SQLiteVectorStore persistence."""

import os

import pytest

from recall.exceptions import InvalidDimension
from recall.models import Chunk, SourceType
from recall.stores import SQLiteVectorStore


def test_creates_parent_directory(temp_dir):
    path = os.path.join(temp_dir, "nested", "dir", "vectors.db")
    SQLiteVectorStore(path, dimension=3)
    assert os.path.exists(path)


def test_records_survive_reopen(temp_dir):
    path = os.path.join(temp_dir, "vectors.db")
    store = SQLiteVectorStore(path, dimension=2)
    chunk = Chunk(source_id="doc-1", source_type=SourceType.FILE, ordinal=0, text="kept")
    store.put("user-1", chunk, [1.0, 0.0])

    reopened = SQLiteVectorStore(path, dimension=2)
    (result,) = reopened.query("user-1", [1.0, 0.0], k=1)
    assert result.text == "kept"
    assert reopened.count() == 1


def test_dimension_pinned_at_creation(temp_dir):
    path = os.path.join(temp_dir, "vectors.db")
    SQLiteVectorStore(path, dimension=2)
    with pytest.raises(InvalidDimension):
        SQLiteVectorStore(path, dimension=3)


def test_instance_shared_across_threads(temp_dir):
    from concurrent.futures import ThreadPoolExecutor

    store = SQLiteVectorStore(os.path.join(temp_dir, "vectors.db"), dimension=2)

    def put(i: int) -> None:
        chunk = Chunk(source_id=f"doc-{i}", source_type=SourceType.FILE, ordinal=0, text="t")
        store.put("user-1", chunk, [1.0, float(i)])

    with ThreadPoolExecutor(max_workers=4) as pool:
        list(pool.map(put, range(20)))

    assert store.count("user-1") == 20
