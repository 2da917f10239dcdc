"""Tests for Chunk and EmbeddingRecord models."""

import pytest
from pydantic import ValidationError

from recall.models import Chunk, EmbeddingRecord, SourceType


class TestChunk:
    def test_create(self):
        chunk = Chunk(source_id="doc-1", source_type=SourceType.FILE, ordinal=0, text="Hello")
        assert chunk.source_id == "doc-1"
        assert chunk.source_type == SourceType.FILE
        assert chunk.ordinal == 0

    def test_source_type_from_string(self):
        chunk = Chunk(source_id="m", source_type="message", ordinal=1, text="hi")
        assert chunk.source_type is SourceType.MESSAGE

    def test_negative_ordinal_rejected(self):
        with pytest.raises(ValidationError):
            Chunk(source_id="d", source_type=SourceType.FILE, ordinal=-1, text="x")

    def test_unknown_source_type_rejected(self):
        with pytest.raises(ValidationError):
            Chunk(source_id="d", source_type="email", ordinal=0, text="x")

    def test_frozen(self):
        chunk = Chunk(source_id="d", source_type=SourceType.FILE, ordinal=0, text="x")
        with pytest.raises(ValidationError):
            chunk.text = "y"

    def test_equality_by_value(self):
        a = Chunk(source_id="d", source_type=SourceType.FILE, ordinal=0, text="x")
        b = Chunk(source_id="d", source_type=SourceType.FILE, ordinal=0, text="x")
        assert a == b


class TestEmbeddingRecord:
    def test_defaults(self):
        chunk = Chunk(source_id="d", source_type=SourceType.FILE, ordinal=0, text="x")
        record = EmbeddingRecord(owner_scope="user-1", chunk=chunk, vector=[1.0, 0.0])

        assert record.id
        assert record.created_at.tzinfo is not None
        assert record.chunk is chunk

    def test_unique_ids(self):
        chunk = Chunk(source_id="d", source_type=SourceType.FILE, ordinal=0, text="x")
        first = EmbeddingRecord(owner_scope="s", chunk=chunk, vector=[1.0])
        second = EmbeddingRecord(owner_scope="s", chunk=chunk, vector=[1.0])
        assert first.id != second.id
