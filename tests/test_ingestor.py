"""Tests for the Ingestor pipeline."""

import pytest

from recall.chunker import ParagraphChunker
from recall.exceptions import InvalidDimension, InvalidScope
from recall.ingestor import Ingestor
from recall.models import SourceType
from recall.retry import RetryPolicy

FIVE_PARAGRAPHS = "alpha one.\n\nbeta two.\n\n{third}\n\ngamma four.\n\nalpha five."
NO_WAIT = RetryPolicy(max_attempts=3, initial_wait=0.0, max_wait=0.0)


@pytest.fixture
def ingestor(memory_store, embedder):
    return Ingestor(
        store=memory_store,
        embedder=embedder,
        chunker=ParagraphChunker(max_chunk_size=15),
        retry_policy=NO_WAIT,
    )


class TestIngestorInit:
    def test_defaults(self, memory_store, embedder):
        ingestor = Ingestor(store=memory_store, embedder=embedder)
        assert ingestor.chunker.max_chunk_size == 8000
        assert ingestor.retry_policy == RetryPolicy()

    def test_invalid_concurrency(self, memory_store, embedder):
        with pytest.raises(ValueError):
            Ingestor(store=memory_store, embedder=embedder, max_concurrency=0)


class TestIngest:
    def test_all_chunks_stored(self, ingestor, memory_store):
        text = FIVE_PARAGRAPHS.format(third="gamma three.")
        result = ingestor.ingest("user-1", SourceType.FILE, "doc-1", text)

        assert result.total_chunks == 5
        assert result.succeeded_ordinals == [0, 1, 2, 3, 4]
        assert result.failed_ordinals == []
        assert not result.is_partial
        assert memory_store.count("user-1") == 5

    def test_small_text_single_record(self, ingestor, memory_store):
        result = ingestor.ingest("user-1", SourceType.MESSAGE, "msg-1", "alpha")
        assert result.total_chunks == 1
        (record,) = result.records
        assert record.chunk.text == "alpha"
        assert record.owner_scope == "user-1"
        assert memory_store.list_sources("user-1") == [(SourceType.MESSAGE, "msg-1")]

    def test_rejected_chunk_skipped(self, ingestor, memory_store):
        text = FIVE_PARAGRAPHS.format(third="REJECT three.")
        result = ingestor.ingest("user-1", SourceType.FILE, "doc-1", text)

        assert result.failed_ordinals == [2]
        assert result.rejected_ordinals == [2]
        assert result.succeeded_ordinals == [0, 1, 3, 4]
        assert not result.aborted
        stored = memory_store.get_by_source("user-1", SourceType.FILE, "doc-1")
        assert [r.chunk.ordinal for r in stored] == [0, 1, 3, 4]

    def test_unavailable_aborts_remaining(self, ingestor, embedder, memory_store):
        text = FIVE_PARAGRAPHS.format(third="DOWN three.")
        result = ingestor.ingest("user-1", SourceType.FILE, "doc-1", text)

        assert result.aborted
        assert result.succeeded_ordinals == [0, 1]
        assert result.failed_ordinals == [2, 3, 4]
        assert result.unavailable_ordinals == [2, 3, 4]
        assert memory_store.count("user-1") == 2
        # Retried up to max_attempts, later chunks never attempted
        assert embedder.calls.count("DOWN three.") == 3
        assert "gamma four." not in embedder.calls

    def test_transient_failure_retried(self, memory_store, embedder_cls):
        flaky = embedder_cls(flaky=2)
        ingestor = Ingestor(store=memory_store, embedder=flaky, retry_policy=NO_WAIT)

        result = ingestor.ingest("user-1", SourceType.FILE, "doc-1", "alpha beta")

        assert result.failed_ordinals == []
        assert len(flaky.calls) == 3

    def test_empty_text_reports_failure(self, ingestor, memory_store):
        result = ingestor.ingest("user-1", SourceType.MESSAGE, "msg-1", "")
        assert result.total_chunks == 1
        assert result.failed_ordinals == [0]
        assert memory_store.count() == 0

    def test_long_blank_text_reports_failure(self, ingestor, memory_store):
        result = ingestor.ingest("user-1", SourceType.MESSAGE, "msg-1", "\n\n" + " " * 40)
        assert result.total_chunks == 1
        assert result.failed_ordinals == [0]
        assert result.rejected_ordinals == [0]
        assert memory_store.count() == 0

    def test_blank_scope_rejected_before_embedding(self, ingestor, embedder):
        with pytest.raises(InvalidScope):
            ingestor.ingest("  ", SourceType.FILE, "doc-1", "alpha")
        assert embedder.calls == []

    def test_wrong_dimension_raises(self, embedder):
        from recall.stores import InMemoryVectorStore

        ingestor = Ingestor(store=InMemoryVectorStore(dimension=8), embedder=embedder)
        with pytest.raises(InvalidDimension):
            ingestor.ingest("user-1", SourceType.FILE, "doc-1", "alpha")

    def test_max_chunk_size_override(self, ingestor):
        text = "alpha " * 10
        result = ingestor.ingest("user-1", SourceType.FILE, "doc-1", text, max_chunk_size=1000)
        assert result.total_chunks == 1

    def test_reingest_appends(self, ingestor, memory_store):
        ingestor.ingest("user-1", SourceType.FILE, "doc-1", "alpha")
        ingestor.ingest("user-1", SourceType.FILE, "doc-1", "alpha")
        assert memory_store.count("user-1") == 2

    def test_progress_callback(self, ingestor):
        events = []
        text = FIVE_PARAGRAPHS.format(third="gamma three.")
        ingestor.ingest(
            "user-1",
            SourceType.FILE,
            "doc-1",
            text,
            on_progress=lambda event, current, total, message: events.append(
                (event, current, total)
            ),
        )
        assert events[0] == ("chunking", 1, 1)
        assert [e for e in events if e[0] == "embedding"][-1] == ("embedding", 5, 5)

    def test_accepts_string_source_type(self, ingestor):
        result = ingestor.ingest("user-1", "message", "msg-1", "alpha")  # type: ignore[arg-type]
        assert result.source_type == SourceType.MESSAGE
