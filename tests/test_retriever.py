"""Tests for the Retriever pipeline and context formatting."""

import pytest

from recall.exceptions import InvalidScope, ProviderRejected, ProviderUnavailable
from recall.ingestor import Ingestor
from recall.models import RetrievalResult, SourceType
from recall.retriever import Retriever, format_context
from recall.retry import RetryPolicy

NO_WAIT = RetryPolicy(max_attempts=2, initial_wait=0.0, max_wait=0.0)


@pytest.fixture
def populated(memory_store, embedder):
    ingestor = Ingestor(store=memory_store, embedder=embedder, retry_policy=NO_WAIT)
    ingestor.ingest("user-1", SourceType.FILE, "alpha-doc", "alpha alpha")
    ingestor.ingest("user-1", SourceType.MESSAGE, "beta-msg", "beta")
    ingestor.ingest("user-1", SourceType.FILE, "mixed-doc", "alpha beta")
    ingestor.ingest("user-2", SourceType.FILE, "other-alpha", "alpha")
    embedder.calls.clear()
    return memory_store


@pytest.fixture
def retriever(populated, embedder):
    return Retriever(
        store=populated, embedder=embedder, default_k=5, min_similarity=-1.0, retry_policy=NO_WAIT
    )


def result(source_id, text, similarity, source_type=SourceType.FILE):
    return RetrievalResult(
        source_type=source_type, source_id=source_id, text=text, similarity=similarity
    )


class TestGetContext:
    def test_most_similar_first(self, retriever):
        results = retriever.get_context("user-1", "alpha")
        assert [r.source_id for r in results] == ["alpha-doc", "mixed-doc", "beta-msg"]
        assert results[0].similarity > results[1].similarity > results[2].similarity

    def test_k_limits_results(self, retriever):
        assert len(retriever.get_context("user-1", "alpha", k=1)) == 1

    def test_min_similarity_filters(self, retriever):
        results = retriever.get_context("user-1", "alpha", min_similarity=0.9)
        assert [r.source_id for r in results] == ["alpha-doc"]

    def test_defaults_apply(self, populated, embedder):
        retriever = Retriever(store=populated, embedder=embedder, default_k=1, min_similarity=0.0)
        assert len(retriever.get_context("user-1", "beta")) == 1

    def test_scope_isolation(self, retriever):
        results = retriever.get_context("user-2", "alpha")
        assert [r.source_id for r in results] == ["other-alpha"]
        assert retriever.get_context("user-3", "alpha") == []

    def test_blank_scope_rejected_before_embedding(self, retriever, embedder):
        with pytest.raises(InvalidScope):
            retriever.get_context("", "alpha")
        assert embedder.calls == []

    def test_invalid_k_rejected_before_embedding(self, retriever, embedder):
        with pytest.raises(ValueError):
            retriever.get_context("user-1", "alpha", k=0)
        assert embedder.calls == []

    def test_provider_unavailable_raised_after_retries(self, retriever, embedder):
        with pytest.raises(ProviderUnavailable):
            retriever.get_context("user-1", "DOWN alpha")
        assert len(embedder.calls) == 2

    def test_provider_rejected_raised(self, retriever):
        with pytest.raises(ProviderRejected):
            retriever.get_context("user-1", "   ")

    def test_invalid_defaults(self, populated, embedder):
        with pytest.raises(ValueError):
            Retriever(store=populated, embedder=embedder, min_similarity=2.0)

    @pytest.mark.asyncio
    async def test_aget_context(self, retriever):
        results = await retriever.aget_context("user-1", "beta", k=1)
        assert [r.source_id for r in results] == ["beta-msg"]

    def test_get_context_text(self, retriever):
        text = retriever.get_context_text("user-1", "alpha", k=1)
        assert text == "[Source: file/alpha-doc, Relevance: 1.00]\nalpha alpha"


class TestFormatContext:
    def test_empty(self):
        assert format_context([]) == ""

    def test_blocks_joined_by_blank_line(self):
        text = format_context(
            [
                result("doc-1", "First snippet", 0.91234),
                result("m-7", "Second snippet", 0.5, SourceType.MESSAGE),
            ]
        )
        assert text == (
            "[Source: file/doc-1, Relevance: 0.91]\nFirst snippet\n\n"
            "[Source: message/m-7, Relevance: 0.50]\nSecond snippet"
        )

    def test_max_chars_drops_whole_blocks(self):
        results = [result("a", "x" * 10, 0.9), result("b", "y" * 10, 0.8)]
        full = format_context(results)
        first_only = format_context(results[:1])

        assert format_context(results, max_chars=len(full)) == full
        assert format_context(results, max_chars=len(full) - 1) == first_only
        assert format_context(results, max_chars=5) == ""
