"""Retrieval pipeline for Recall."""

from loguru import logger

from recall.embedder import Embedder
from recall.models import RetrievalResult
from recall.retry import RetryPolicy
from recall.stores import VectorStore
from recall.stores.vectors import validate_query, validate_scope

CONTEXT_HEADER = "[Source: {source_type}/{source_id}, Relevance: {similarity:.2f}]"
CONTEXT_SEPARATOR = "\n\n"


def format_context(results: list[RetrievalResult], max_chars: int | None = None) -> str:
    """Render retrieval results as a prompt-ready context block.

    Each result becomes a header line naming its source and relevance,
    followed by the snippet text. Blocks are joined by blank lines. With
    ``max_chars`` set, whole blocks that would overflow are dropped from the end.
    """
    blocks: list[str] = []
    length = 0
    for result in results:
        header = CONTEXT_HEADER.format(
            source_type=result.source_type.value,
            source_id=result.source_id,
            similarity=result.similarity,
        )
        block = f"{header}\n{result.text}"
        added = len(block) + (len(CONTEXT_SEPARATOR) if blocks else 0)
        if max_chars is not None and length + added > max_chars:
            break
        blocks.append(block)
        length += added
    return CONTEXT_SEPARATOR.join(blocks)


class Retriever:
    """Orchestrates the retrieval pipeline."""

    def __init__(
        self,
        store: VectorStore,
        embedder: Embedder,
        default_k: int = 5,
        min_similarity: float = 0.7,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        """Initialize the retriever.

        Args:
            store: Vector store to search
            embedder: Embedder for query text
            default_k: Default number of results to return
            min_similarity: Default similarity floor in [-1, 1]
            retry_policy: Backoff for ProviderUnavailable on the query embedding
        """
        validate_query(default_k, min_similarity)
        self.store = store
        self.embedder = embedder
        self.default_k = default_k
        self.min_similarity = min_similarity
        self.retry_policy = retry_policy or RetryPolicy()

    def _resolve(
        self, owner_scope: str, k: int | None, min_similarity: float | None
    ) -> tuple[int, float]:
        k = self.default_k if k is None else k
        min_similarity = self.min_similarity if min_similarity is None else min_similarity
        validate_scope(owner_scope)
        validate_query(k, min_similarity)
        return k, min_similarity

    def get_context(
        self,
        owner_scope: str,
        query: str,
        k: int | None = None,
        min_similarity: float | None = None,
    ) -> list[RetrievalResult]:
        """Get the snippets most similar to a query within one scope.

        Args:
            owner_scope: Partition to search
            query: Query text
            k: Number of results to return (default: self.default_k)
            min_similarity: Similarity floor (default: self.min_similarity)

        Returns:
            Results ordered by similarity, highest first

        Raises:
            ProviderUnavailable: If the query cannot be embedded after retries
            ProviderRejected: If the provider refuses the query text
        """
        k, min_similarity = self._resolve(owner_scope, k, min_similarity)
        query_vector = self.retry_policy.call(self.embedder.embed_text, query)
        results = self.store.query(owner_scope, query_vector, k, min_similarity)
        logger.debug(f"Retrieved {len(results)} results in {owner_scope!r} (k={k})")
        return results

    async def aget_context(
        self,
        owner_scope: str,
        query: str,
        k: int | None = None,
        min_similarity: float | None = None,
    ) -> list[RetrievalResult]:
        """Async variant of get_context."""
        k, min_similarity = self._resolve(owner_scope, k, min_similarity)
        query_vector = await self.retry_policy.acall(self.embedder.aembed_text, query)
        results = self.store.query(owner_scope, query_vector, k, min_similarity)
        logger.debug(f"Retrieved {len(results)} results in {owner_scope!r} (k={k})")
        return results

    def get_context_text(
        self,
        owner_scope: str,
        query: str,
        k: int | None = None,
        min_similarity: float | None = None,
        max_chars: int | None = None,
    ) -> str:
        """Retrieve and render results with format_context."""
        return format_context(self.get_context(owner_scope, query, k, min_similarity), max_chars)
