"""Ingestion pipeline for Recall."""

from __future__ import annotations

import asyncio
from collections.abc import Callable

from loguru import logger

from recall.chunker import Chunker, ParagraphChunker
from recall.embedder import Embedder
from recall.exceptions import IngestCancelled, ProviderRejected, ProviderUnavailable
from recall.models import Chunk, EmbeddingRecord, IngestResult, SourceType
from recall.retry import RetryPolicy
from recall.stores import VectorStore
from recall.stores.vectors import validate_scope

ProgressCallback = Callable[[str, int, int, str], None]
"""Callback for ingestion progress updates.

Args:
    event: Event type, "chunking" or "embedding"
    current: Current progress count (0 to total)
    total: Total items to process
    message: Human-readable status message

Example:
    def on_progress(event: str, current: int, total: int, message: str) -> None:
        print(f"[{event}] {current}/{total}: {message}")
"""

CancelCallback = Callable[[IngestResult], None]


class _Outcome:
    """Mutable bookkeeping for one ingest run."""

    def __init__(self, chunks: list[Chunk]) -> None:
        self.chunks = chunks
        self.records: list[EmbeddingRecord] = []
        self.rejected: set[int] = set()
        self.unavailable: set[int] = set()
        self.aborted = False

    def build(
        self,
        owner_scope: str,
        source_type: SourceType,
        source_id: str,
        cancelled: bool = False,
    ) -> IngestResult:
        stored = {record.chunk.ordinal for record in self.records}
        # Anything without a record failed, whatever the reason
        failed = sorted(c.ordinal for c in self.chunks if c.ordinal not in stored)
        return IngestResult(
            owner_scope=owner_scope,
            source_type=source_type,
            source_id=source_id,
            total_chunks=len(self.chunks),
            records=sorted(self.records, key=lambda r: r.chunk.ordinal),
            failed_ordinals=failed,
            rejected_ordinals=sorted(self.rejected),
            unavailable_ordinals=sorted(self.unavailable),
            aborted=self.aborted,
            cancelled=cancelled,
        )


class Ingestor:
    """Orchestrates the ingestion pipeline.

    Pipeline:
    1. Chunk the source text
    2. Embed each chunk (ProviderUnavailable retried with backoff)
    3. Store each embedded chunk in the VectorStore

    Ingestion is not transactional. A rejected chunk is skipped and the rest
    continue; a provider that stays unavailable aborts the remaining chunks.
    Either way the outcome is reported in the IngestResult, never raised.
    Store errors are raised.

    Re-ingesting a source appends new records; callers wanting replacement
    remove the source first (see Recall.reingest).
    """

    def __init__(
        self,
        store: VectorStore,
        embedder: Embedder,
        chunker: Chunker | None = None,
        retry_policy: RetryPolicy | None = None,
        max_concurrency: int = 4,
    ) -> None:
        """Initialize the ingestor.

        Args:
            store: Vector store records are written to
            embedder: Embedder for chunk text
            chunker: Chunker used when no max_chunk_size override is given
                (default: ParagraphChunker())
            retry_policy: Backoff for ProviderUnavailable (default: RetryPolicy())
            max_concurrency: Upper bound on in-flight embeddings in aingest
        """
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")
        self.store = store
        self.embedder = embedder
        self.chunker = chunker or ParagraphChunker()
        self.retry_policy = retry_policy or RetryPolicy()
        self.max_concurrency = max_concurrency

    def _split(
        self,
        text: str,
        source_type: SourceType,
        source_id: str,
        max_chunk_size: int | None,
    ) -> list[Chunk]:
        chunker = self.chunker if max_chunk_size is None else ParagraphChunker(max_chunk_size)
        return chunker.split(text, SourceType(source_type), source_id)

    @staticmethod
    def _log_rejected(source_id: str, chunk: Chunk, exc: ProviderRejected) -> None:
        logger.warning(f"Skipping chunk {chunk.ordinal} of {source_id}: {exc}")

    @staticmethod
    def _log_aborted(source_id: str, ordinals: list[int], exc: ProviderUnavailable) -> None:
        logger.warning(
            f"Aborting ingest of {source_id}, provider unavailable; "
            f"chunks {ordinals} not stored: {exc}"
        )

    def ingest(
        self,
        owner_scope: str,
        source_type: SourceType,
        source_id: str,
        text: str,
        max_chunk_size: int | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> IngestResult:
        """Chunk, embed and store one source, embedding chunks in ordinal order.

        Args:
            owner_scope: Partition the records belong to
            source_type: Kind of source
            source_id: Identifier of the source within its type
            text: Full source text
            max_chunk_size: Override of the chunker's maximum chunk size
            on_progress: Optional callback(event, current, total, message)

        Returns:
            IngestResult with stored records and failed ordinals

        Raises:
            InvalidScope: If owner_scope is blank (before any provider call)
            InvalidDimension: If the embedder returns vectors the store rejects
        """

        def progress(event: str, current: int, total: int, message: str = "") -> None:
            if on_progress:
                on_progress(event, current, total, message)

        validate_scope(owner_scope)
        chunks = self._split(text, source_type, source_id, max_chunk_size)
        progress("chunking", 1, 1, f"Split {source_id} into {len(chunks)} chunks")
        outcome = _Outcome(chunks)
        total = len(chunks)

        for i, chunk in enumerate(chunks):
            try:
                vector = self.retry_policy.call(self.embedder.embed_text, chunk.text)
            except ProviderRejected as e:
                self._log_rejected(source_id, chunk, e)
                outcome.rejected.add(chunk.ordinal)
                continue
            except ProviderUnavailable as e:
                lost = [c.ordinal for c in chunks[i:]]
                self._log_aborted(source_id, lost, e)
                outcome.unavailable.update(lost)
                outcome.aborted = True
                break
            outcome.records.append(self.store.put(owner_scope, chunk, vector))
            progress("embedding", i + 1, total, f"Embedded {i + 1}/{total} chunks")

        result = outcome.build(owner_scope, SourceType(source_type), source_id)
        logger.info(
            f"Ingested {source_id} into {owner_scope!r}: "
            f"{len(result.records)}/{total} chunks stored"
        )
        return result

    async def _aembed(self, chunk: Chunk, semaphore: asyncio.Semaphore) -> list[float]:
        async with semaphore:
            return await self.retry_policy.acall(self.embedder.aembed_text, chunk.text)

    @staticmethod
    async def _drain(tasks: set[asyncio.Task]) -> None:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    async def aingest(
        self,
        owner_scope: str,
        source_type: SourceType,
        source_id: str,
        text: str,
        max_chunk_size: int | None = None,
        on_progress: ProgressCallback | None = None,
        on_cancel: CancelCallback | None = None,
    ) -> IngestResult:
        """Async variant of ingest with concurrent embedding.

        At most ``max_concurrency`` embeddings are in flight. Each chunk is
        stored as soon as its embedding completes. The first chunk whose
        provider stays unavailable after retries aborts the run: pending
        embeddings are cancelled and reported as failed.

        If the calling task is cancelled, pending embeddings are cancelled
        and IngestCancelled is raised carrying the partial result (also passed
        to ``on_cancel``). Its records are exactly the rows written to the
        store; a record counts only once ``put`` has returned.

        Raises:
            InvalidScope: If owner_scope is blank (before any provider call)
            InvalidDimension: If the embedder returns vectors the store rejects
            IngestCancelled: If cancelled while in flight
        """

        def progress(event: str, current: int, total: int, message: str = "") -> None:
            if on_progress:
                on_progress(event, current, total, message)

        validate_scope(owner_scope)
        source_type = SourceType(source_type)
        chunks = self._split(text, source_type, source_id, max_chunk_size)
        progress("chunking", 1, 1, f"Split {source_id} into {len(chunks)} chunks")
        outcome = _Outcome(chunks)
        total = len(chunks)

        semaphore = asyncio.Semaphore(self.max_concurrency)
        tasks = {asyncio.create_task(self._aembed(chunk, semaphore)): chunk for chunk in chunks}
        pending: set[asyncio.Task] = set(tasks)
        completed = 0

        try:
            while pending:
                done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
                unavailable: ProviderUnavailable | None = None
                for task in sorted(done, key=lambda t: tasks[t].ordinal):
                    chunk = tasks[task]
                    exc = task.exception()
                    if exc is None:
                        # put runs on the loop thread, so it cannot be interrupted halfway
                        outcome.records.append(self.store.put(owner_scope, chunk, task.result()))
                        completed += 1
                        progress("embedding", completed, total, f"Embedded {completed}/{total}")
                    elif isinstance(exc, ProviderRejected):
                        self._log_rejected(source_id, chunk, exc)
                        outcome.rejected.add(chunk.ordinal)
                    elif isinstance(exc, ProviderUnavailable):
                        outcome.unavailable.add(chunk.ordinal)
                        unavailable = exc
                    else:
                        raise exc

                if unavailable is not None:
                    outcome.aborted = True
                    outcome.unavailable.update(tasks[t].ordinal for t in pending)
                    await self._drain(pending)
                    pending = set()
                    self._log_aborted(source_id, sorted(outcome.unavailable), unavailable)
        except asyncio.CancelledError:
            await self._drain(pending)
            partial = outcome.build(owner_scope, source_type, source_id, cancelled=True)
            logger.warning(
                f"Ingest of {source_id} cancelled; "
                f"{len(partial.records)}/{total} chunks stored"
            )
            if on_cancel:
                on_cancel(partial)
            raise IngestCancelled(f"Ingest of {source_id} cancelled", partial) from None
        except BaseException:
            await self._drain(pending)
            raise

        result = outcome.build(owner_scope, source_type, source_id)
        logger.info(
            f"Ingested {source_id} into {owner_scope!r}: "
            f"{len(result.records)}/{total} chunks stored"
        )
        return result
