# src/recall/tasks.py
"""Caller-owned background queue for ingestion work.

Jobs submitted here run on a bounded pool of asyncio workers owned by the
queue. Every job is represented by an IngestionTask whose status, result and
error stay observable after it finishes; nothing runs detached.
"""

from __future__ import annotations

import asyncio
import itertools
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Generic, Literal, TypeVar

from loguru import logger

from recall.exceptions import IngestCancelled

if TYPE_CHECKING:
    from recall.models import IngestResult, SourceType
    from recall.recall import Recall

T = TypeVar("T")

TaskStatus = Literal["pending", "running", "succeeded", "failed", "cancelled"]

_task_ids = itertools.count(1)


class IngestionTask(Generic[T]):
    """Handle for one queued job.

    Attributes:
        id: Sequential identifier, unique within the process
        name: Human-readable label
        status: "pending", "running", "succeeded", "failed" or "cancelled"
        result: Job return value; for a cancelled ingest, the partial IngestResult
        error: Exception that ended the job, if any
    """

    def __init__(self, name: str, factory: Callable[[], Awaitable[T]]) -> None:
        self.id = next(_task_ids)
        self.name = name
        self.status: TaskStatus = "pending"
        self.result: T | None = None
        self.error: BaseException | None = None
        self._factory = factory
        self._job: asyncio.Task[T] | None = None
        self._cancel_requested = False
        self._done = asyncio.Event()

    def __repr__(self) -> str:
        return f"IngestionTask(id={self.id}, name={self.name!r}, status={self.status!r})"

    @property
    def done(self) -> bool:
        return self._done.is_set()

    async def wait(self) -> T | None:
        """Wait for the job to finish and return its result.

        Never raises the job's error; inspect ``status`` and ``error``.
        """
        await self._done.wait()
        return self.result

    def cancel(self) -> bool:
        """Cancel the job. Returns False if it had already finished."""
        if self.done:
            return False
        self._cancel_requested = True
        if self._job is None:
            self.status = "cancelled"
            self._done.set()
        else:
            self._job.cancel()
        return True

    def _worker_cancelled(self) -> bool:
        current = asyncio.current_task()
        return not self._cancel_requested or (current is not None and current.cancelling() > 0)

    def _finish_cancelled(self) -> None:
        if not self.done:
            self.status = "cancelled"
            self._done.set()

    async def _run(self) -> None:
        if self._cancel_requested:
            return
        self.status = "running"
        self._job = asyncio.create_task(self._factory())  # type: ignore[arg-type]
        try:
            self.result = await self._job
            self.status = "succeeded"
        except IngestCancelled as e:
            self.status = "cancelled"
            self.result = e.result  # type: ignore[assignment]
            self.error = e
            if self._worker_cancelled():
                raise
        except asyncio.CancelledError as e:
            self.status = "cancelled"
            self.error = e
            if self._worker_cancelled():
                # The worker itself is being shut down
                self._job.cancel()
                raise
        except Exception as e:
            self.status = "failed"
            self.error = e
            logger.error(f"Task {self.id} ({self.name}) failed: {e!r}")
        finally:
            self._done.set()


class IngestionQueue:
    """Bounded pool of workers processing ingestion jobs in submission order.

    Must be used from within a running event loop. Workers start on the first
    submit.

    Example:
        async with IngestionQueue(recall, max_workers=2) as queue:
            task = queue.submit("user-1", SourceType.FILE, "doc-1", text)
            result = await task.wait()
    """

    def __init__(self, recall: Recall, max_workers: int = 2) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self.recall = recall
        self.max_workers = max_workers
        self._queue: asyncio.Queue[IngestionTask[Any]] = asyncio.Queue()
        self._workers: list[asyncio.Task[None]] = []
        # Unfinished tasks only; finished ones live on in the caller's handle
        self._outstanding: dict[int, IngestionTask[Any]] = {}
        self._closed = False

    @property
    def tasks(self) -> list[IngestionTask[Any]]:
        """Tasks not yet picked off the queue or still running, in submission order."""
        return list(self._outstanding.values())

    def _ensure_workers(self) -> None:
        if not self._workers:
            self._workers = [
                asyncio.create_task(self._worker(), name=f"recall-ingest-worker-{i}")
                for i in range(self.max_workers)
            ]

    async def _worker(self) -> None:
        while True:
            task = await self._queue.get()
            try:
                await task._run()
            finally:
                self._outstanding.pop(task.id, None)
                self._queue.task_done()

    def submit_job(self, name: str, factory: Callable[[], Awaitable[T]]) -> IngestionTask[T]:
        """Queue an arbitrary coroutine factory.

        Raises:
            RuntimeError: If the queue is closed or no event loop is running
        """
        if self._closed:
            raise RuntimeError("IngestionQueue is closed")
        task: IngestionTask[T] = IngestionTask(name, factory)
        self._ensure_workers()
        self._outstanding[task.id] = task
        self._queue.put_nowait(task)
        return task

    def submit(
        self,
        owner_scope: str,
        source_type: SourceType,
        source_id: str,
        text: str,
        max_chunk_size: int | None = None,
    ) -> IngestionTask[IngestResult]:
        """Queue an async ingest of one source."""

        task: IngestionTask[IngestResult]

        def keep_partial(partial: IngestResult) -> None:
            task.result = partial

        def factory() -> Awaitable[IngestResult]:
            return self.recall.aingest(
                owner_scope, source_type, source_id, text, max_chunk_size, on_cancel=keep_partial
            )

        task = self.submit_job(f"ingest {source_type}/{source_id}", factory)
        return task

    async def join(self) -> None:
        """Wait until every submitted task has finished."""
        await self._queue.join()

    async def close(self) -> None:
        """Cancel pending and running tasks and stop the workers."""
        self._closed = True
        for worker in self._workers:
            worker.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []
        for task in self._outstanding.values():
            task._finish_cancelled()
        self._outstanding.clear()

    async def __aenter__(self) -> IngestionQueue:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
