"""Tests for IngestionQueue and IngestionTask."""

import asyncio

import pytest

from recall.models import IngestResult, SourceType
from recall.tasks import IngestionQueue


async def wait_until(predicate, timeout=5):
    async def poll():
        while not predicate():
            await asyncio.sleep(0.001)

    await asyncio.wait_for(poll(), timeout=timeout)


@pytest.mark.asyncio
class TestIngestionQueue:
    async def test_submit_and_wait(self, recall_instance):
        async with IngestionQueue(recall_instance) as queue:
            task = queue.submit("user-1", SourceType.MESSAGE, "msg-1", "alpha")
            result = await task.wait()

        assert task.status == "succeeded"
        assert task.done
        assert isinstance(result, IngestResult)
        assert result.succeeded_ordinals == [0]
        assert recall_instance.store.count("user-1") == 1

    async def test_outstanding_tasks_listed_in_order(self, recall_instance):
        async with IngestionQueue(recall_instance) as queue:
            first = queue.submit("user-1", SourceType.MESSAGE, "a", "alpha")
            second = queue.submit("user-1", SourceType.MESSAGE, "b", "beta")
            assert queue.tasks == [first, second]
            assert second.id > first.id

            await queue.join()
            assert queue.tasks == []
            assert first.status == second.status == "succeeded"

    async def test_finished_tasks_not_retained(self, recall_instance):
        async with IngestionQueue(recall_instance) as queue:
            handles = [
                queue.submit("user-1", SourceType.MESSAGE, f"msg-{i}", "alpha") for i in range(50)
            ]
            await queue.join()

            assert len(queue.tasks) == 0
            # Results stay reachable through the caller's handles
            assert all(len(h.result.records) == 1 for h in handles)

    async def test_failed_job_observable(self, recall_instance):
        async def boom():
            raise RuntimeError("boom")

        async with IngestionQueue(recall_instance) as queue:
            task = queue.submit_job("explode", boom)
            assert await task.wait() is None

        assert task.status == "failed"
        assert isinstance(task.error, RuntimeError)

    async def test_failure_does_not_stop_workers(self, recall_instance):
        async def boom():
            raise RuntimeError("boom")

        async with IngestionQueue(recall_instance, max_workers=1) as queue:
            queue.submit_job("explode", boom)
            task = queue.submit("user-1", SourceType.MESSAGE, "m", "alpha")
            await task.wait()

        assert task.status == "succeeded"

    async def test_cancel_pending(self, recall_instance):
        release = asyncio.Event()

        async def block():
            await release.wait()
            return "released"

        async with IngestionQueue(recall_instance, max_workers=1) as queue:
            blocker = queue.submit_job("block", block)
            pending = queue.submit("user-1", SourceType.MESSAGE, "m", "alpha")

            assert pending.cancel() is True
            assert pending.status == "cancelled"
            release.set()
            assert await blocker.wait() == "released"
            await queue.join()

        assert recall_instance.store.count() == 0
        assert pending.cancel() is False

    async def test_cancel_running_ingest_keeps_partial(self, recall_instance):
        text = "alpha one.\n\nbeta two.\n\nSLOW three."
        store = recall_instance.store

        async with IngestionQueue(recall_instance) as queue:
            task = queue.submit("user-1", SourceType.FILE, "doc-1", text, max_chunk_size=12)
            await wait_until(lambda: store.count("user-1") == 2)

            assert task.cancel() is True
            partial = await task.wait()

        assert task.status == "cancelled"
        assert isinstance(partial, IngestResult)
        assert partial.cancelled
        assert partial.failed_ordinals == [2]
        stored = store.get_by_source("user-1", SourceType.FILE, "doc-1")
        assert [r.id for r in stored] == [r.id for r in partial.records]

    async def test_close_cancels_outstanding(self, recall_instance):
        never = asyncio.Event()

        async def block():
            await never.wait()

        queue = IngestionQueue(recall_instance, max_workers=1)
        running = queue.submit_job("block", block)
        queued = queue.submit_job("block-2", block)
        await wait_until(lambda: running.status == "running")

        await queue.close()

        assert running.status == "cancelled"
        assert queued.status == "cancelled"
        assert running.done and queued.done
        with pytest.raises(RuntimeError):
            queue.submit_job("late", block)

    async def test_invalid_workers(self, recall_instance):
        with pytest.raises(ValueError):
            IngestionQueue(recall_instance, max_workers=0)
