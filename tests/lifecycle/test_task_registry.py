import asyncio

import pytest

from revdash.lifecycle.task_registry import TaskCategory, TaskRegistry, create_tracked_task


async def test_tracked_task_lifecycle():
    registry = TaskRegistry.instance()
    release = asyncio.Event()

    async def worker():
        await release.wait()
        return 42

    task = create_tracked_task(worker(), category=TaskCategory.BACKGROUND, description="worker")
    await asyncio.sleep(0)

    assert len(registry.active()) == 1
    assert registry.list_all()[0].status == "running"

    release.set()
    assert await task == 42
    await asyncio.sleep(0)

    record = registry.list_all()[0]
    assert record.status == "completed"
    assert record.finished_return == 42
    assert record.finished_at is not None


async def test_failed_and_cancelled_tasks_are_recorded():
    registry = TaskRegistry.instance()

    async def explode():
        raise RuntimeError("boom")

    async def forever():
        await asyncio.Event().wait()

    failing = create_tracked_task(explode(), category=TaskCategory.RENDER, description="explode")
    waiting = create_tracked_task(forever(), category=TaskCategory.GENERAL, description="forever")
    await asyncio.sleep(0)

    waiting.cancel()
    await asyncio.gather(failing, waiting, return_exceptions=True)
    await asyncio.sleep(0)

    assert [r.info.description for r in registry.failed()] == ["explode"]
    assert [r.info.description for r in registry.cancelled()] == ["forever"]
    assert registry.summary() == "Tasks: total=2, running=0, failed=1, cancelled=1"


async def test_summary_dict_counts_running_by_category():
    registry = TaskRegistry.instance()

    async def forever():
        await asyncio.Event().wait()

    tasks = [
        create_tracked_task(forever(), category=TaskCategory.API, description="api"),
        create_tracked_task(forever(), category=TaskCategory.RENDER, description="render"),
        create_tracked_task(forever(), category=TaskCategory.RENDER, description="render-2"),
    ]

    summary = registry.summary_dict()
    assert summary["running"] == 3
    assert summary["running_by_category"] == {"API": 1, "RENDER": 2}

    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)


async def test_get_tasks_for_shutdown_respects_exclusions():
    async def forever():
        await asyncio.Event().wait()

    keep = create_tracked_task(forever(), category=TaskCategory.API, description="keep")
    drop = create_tracked_task(forever(), category=TaskCategory.BACKGROUND, description="drop")

    tasks = TaskRegistry.instance().get_tasks_for_shutdown(exclude=[keep])

    assert tasks == [drop]
    for task in (keep, drop):
        task.cancel()
    await asyncio.gather(keep, drop, return_exceptions=True)


def test_instance_is_singleton():
    assert TaskRegistry.instance() is TaskRegistry.instance()


async def test_record_remembers_creator():
    async def noop():
        return None

    task = create_tracked_task(noop(), category=TaskCategory.SYSTEM, description="noop")
    await task

    record = TaskRegistry.instance().record_for(task)
    assert record is not None
    assert record.info.created_by == "test_task_registry:test_record_remembers_creator"
    assert record.to_dict()["status"] == "completed"
