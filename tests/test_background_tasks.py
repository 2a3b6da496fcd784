import asyncio
import logging

from app.core.background_tasks import drain_background_tasks, pending_task_count, run_in_background


async def test_background_task_runs_without_blocking():
    done = asyncio.Event()

    async def work():
        done.set()

    run_in_background(work(), name="work")
    assert not done.is_set()

    await drain_background_tasks()
    assert done.is_set()
    assert pending_task_count() == 0


async def test_background_failure_is_logged_not_raised(caplog):
    async def boom():
        raise RuntimeError("smtp down")

    with caplog.at_level(logging.ERROR):
        task = run_in_background(boom(), name="email:XYZ")
        await task

    assert task.exception() is None
    assert "Background task 'email:XYZ' failed" in caplog.text


async def test_drain_cancels_stragglers(caplog):
    async def forever():
        await asyncio.sleep(3600)

    task = run_in_background(forever(), name="slow")

    await drain_background_tasks(timeout=0.01)

    assert task.cancelled()
    assert pending_task_count() == 0
