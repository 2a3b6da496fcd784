"""In-process background tasks with a logged-only failure channel."""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

logger = logging.getLogger(__name__)

# Strong references so pending tasks are not garbage collected mid-flight
_pending_tasks: set[asyncio.Task] = set()


async def _guarded(coro: Coroutine[Any, Any, Any], name: str) -> None:
    try:
        await coro
    except asyncio.CancelledError:
        logger.warning(f"Background task '{name}' cancelled")
        raise
    except Exception:
        logger.exception(f"Background task '{name}' failed")


def run_in_background(coro: Coroutine[Any, Any, Any], name: str = "background") -> asyncio.Task:
    """Schedule a coroutine on the running loop without awaiting it.

    Exceptions raised by the coroutine are logged and never propagate to
    the caller that scheduled it.
    """
    task = asyncio.create_task(_guarded(coro, name), name=name)
    _pending_tasks.add(task)
    task.add_done_callback(_pending_tasks.discard)
    return task


def pending_task_count() -> int:
    """Number of background tasks still running."""
    return len(_pending_tasks)


async def drain_background_tasks(timeout: float = 10.0) -> None:
    """Wait for outstanding background tasks, cancelling stragglers after timeout."""
    if not _pending_tasks:
        return

    tasks = list(_pending_tasks)
    logger.info(f"Waiting for {len(tasks)} background task(s) to finish")
    done, pending = await asyncio.wait(tasks, timeout=timeout)
    for task in pending:
        task.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)
        logger.warning(f"Cancelled {len(pending)} background task(s) on shutdown")
