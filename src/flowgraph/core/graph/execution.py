"""Execution helpers shared by nodes and flows.

Lifecycle hooks may be written as coroutines or as plain functions, so every
hook result goes through ``resolve``. Parallel variants fan out with
``gather_in_order``, which settles every unit before surfacing a failure.
"""

import asyncio
import inspect
from contextvars import ContextVar
from typing import Any, Awaitable, Iterable, List

from flowgraph.core.logging import get_logger, LogComponent

logger = get_logger(LogComponent.GRAPH)

# Attempt index of the exec call running in the current task
current_retry: ContextVar[int] = ContextVar("current_retry", default=0)

async def resolve(value: Any) -> Any:
    """Await ``value`` if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value

async def gather_in_order(aws: Iterable[Awaitable[Any]]) -> List[Any]:
    """Run awaitables concurrently and return their results in input order.

    Every unit is allowed to finish. If any failed, the failure of the
    lowest-index unit is raised and the remaining failures are logged.
    Cancelling the caller cancels every unit and waits for them to settle
    before the cancellation propagates.

    Args:
        aws: Coroutines or other awaitables to dispatch

    Returns:
        Results ordered like ``aws``, regardless of completion order
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    if not tasks:
        return []

    try:
        await asyncio.wait(tasks)
    except asyncio.CancelledError:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    failures = [
        (index, task.exception())
        for index, task in enumerate(tasks)
        if not task.cancelled() and task.exception() is not None
    ]
    cancelled = [task for task in tasks if task.cancelled()]

    if failures:
        for index, exc in failures[1:]:
            logger.warning(f"Parallel unit {index} also failed: {exc!r}")
        raise failures[0][1]
    if cancelled:
        raise asyncio.CancelledError()

    return [task.result() for task in tasks]
