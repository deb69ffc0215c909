"""Detached background work that is spawned, not awaited."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Coroutine, Set

logger = logging.getLogger(__name__)

# The event loop keeps only weak references to tasks.
_background_tasks: Set[asyncio.Task[Any]] = set()


def _log_outcome(task: asyncio.Task[Any]) -> None:
    _background_tasks.discard(task)
    name = task.get_name()
    if task.cancelled():
        logger.warning("Background task cancelled", extra={"task": name})
        return
    exc = task.exception()
    if exc is not None:
        logger.error(
            "Background task failed",
            exc_info=(type(exc), exc, exc.__traceback__),
            extra={"task": name},
        )
        return
    logger.info("Background task finished", extra={"task": name})


def spawn_detached(coro: Coroutine[Any, Any, Any], *, name: str) -> asyncio.Task[Any]:
    """Schedule ``coro`` on the running loop and log how it ends."""
    task = asyncio.create_task(coro, name=name)
    _background_tasks.add(task)
    task.add_done_callback(_log_outcome)
    logger.info("Background task started", extra={"task": name})
    return task


def pending_tasks() -> Set[asyncio.Task[Any]]:
    return set(_background_tasks)


__all__ = ["spawn_detached", "pending_tasks"]
