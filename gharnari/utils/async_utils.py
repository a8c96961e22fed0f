"""
Ghar Nari - Async Utilities
===========================

Background tasks that log their failures instead of losing them.

Usage:
    from gharnari.utils.async_utils import create_safe_task

    create_safe_task(self._scheduler_loop(), "Backup Scheduler")
"""

import asyncio
from typing import Any, Coroutine

from gharnari.core.logger import logger


def create_safe_task(
    coro: Coroutine[Any, Any, Any],
    name: str = "Background Task",
) -> asyncio.Task:
    """
    Create a background task with automatic error logging.

    Unlike raw asyncio.create_task(), this catches and logs any exceptions
    instead of letting them silently disappear.

    Args:
        coro: The coroutine to run as a background task.
        name: Name for logging purposes.

    Returns:
        The created asyncio.Task.
    """
    async def wrapped():
        try:
            return await coro
        except asyncio.CancelledError:
            # Cancelled during shutdown
            pass
        except Exception as e:
            logger.error("Background Task Failed", [
                ("Task", name),
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:200]),
            ])

    return asyncio.create_task(wrapped(), name=name)


__all__ = ["create_safe_task"]
