import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Hashable

logger = logging.getLogger(__name__)


class Debouncer:
    """
    Runs a coroutine after a quiet period. Scheduling again under the same key
    cancels whatever is still pending for that key, so only the latest call
    in a burst runs.
    """

    def __init__(self, delay: float):
        self.delay = delay
        self._pending: Dict[Hashable, asyncio.Task] = {}

    def schedule(self, key: Hashable, func: Callable[..., Awaitable[Any]], *args, **kwargs) -> asyncio.Task:
        self.cancel(key)
        task = asyncio.ensure_future(self._run_later(func, *args, **kwargs))
        self._pending[key] = task
        task.add_done_callback(lambda t: self._forget(key, t))
        return task

    async def _run_later(self, func, *args, **kwargs):
        await asyncio.sleep(self.delay)
        return await func(*args, **kwargs)

    def _forget(self, key: Hashable, task: asyncio.Task) -> None:
        if self._pending.get(key) is task:
            del self._pending[key]
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Debounced task for {key!r} failed", exc_info=task.exception())

    def cancel(self, key: Hashable) -> bool:
        task = self._pending.pop(key, None)
        if task is not None and not task.done():
            task.cancel()
            logger.debug(f"Superseded pending task for {key!r}")
            return True
        return False

    def cancel_all(self) -> None:
        for key in list(self._pending):
            self.cancel(key)

    def pending(self, key: Hashable) -> bool:
        return key in self._pending
