"""
Sequential async task runner with a fixed pause between tasks.

Google's mapping endpoints throttle bursts, so batches of lookups are issued
one at a time rather than gathered in parallel.
"""

import asyncio
import logging
from typing import AsyncIterator, Awaitable, Callable, Iterable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class ThrottledQueue:
    """Runs one async call per item, waiting `delay` seconds between calls."""

    def __init__(
        self,
        delay: float = 0.1,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.delay = max(0.0, delay)
        self._sleep = sleep
        self._abandoned = False
        self._abandon_event = asyncio.Event()

    @property
    def abandoned(self) -> bool:
        return self._abandoned

    def abandon(self) -> None:
        """
        Stop the batch.

        No further items are started, and `run` returns without waiting for
        a call that is still in flight; that call finishes in the background
        and its result (or exception) is discarded.
        """
        self._abandoned = True
        self._abandon_event.set()

    async def _unless_abandoned(
        self, awaitable: Awaitable[R], cancel_on_abandon: bool = False
    ) -> tuple[bool, R | None]:
        """Await `awaitable`, returning early if the batch is abandoned meanwhile."""
        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._abandon_event.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()

        if self._abandoned:
            if cancel_on_abandon:
                task.cancel()
            task.add_done_callback(_discard_result)
            return False, None
        return True, task.result()

    async def run(
        self, items: Iterable[T], worker: Callable[[T], Awaitable[R]]
    ) -> AsyncIterator[tuple[T, R]]:
        """
        Yield (item, result) pairs in input order.

        Args:
            items: Inputs to process
            worker: Coroutine function called once per item

        Yields:
            Each item alongside the value its worker call returned
        """
        first = True
        for item in items:
            if self._abandoned:
                break
            if not first and self.delay:
                finished, _ = await self._unless_abandoned(
                    self._sleep(self.delay), cancel_on_abandon=True
                )
                if not finished:
                    break
            first = False

            finished, result = await self._unless_abandoned(worker(item))
            if not finished:
                logger.debug("Batch abandoned; dropping in-flight result")
                break
            yield item, result

    async def collect(
        self, items: Iterable[T], worker: Callable[[T], Awaitable[R]]
    ) -> list[tuple[T, R]]:
        return [pair async for pair in self.run(items, worker)]


def _discard_result(task: asyncio.Future) -> None:
    # Retrieve the outcome so an abandoned call never reports an unhandled error
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.debug(f"Abandoned call failed: {error}")
