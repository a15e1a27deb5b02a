"""Mini README: Cooperative periodic tick for live elapsed/cost displays.

Structure:
    * LiveTicker - asyncio task that hands a fresh snapshot to a callback
      every ``interval`` seconds until cancelled.

The ticker only reads: it calls a snapshot source and never touches the
ledger, so cancelling it at any point (for example when a dashboard closes)
has no effect on stored state.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Awaitable, Callable, Optional, Union

from ..logging_utils import get_logger
from .service import LiveSnapshot

LOGGER = get_logger(__name__)

SnapshotCallback = Callable[[LiveSnapshot], Union[None, Awaitable[None]]]


class LiveTicker:
    """Emit snapshots on a fixed cadence inside the running event loop."""

    def __init__(
        self,
        source: Callable[[], LiveSnapshot],
        callback: SnapshotCallback,
        *,
        interval: float = 1.0,
        max_ticks: Optional[int] = None,
    ) -> None:
        if interval <= 0:
            raise ValueError("Tick interval must be positive")
        self.source = source
        self.callback = callback
        self.interval = interval
        self.max_ticks = max_ticks
        self.ticks = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        """Schedule the tick loop; must be called from a running event loop."""

        if self.running:
            return self._task
        self._task = asyncio.get_running_loop().create_task(self._run())
        LOGGER.debug("Live ticker started (interval %.2fs)", self.interval)
        return self._task

    async def stop(self) -> None:
        """Cancel the loop and wait for it to unwind."""

        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        LOGGER.debug("Live ticker stopped after %s ticks", self.ticks)

    async def wait(self) -> None:
        """Block until the loop ends on its own (``max_ticks``) or is cancelled."""

        if self._task is not None:
            await self._task

    async def _run(self) -> None:
        while self.max_ticks is None or self.ticks < self.max_ticks:
            result = self.callback(self.source())
            if inspect.isawaitable(result):
                await result
            self.ticks += 1
            if self.max_ticks is not None and self.ticks >= self.max_ticks:
                break
            await asyncio.sleep(self.interval)
