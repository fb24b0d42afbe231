"""
Autosave Task.

Process-scoped repeating task that saves the board on a fixed interval
(persistence.yaml: autosave_interval_seconds). Started once when the
board starts; whoever owns the event loop stops it on shutdown.

Ticks run on the same loop as pointer handling but never wait on it:
each tick snapshots the manager synchronously and hands the I/O to the
store.

Usage:
    task = AutosaveTask(bridge)
    task.start()
    ...
    await task.stop()
"""

import asyncio

from noteboard.engine.core.config import get_app_config
from noteboard.engine.core.logging import get_logger, log_with_source
from noteboard.engine.services.persistence import PersistenceBridge

logger = get_logger(__name__)


class AutosaveTask:
    """Repeating save of the board through a PersistenceBridge."""

    def __init__(self, bridge: PersistenceBridge, interval_seconds: float | None = None) -> None:
        self._bridge = bridge
        self._interval = (
            interval_seconds if interval_seconds is not None
            else get_app_config().persistence.autosave_interval_seconds
        )
        self._task: asyncio.Task | None = None
        self.ticks = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        """Schedule the loop on the running event loop. Calling twice is a no-op."""
        if self.running:
            return self._task
        self._task = asyncio.create_task(self._run(), name="noteboard-autosave")
        log_with_source(logger, "tasks", "info", "Autosave started", interval_seconds=self._interval)
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        log_with_source(logger, "tasks", "info", "Autosave stopped", ticks=self.ticks)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self.ticks += 1
            saved = await self._bridge.save_now()
            log_with_source(logger, "tasks", "debug", "Autosave tick", tick=self.ticks, saved=saved)
