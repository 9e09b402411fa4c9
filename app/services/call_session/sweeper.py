"""Periodic eviction of abandoned call sessions."""
import asyncio
import logging
import time
from contextlib import suppress
from typing import Callable, List, Optional

from app.services.call_session.store import SessionStore

logger = logging.getLogger(__name__)


class SessionSweeper:
    """Owns the background task that sweeps idle sessions out of the store.

    Started in the application lifespan and stopped on shutdown. Calls that
    hang up without finishing the interview are only ever reclaimed here.
    """

    def __init__(
        self,
        store: SessionStore,
        interval_seconds: float = 300.0,
        idle_timeout_seconds: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.store = store
        self.interval_seconds = interval_seconds
        self.idle_timeout_seconds = idle_timeout_seconds
        self.clock = clock
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the sweep loop on the running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="session-sweeper")
        logger.info(
            f"[SWEEPER] Started - Interval: {self.interval_seconds}s, "
            f"Idle timeout: {self.idle_timeout_seconds}s"
        )

    async def stop(self) -> None:
        """Cancel the sweep loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        with suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("[SWEEPER] Stopped")

    async def sweep_once(self) -> List[str]:
        return await self.store.sweep(self.clock(), self.idle_timeout_seconds)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                await self.sweep_once()
            except Exception as e:
                logger.error(
                    f"[SWEEPER] Sweep failed - Error: {type(e).__name__}: {str(e)}",
                    exc_info=True,
                )
