# ============================================================================
# PERIODIC JOB SCHEDULER
# ============================================================================
# STATUS: Orchestration - Background periodic tasks
# PURPOSE: Run the authorizations refresh on a fixed interval
# CREATED: 19 OCT 2026
# ============================================================================
"""
Periodic Job

Runs an async task every `interval_seconds` as a background asyncio task
inside the FastAPI application. A failing run is logged and the loop
continues on its normal cadence; nothing is returned to the caller.

Usage:
    job = PeriodicJob("authorizations-refresh", 600, registry.refresh)
    job.start()
    ...
    await job.stop()
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional

from core.logging import ComponentType, get_logger

logger = get_logger(__name__, ComponentType.SCHEDULER)


class PeriodicJob:
    """
    Fire-and-forget periodic task.

    Args:
        name: Job name for logs and health output
        interval_seconds: Delay between runs
        task: Coroutine function to run
        run_immediately: Run once on start instead of waiting one interval
    """

    def __init__(
        self,
        name: str,
        interval_seconds: float,
        task: Callable[[], Awaitable[Any]],
        run_immediately: bool = False,
    ):
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")

        self.name = name
        self.interval_seconds = interval_seconds
        self._task_fn = task
        self._run_immediately = run_immediately

        self._stop_event = asyncio.Event()
        self._loop_task: Optional[asyncio.Task] = None
        self._run_count = 0
        self._error_count = 0
        self._last_run_at: Optional[datetime] = None
        self._last_error: Optional[str] = None

    @property
    def is_running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    def start(self) -> None:
        """Start the background loop (no-op if already running)."""
        if self.is_running:
            logger.warning(f"Periodic job {self.name} already running")
            return

        self._stop_event.clear()
        self._loop_task = asyncio.create_task(self._loop(), name=f"periodic-{self.name}")

    async def stop(self) -> None:
        """Signal the loop to stop and wait for it."""
        self._stop_event.set()

        task = self._loop_task
        if task is None:
            return

        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        self._loop_task = None
        logger.info(f"Periodic job {self.name} stopped")

    async def run_once(self) -> None:
        """Run the task a single time, logging any failure."""
        self._run_count += 1
        self._last_run_at = datetime.now(timezone.utc)
        try:
            await self._task_fn()
        except Exception as e:
            self._error_count += 1
            self._last_error = f"{type(e).__name__}: {e}"
            logger.error(f"Periodic job {self.name} failed: {self._last_error}")

    async def _loop(self) -> None:
        logger.info(f"Starting periodic job {self.name} (interval={self.interval_seconds}s)")

        if self._run_immediately:
            await self.run_once()

        while not self._stop_event.is_set():
            try:
                await asyncio.wait_for(
                    self._stop_event.wait(),
                    timeout=self.interval_seconds,
                )
                break
            except asyncio.TimeoutError:
                pass

            await self.run_once()

        logger.info(f"Periodic job {self.name} loop exited")

    def stats(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "running": self.is_running,
            "interval_seconds": self.interval_seconds,
            "run_count": self._run_count,
            "error_count": self._error_count,
            "last_run_at": self._last_run_at.isoformat() if self._last_run_at else None,
            "last_error": self._last_error,
        }


def run_periodically(
    interval_ms: int,
    task: Callable[[], Awaitable[Any]],
    name: str = "periodic",
) -> PeriodicJob:
    """Start a PeriodicJob with an interval given in milliseconds."""
    job = PeriodicJob(name, interval_ms / 1000.0, task)
    job.start()
    return job


__all__ = ["PeriodicJob", "run_periodically"]
