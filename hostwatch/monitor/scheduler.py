"""Daily check scheduler — initial run, then once a day at a UTC hour."""

from __future__ import annotations

import asyncio
import datetime
from collections.abc import Awaitable, Callable
from typing import Any

import structlog

from hostwatch.core.types import utcnow

logger = structlog.get_logger(__name__)

CheckFn = Callable[[], Awaitable[Any]]
Clock = Callable[[], datetime.datetime]


def next_run_delay(now: datetime.datetime, hour_utc: int) -> datetime.timedelta:
    """Time from *now* until the next ``hour_utc:00`` UTC.

    If *now* is at or past today's target the run rolls to tomorrow.
    """
    now = now.astimezone(datetime.UTC)
    target = now.replace(hour=hour_utc, minute=0, second=0, microsecond=0)
    if now >= target:
        target += datetime.timedelta(days=1)
    return target - now


class CheckScheduler:
    """Background task that runs the resource check on a daily schedule.

    The first iteration runs immediately (when ``run_on_startup`` is set);
    afterwards each iteration waits until the next ``hour_utc``.  Every
    check is followed by a short fixed pause.  A failing check is logged
    and the loop carries on.  ``stop()`` cancels the loop at whatever it is
    currently awaiting (schedule wait, pause, CPU warm-up, retry backoff)
    and never starts a pending check.

    Usage::

        scheduler = CheckScheduler(check_fn=check.run_once, hour_utc=7)
        await scheduler.start()
        # ...
        await scheduler.stop()
    """

    def __init__(
        self,
        check_fn: CheckFn,
        hour_utc: int = 7,
        pause_secs: float = 5.0,
        run_on_startup: bool = True,
        clock: Clock = utcnow,
    ) -> None:
        if not 0 <= hour_utc <= 23:
            raise ValueError(f"hour_utc must be in [0, 23], got {hour_utc}")
        self._check_fn = check_fn
        self._hour_utc = hour_utc
        self._pause_secs = pause_secs
        self._run_on_startup = run_on_startup
        self._clock = clock
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task[None] | None = None
        self._running = False
        self._check_count = 0
        self._error_count = 0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def check_count(self) -> int:
        return self._check_count

    @property
    def error_count(self) -> int:
        return self._error_count

    async def start(self) -> None:
        if self._task is not None and not self._task.done():
            return
        self._stop_event.clear()
        self._task = asyncio.create_task(self.run())

    async def stop(self) -> None:
        """Signal the loop and interrupt whatever it is awaiting."""
        self._stop_event.set()
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    def next_delay(self) -> datetime.timedelta:
        return next_run_delay(self._clock(), self._hour_utc)

    async def run(self) -> None:
        """Run the loop in the current task until ``stop()`` is called."""
        self._running = True
        logger.info(
            "monitor_started",
            hour_utc=self._hour_utc,
            pause_secs=self._pause_secs,
        )
        first = self._run_on_startup
        try:
            while not self._stop_event.is_set():
                if first:
                    logger.info("initial_check")
                else:
                    delay = self.next_delay()
                    logger.info(
                        "next_check_scheduled",
                        delay_secs=round(delay.total_seconds()),
                        at=(self._clock() + delay).isoformat(),
                    )
                    if await self._wait(delay.total_seconds()):
                        break
                first = False

                await self._run_check()

                if await self._wait(self._pause_secs):
                    break
        except asyncio.CancelledError:
            logger.info("monitor_cancelled")
        finally:
            self._running = False
            logger.info("monitor_stopped", checks=self._check_count)

    async def _run_check(self) -> None:
        self._check_count += 1
        try:
            await self._check_fn()
        except asyncio.CancelledError:
            raise
        except Exception:
            self._error_count += 1
            logger.exception("resource_check_failed", error_count=self._error_count)

    async def _wait(self, secs: float) -> bool:
        """Sleep up to *secs*; return True if stop was requested meanwhile."""
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=max(secs, 0.0))
        except TimeoutError:
            return False
        return True
