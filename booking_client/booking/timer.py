from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Optional

logger = logging.getLogger("booking.timer")


class CountdownTimer:
    """
    Owned countdown for the payment review hold.

    At most one interval task exists per timer: `start` always tears the previous
    one down first. When no event loop is running the owner drives `tick()` itself.
    """

    def __init__(
        self,
        seconds: int = 300,
        on_expire: Optional[Callable[[], None]] = None,
        interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.seconds = seconds
        self.on_expire = on_expire
        self.interval = interval
        self.clock = clock

        self.remaining = seconds
        self.active = False
        self.expired = False
        self._task: Optional[asyncio.Task] = None
        self._suspended_at: Optional[float] = None
        # wall time not yet charged to `remaining`
        self._carry = 0.0
        self._last_tick: Optional[float] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def suspended(self) -> bool:
        return self._suspended_at is not None

    # ---------------- lifecycle ----------------
    def start(self) -> None:
        self.stop()
        self.remaining = self.seconds
        self.expired = False
        self.active = True
        self._carry = 0.0
        self._last_tick = self.clock()
        self._arm()
        logger.debug("Countdown started: %ss", self.seconds)

    def stop(self) -> None:
        self.active = False
        self._suspended_at = None
        self._carry = 0.0
        self._last_tick = None
        self._cancel_interval()

    def reset(self) -> None:
        self.stop()
        self.remaining = self.seconds
        self.expired = False

    def suspend(self) -> None:
        """Cancel the interval but keep counting against the clock."""
        if not self.active or self.suspended:
            return
        self._cancel_interval()
        now = self.clock()
        # the part of the current second already spent still counts
        if self._last_tick is not None:
            self._carry += max(0.0, now - self._last_tick)
        self._suspended_at = now

    def resume(self) -> None:
        """Catch up on the time spent suspended, then re-arm the interval."""
        if not self.suspended:
            return
        now = self.clock()
        self._carry += max(0.0, now - self._suspended_at)
        self._suspended_at = None
        self._last_tick = now
        whole = int(self._carry + 1e-6)
        self._carry = max(0.0, self._carry - whole)
        self.advance(whole)
        if self.active and not self.expired:
            self._arm()

    # ---------------- counting ----------------
    def tick(self) -> None:
        if not self.active or self.suspended or self.expired:
            return
        self._last_tick = self.clock()
        self.advance(1)

    def advance(self, seconds: int) -> None:
        if not self.active or self.expired or seconds <= 0:
            return
        self.remaining = max(0, self.remaining - seconds)
        if self.remaining == 0:
            self._expire()

    def _expire(self) -> None:
        if self.expired:
            return
        self.expired = True
        self.active = False
        self._cancel_interval()
        logger.info("Countdown reached zero")
        if self.on_expire is not None:
            self.on_expire()

    # ---------------- interval task ----------------
    def _arm(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # no loop: ticks come from the owner
            return
        self._task = loop.create_task(self._run())

    async def _run(self) -> None:
        while self.active and not self.expired:
            await asyncio.sleep(self.interval)
            self.tick()

    def _cancel_interval(self) -> None:
        task, self._task = self._task, None
        if task is None or task.done():
            return
        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None
        if task is not current:
            task.cancel()
