"""
Tick Driver
===========

Fixed-rate driver for a LoopController.

Ticks never overlap. The next tick is due one interval after the previous one
started, so a slow tick only delays the next one and a late poll never
triggers catch-up ticks. The driver is enabled only while the controller is
Running; leaving Running (or calling stop()) halts it before another tick
starts.

Two ways to drive a game:

    # Cooperative, from a host loop that owns the frame rate (e.g. pygame)
    result = driver.poll()

    # Blocking, until the run ends or stop() is called
    driver.run(on_tick=render)
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from flipshoot.core.game import LoopController, TickResult

logger = logging.getLogger(__name__)


class TickDriver:
    """Schedules LoopController.tick() at a fixed interval."""

    def __init__(
        self,
        controller: LoopController,
        interval: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep
    ):
        """
        Initialize the driver.

        Args:
            controller: Controller to tick.
            interval: Seconds between ticks. Uses loop.tick_interval_ms if None.
            clock: Monotonic time source in seconds.
            sleep: Blocking sleep used by run().
        """
        if interval is None:
            interval = controller.config.loop.tick_interval
        if interval <= 0:
            raise ValueError(f"Tick interval must be positive, got {interval}")

        self._controller = controller
        self._interval = interval
        self._clock = clock
        self._sleep = sleep

        self._stopped = False
        self._in_tick = False
        self._next_due: Optional[float] = None
        self._armed_run_id: Optional[int] = None
        self._ticks = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def ticks(self) -> int:
        """Ticks executed by this driver."""
        return self._ticks

    @property
    def enabled(self) -> bool:
        """True while the controller is Running and the driver is not stopped."""
        return not self._stopped and self._controller.is_running

    @property
    def stopped(self) -> bool:
        return self._stopped

    def stop(self) -> None:
        """Disable the driver. No tick starts after this returns."""
        if not self._stopped:
            logger.debug("Tick driver stopped after %d ticks", self._ticks)
        self._stopped = True

    def resume(self) -> None:
        """Re-enable a stopped driver. The schedule restarts on the next poll."""
        self._stopped = False
        self._next_due = None

    def time_until_due(self) -> float:
        """Seconds until the next tick is due (0 if overdue or unscheduled)."""
        if self._next_due is None:
            return 0.0
        return max(0.0, self._next_due - self._clock())

    def poll(self) -> Optional[TickResult]:
        """
        Run one tick if one is due.

        Returns:
            The TickResult, or None if the driver is disabled or no tick is due.

        Raises:
            RuntimeError: If called from inside a tick callback.
        """
        if self._in_tick:
            raise RuntimeError("TickDriver.poll() re-entered while a tick is running")
        if not self.enabled:
            return None

        now = self._clock()
        self._arm(now)
        if now < self._next_due:
            return None

        self._in_tick = True
        try:
            result = self._controller.tick()
        finally:
            self._in_tick = False

        self._ticks += 1
        self._next_due = now + self._interval
        return result

    def run(
        self,
        max_ticks: Optional[int] = None,
        on_tick: Optional[Callable[[TickResult], None]] = None
    ) -> int:
        """
        Block and tick until the driver is disabled.

        Args:
            max_ticks: Stop after this many ticks (None = until the run ends).
            on_tick: Called with every TickResult, after the tick commits.

        Returns:
            Number of ticks executed by this call.
        """
        if self._in_tick:
            raise RuntimeError("TickDriver.run() re-entered while a tick is running")

        executed = 0
        while self.enabled:
            if max_ticks is not None and executed >= max_ticks:
                break

            wait = self.time_until_due()
            if wait > 0:
                self._sleep(wait)
                continue

            result = self.poll()
            if result is None:
                continue
            executed += 1

            if on_tick is not None:
                self._in_tick = True
                try:
                    on_tick(result)
                finally:
                    self._in_tick = False

        return executed

    def _arm(self, now: float) -> None:
        """Restart the schedule when a new run begins."""
        run_id = self._controller.run_id
        if self._next_due is None or run_id != self._armed_run_id:
            self._armed_run_id = run_id
            self._next_due = now
