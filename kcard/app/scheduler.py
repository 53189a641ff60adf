"""Single-worker scheduler that runs one refresh cycle per interval.

The loop refreshes immediately at start, then sleeps the full interval after
every attempt, whether it succeeded or failed. Cycles never overlap and missed
ticks are not caught up. Failures are logged and swallowed so the loop keeps
running; the previously published card stays live.
"""

from __future__ import annotations

import enum
import logging
import threading
from typing import Callable, Optional

from kcard.domain.errors import FetchError

LOGGER = logging.getLogger(__name__)

RefreshFn = Callable[[], object]
WaitFn = Callable[[float], bool]


class SchedulerState(enum.Enum):
    IDLE = "idle"
    REFRESHING = "refreshing"


class RefreshScheduler:
    """Run ``refresh`` now and then every ``interval_s`` seconds on one thread."""

    def __init__(
        self,
        refresh: RefreshFn,
        interval_s: float,
        *,
        wait: Optional[WaitFn] = None,
    ) -> None:
        """Store the refresh callable and the interval.

        Args:
            refresh: One full collect/render/publish attempt.
            interval_s: Sleep after each attempt, in seconds.
            wait: Sleep function returning ``True`` when the loop must stop.
                Defaults to waiting on the scheduler's own stop event.
        """
        if interval_s <= 0:
            raise ValueError("interval_s must be positive")
        self._refresh = refresh
        self.interval_s = float(interval_s)
        self._stop = threading.Event()
        self._wait = wait or self._stop.wait
        self._thread: Optional[threading.Thread] = None
        self.state = SchedulerState.IDLE
        self.attempts = 0
        self.failures = 0

    def run_once(self) -> bool:
        """Run a single attempt; return ``True`` when it succeeded."""
        self.state = SchedulerState.REFRESHING
        self.attempts += 1
        try:
            self._refresh()
        except FetchError as exc:
            self.failures += 1
            LOGGER.warning(
                "Refresh #%d aborted: %s failed (%s): %s",
                self.attempts,
                exc.source,
                exc.code,
                exc.message,
            )
            return False
        except Exception:
            self.failures += 1
            LOGGER.exception("Refresh #%d failed unexpectedly", self.attempts)
            return False
        finally:
            self.state = SchedulerState.IDLE
        return True

    def run_forever(self, max_cycles: Optional[int] = None) -> None:
        """Loop until stopped, or until ``max_cycles`` attempts have run."""
        cycles = 0
        while not self._stop.is_set():
            self.run_once()
            cycles += 1
            if max_cycles is not None and cycles >= max_cycles:
                break
            if self._wait(self.interval_s):
                break
        LOGGER.info("Refresh loop stopped after %d attempts", self.attempts)

    def start(self) -> None:
        """Start the loop on a daemon thread; a live worker is never doubled."""
        if self._thread is not None and self._thread.is_alive():
            LOGGER.warning("Refresh loop already running, not starting another")
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self.run_forever, name="kcard-refresh", daemon=True)
        self._thread.start()
        LOGGER.info("Refresh loop started, interval %.0fs", self.interval_s)

    def stop(self, timeout: Optional[float] = 10.0) -> bool:
        """Signal the loop and wait for it; return ``False`` if a cycle is still running.

        The thread handle is kept until the worker has exited, so ``start`` cannot
        launch a second worker next to one that is finishing a slow cycle.
        """
        self._stop.set()
        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout=timeout)
        if thread.is_alive():
            LOGGER.warning("Refresh loop still finishing a cycle after waiting %ss", timeout)
            return False
        self._thread = None
        return True


__all__ = ["RefreshScheduler", "SchedulerState"]
