"""
Clock abstraction for timeout-bounded waits.

Code that waits for something with a deadline reads time through a Clock
instead of calling time.monotonic() and time.sleep() directly. Production
code uses SystemClock; tests use ManualClock, which only moves when told to,
so a 60 second deadline can be exercised in milliseconds.

Example Usage:
    clock = SystemClock()
    start_t = clock.now()
    while not done():
        if is_timed_out(clock.now() - start_t, 60.0):
            raise TimeoutError
        clock.sleep(0.1)

    # In tests
    clock = ManualClock()
    clock.advance(60.001)
"""

import abc
import threading
import time


def is_timed_out(elapsed: float, timeout: float) -> bool:
    """
    Check whether elapsed time has exceeded a timeout.

    The boundary is exclusive: an elapsed time exactly equal to the timeout
    is not timed out.

    Args:
        elapsed: Elapsed time in seconds
        timeout: Timeout in seconds

    Returns:
        True if elapsed is strictly greater than timeout
    """
    return elapsed > timeout


class Clock(abc.ABC):
    """Source of monotonic time and of sleeping."""

    @abc.abstractmethod
    def now(self) -> float:
        """Return the current time in seconds on a monotonic scale."""
        pass  # pragma: no cover

    @abc.abstractmethod
    def sleep(self, secs: float) -> None:
        """Yield the calling thread for about secs seconds."""
        pass  # pragma: no cover

    def since(self, start_t: float) -> float:
        """Seconds elapsed since start_t, as read from this clock."""
        return self.now() - start_t


class SystemClock(Clock):
    """Wall-clock implementation backed by time.monotonic() and time.sleep()."""

    def now(self) -> float:
        return time.monotonic()

    def sleep(self, secs: float) -> None:
        time.sleep(secs)


class ManualClock(Clock):
    """
    Manually advanced clock for deterministic tests.

    Time only moves through advance() or set_time(). sleep() does not move
    time; it blocks the caller until another thread advances the clock or
    until max_real_wait real seconds have passed, so a polling loop driven by
    this clock neither busy-spins nor runs ahead of the test.

    Thread-safe: one thread may poll while another advances.

    Example:
        clock = ManualClock()
        t0 = clock.now()
        clock.advance(61)
        assert clock.since(t0) == 61
    """

    def __init__(self, start: float = 0.0, max_real_wait: float = 0.01) -> None:
        """
        Initialize the clock.

        Args:
            start: Initial time in seconds
            max_real_wait: Upper bound in real seconds that sleep() blocks
                waiting for an advance
        """
        self._now = start
        self._max_real_wait = max_real_wait
        self._cond = threading.Condition()
        self.sleeps: list[float] = []

    def now(self) -> float:
        with self._cond:
            return self._now

    def sleep(self, secs: float) -> None:
        with self._cond:
            self.sleeps.append(secs)
            started = self._now
            self._cond.wait_for(
                lambda: self._now != started, timeout=min(secs, self._max_real_wait)
            )

    def advance(self, secs: float) -> None:
        """Move the clock forward by secs seconds and wake sleepers."""
        if secs < 0:
            raise ValueError(f"cannot advance clock backwards: {secs}")
        with self._cond:
            self._now += secs
            self._cond.notify_all()

    def set_time(self, t: float) -> None:
        """Set the clock to an absolute time and wake sleepers."""
        with self._cond:
            self._now = t
            self._cond.notify_all()
