"""Fixed-window admission control for registration API requests.

Responsibilities:
- Bound how many requests are admitted within one time window.
- Reset the admission budget on a fixed-rate background schedule.
- Let blocked callers be cancelled or time out without leaking permits.

The limiter counts admissions per window, not concurrent requests: a
replenishment restores the full budget even while earlier requests are still
in flight.
"""

from __future__ import annotations

from contextlib import contextmanager
from enum import Enum
import threading
from time import monotonic
from typing import Callable, Iterator

from ..parsing import normalize_optional_string


class WindowUnit(Enum):
    """Time granularity of one replenishment window, valued in seconds."""

    MILLISECONDS = 0.001
    SECONDS = 1.0
    MINUTES = 60.0
    HOURS = 3600.0
    DAYS = 86400.0

    @property
    def seconds(self) -> float:
        """Return the window length in seconds."""

        return float(self.value)

    @classmethod
    def parse(cls, value: object) -> WindowUnit:
        """Parse a unit from an enum member or a textual alias such as `second` or `min`."""

        if isinstance(value, WindowUnit):
            return value
        normalized = normalize_optional_string(value)
        if normalized is None:
            raise ValueError("Window unit must be a non-empty value.")
        unit = _WINDOW_UNIT_ALIASES.get(normalized.lower())
        if unit is None:
            supported = ", ".join(member.name.lower() for member in cls)
            raise ValueError(f"Unsupported window unit `{normalized}`; supported: {supported}.")
        return unit


_WINDOW_UNIT_ALIASES: dict[str, WindowUnit] = {
    "ms": WindowUnit.MILLISECONDS,
    "millisecond": WindowUnit.MILLISECONDS,
    "milliseconds": WindowUnit.MILLISECONDS,
    "s": WindowUnit.SECONDS,
    "sec": WindowUnit.SECONDS,
    "second": WindowUnit.SECONDS,
    "seconds": WindowUnit.SECONDS,
    "m": WindowUnit.MINUTES,
    "min": WindowUnit.MINUTES,
    "minute": WindowUnit.MINUTES,
    "minutes": WindowUnit.MINUTES,
    "h": WindowUnit.HOURS,
    "hour": WindowUnit.HOURS,
    "hours": WindowUnit.HOURS,
    "d": WindowUnit.DAYS,
    "day": WindowUnit.DAYS,
    "days": WindowUnit.DAYS,
}


class PermitError(RuntimeError):
    """Raised when a permit could not be granted to a waiting caller."""


class PermitCancelledError(PermitError):
    """Raised when a caller is cancelled while waiting for a permit."""


class PermitTimeoutError(PermitError):
    """Raised when no permit became available before the caller's timeout."""


class RateLimiter:
    """Thread-safe counting gate replenished to full capacity every window."""

    # Upper bound on how long a cancellable waiter sleeps between checks.
    _CANCEL_POLL_SECONDS = 0.05

    def __init__(
        self,
        capacity: int,
        window_seconds: float,
        *,
        clock: Callable[[], float] = monotonic,
        start: bool = True,
    ) -> None:
        """Validate limits and start the replenishment schedule when requested."""

        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise ValueError("`capacity` must be a positive integer.")
        if isinstance(window_seconds, bool) or window_seconds <= 0:
            raise ValueError("`window_seconds` must be a positive number.")

        self._capacity = capacity
        self._window_seconds = float(window_seconds)
        self._clock = clock
        self._available = capacity
        self._condition = threading.Condition(threading.Lock())
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        if start:
            self._thread = threading.Thread(
                target=self._run_schedule,
                name="rate-limiter-replenish",
                daemon=True,
            )
            self._thread.start()

    @classmethod
    def for_unit(cls, capacity: int, unit: WindowUnit, *, start: bool = True) -> RateLimiter:
        """Create a limiter admitting `capacity` requests per one `unit` window."""

        return cls(capacity, WindowUnit.parse(unit).seconds, start=start)

    @property
    def capacity(self) -> int:
        """Maximum admissions per window."""

        return self._capacity

    @property
    def window_seconds(self) -> float:
        """Replenishment period in seconds."""

        return self._window_seconds

    @property
    def available(self) -> int:
        """Permits currently available for immediate admission."""

        with self._condition:
            return self._available

    @property
    def is_running(self) -> bool:
        """Return whether the replenishment schedule is still active."""

        thread = self._thread
        return thread is not None and thread.is_alive() and not self._stop_event.is_set()

    def acquire(
        self,
        *,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        """Block until a permit is available and take it.

        Args:
            timeout: Optional maximum wait in seconds.
            cancel_event: Optional event; once set, a waiting call stops waiting.

        Raises:
            PermitCancelledError: If `cancel_event` is set before a permit is taken.
            PermitTimeoutError: If `timeout` elapses before a permit is available.
        """

        deadline = None if timeout is None else self._clock() + max(0.0, timeout)
        with self._condition:
            try:
                while True:
                    if cancel_event is not None and cancel_event.is_set():
                        raise PermitCancelledError(
                            "Cancelled while waiting for a rate-limit permit."
                        )
                    if self._available > 0:
                        self._available -= 1
                        return
                    self._condition.wait(self._wait_slice(deadline, cancel_event))
            except PermitError:
                # A wakeup consumed by a departing waiter passes to the next one.
                if self._available > 0:
                    self._condition.notify()
                raise

    def try_acquire(self) -> bool:
        """Take a permit without blocking and report whether one was available."""

        with self._condition:
            if self._available <= 0:
                return False
            self._available -= 1
            return True

    def release(self) -> None:
        """Return one permit, never raising `available` above `capacity`."""

        with self._condition:
            if self._available < self._capacity:
                self._available += 1
                self._condition.notify()

    def replenish(self) -> int:
        """Reset `available` to `capacity` and return how many permits were restored."""

        with self._condition:
            restored = self._capacity - self._available
            self._available = self._capacity
            if restored > 0:
                self._condition.notify(restored)
            return restored

    @contextmanager
    def permit(
        self,
        *,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> Iterator[None]:
        """Hold one permit for the duration of a `with` block."""

        self.acquire(timeout=timeout, cancel_event=cancel_event)
        try:
            yield
        finally:
            self.release()

    def shutdown(self) -> None:
        """Stop the replenishment schedule; permits keep working as a plain semaphore."""

        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()

    def _wait_slice(
        self,
        deadline: float | None,
        cancel_event: threading.Event | None,
    ) -> float | None:
        """Return the next condition wait duration, raising once the deadline passed."""

        remaining: float | None = None
        if deadline is not None:
            remaining = deadline - self._clock()
            if remaining <= 0.0:
                raise PermitTimeoutError("Timed out waiting for a rate-limit permit.")
        if cancel_event is None:
            return remaining
        if remaining is None:
            return self._CANCEL_POLL_SECONDS
        return min(remaining, self._CANCEL_POLL_SECONDS)

    def _run_schedule(self) -> None:
        """Replenish at a fixed rate until `shutdown` is requested."""

        next_tick = self._clock() + self._window_seconds
        while not self._stop_event.wait(max(0.0, next_tick - self._clock())):
            self.replenish()
            next_tick += self._window_seconds
            now = self._clock()
            if next_tick <= now:
                # Missed ticks collapse into one reset.
                skipped = int((now - next_tick) // self._window_seconds) + 1
                next_tick += skipped * self._window_seconds
