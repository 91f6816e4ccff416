"""Blocking waits with an injectable clock."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Callable, Optional, Protocol, TypeVar

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class WaitTimeoutError(TimeoutError):
    """Raised when a polled condition does not hold before its deadline."""


class Clock(Protocol):
    """Source of time used for pauses, polling deadlines and log timestamps."""

    def monotonic(self) -> float:
        """Return a monotonically increasing number of seconds."""

    def sleep(self, seconds: float) -> None:
        """Block the calling thread for ``seconds``."""

    def now(self) -> datetime:
        """Return the current wall-clock time in UTC."""


class SystemClock:
    """Clock backed by the real process time."""

    def monotonic(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


def poll_until(
    predicate: Callable[[], Optional[T]],
    *,
    timeout: float,
    interval: float,
    clock: Clock,
    ignored: tuple[type[BaseException], ...] = (),
    message: str = "",
) -> T:
    """Call ``predicate`` until it returns a truthy value or ``timeout`` elapses.

    Exceptions listed in ``ignored`` count as "not yet". The last one is chained
    onto the :class:`WaitTimeoutError` raised at the deadline. Sleeps never run
    past the deadline.
    """

    deadline = clock.monotonic() + timeout
    last_error: Optional[BaseException] = None
    while True:
        try:
            value = predicate()
            if value:
                return value
        except ignored as exc:
            last_error = exc
        remaining = deadline - clock.monotonic()
        if remaining <= 0:
            break
        clock.sleep(min(interval, remaining))
    LOGGER.debug("Condition not met after %.2fs", timeout)
    error = WaitTimeoutError(message or f"Timed out after {timeout} seconds")
    if last_error is not None:
        raise error from last_error
    raise error
