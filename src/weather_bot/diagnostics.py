"""Diagnostic log and per-controller session state."""

from __future__ import annotations

import logging
import traceback
from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar

from .models import LogEntry
from .waiting import Clock, SystemClock

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class DiagnosticLog:
    """Append-only, timestamped record of operations for post-mortem debugging."""

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock = clock or SystemClock()
        self._entries: List[LogEntry] = []

    def append(self, message: str) -> LogEntry:
        entry = LogEntry(message=message, timestamp=self._clock.now())
        self._entries.append(entry)
        LOGGER.debug(entry.render())
        return entry

    def append_error(self, exc: BaseException) -> LogEntry:
        return self.append(f"Error: {format_exception(exc)}")

    @property
    def entries(self) -> List[LogEntry]:
        return list(self._entries)

    def render(self) -> str:
        return "".join(f"{entry.render()}\n" for entry in self._entries)

    def __len__(self) -> int:
        return len(self._entries)


@dataclass
class SessionState:
    """State owned by exactly one controller: its log and screenshot cache."""

    log: DiagnosticLog = field(default_factory=DiagnosticLog)
    screenshot: Optional[bytes] = None


@dataclass
class BestEffort(Generic[T]):
    """Outcome of an operation that never raises.

    ``degraded`` is set when the operation failed; ``entry`` is the log line
    recorded for the failure.
    """

    value: T
    degraded: bool = False
    entry: Optional[LogEntry] = None


def format_exception(exc: BaseException) -> str:
    """Return ``Type: message`` followed by the traceback frames, if any."""

    summary = "".join(traceback.format_exception_only(type(exc), exc)).rstrip()
    frames = "".join(traceback.format_tb(exc.__traceback__)).rstrip()
    if not frames:
        return summary
    return f"{summary}\n{frames}"
