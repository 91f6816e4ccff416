from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest


class ManualClock:
    """Clock whose time only moves when something sleeps."""

    def __init__(self) -> None:
        self.elapsed = 0.0
        self.sleeps: list[float] = []
        self.start = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)

    def monotonic(self) -> float:
        return self.elapsed

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.elapsed += seconds

    def now(self) -> datetime:
        return self.start + timedelta(seconds=self.elapsed)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()
