"""Testing fakes – FakeClock."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

from es_commerce.kernel.time import FrozenClock

EPOCH = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


class FakeClock(FrozenClock):
    """Deterministic clock for shop tests, starting at 2026-01-01 12:00 UTC.

    With *step* set, every reading moves the clock forward by that much, so
    consecutive commits get distinct ``created`` timestamps.
    """

    def __init__(self, at: datetime = EPOCH, *, step: timedelta | None = None) -> None:
        super().__init__(at)
        self.step = step
        self.readings = 0

    def now(self) -> datetime:
        current = super().now()
        self.readings += 1
        if self.step:
            self.advance(self.step)
        return current


__all__ = ["EPOCH", "FakeClock"]
