"""Kernel time – where event timestamps come from, and how they are rendered."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Source of the ``created`` timestamp the event log stamps on each commit."""

    def now(self) -> datetime: ...


class SystemClock:
    def now(self) -> datetime:
        return utc_now()


class FrozenClock:
    """Clock that only moves when told to.

    Naive datetimes are taken to be UTC.
    """

    def __init__(self, at: datetime) -> None:
        self._at = _aware(at)

    def now(self) -> datetime:
        return self._at

    def set(self, at: datetime) -> None:
        self._at = _aware(at)

    def advance(self, delta: timedelta | None = None, **kwargs: float) -> datetime:
        """Move forward by *delta* or ``timedelta(**kwargs)``; returns the new time."""
        self._at += delta if delta is not None else timedelta(**kwargs)
        return self._at


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def utc_now() -> datetime:
    return datetime.now(UTC)


def to_iso(value: datetime) -> str:
    """Wire form of an event timestamp: UTC, milliseconds, ``Z`` suffix."""
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


__all__ = ["Clock", "FrozenClock", "SystemClock", "to_iso", "utc_now"]
