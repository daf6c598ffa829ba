"""Injectable time source.

Ledger operations never read the wall clock directly; they ask the clock they
were built with, which keeps every window and period decision reproducible.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        """Return the current instant as a timezone-aware datetime."""
        ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock:
    """Clock that only moves when told to. Used by tests and replays."""

    def __init__(self, fixed_time: datetime | None = None) -> None:
        self._current = fixed_time or datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        if self._current.tzinfo is None:
            raise ValueError("DeterministicClock requires a timezone-aware datetime")

    def now(self) -> datetime:
        return self._current

    def set_time(self, moment: datetime) -> None:
        if moment.tzinfo is None:
            raise ValueError("DeterministicClock requires a timezone-aware datetime")
        self._current = moment

    def advance(self, seconds: float = 0, **kwargs: float) -> datetime:
        self._current = self._current + timedelta(seconds=seconds, **kwargs)
        return self._current
