"""
Injectable time source.

Tenure and the monthly checkpoint are both calendar computations, so no
service reads the wall clock directly: they ask a ``Clock``.  Production
uses ``SystemClock``; tests pin the date with ``DeterministicClock``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone, tzinfo

_DEFAULT_FIXED_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class Clock(ABC):
    """Source of the current instant."""

    @abstractmethod
    def now(self) -> datetime:
        """Timezone-aware current instant in the clock's own zone."""

    def now_utc(self) -> datetime:
        return self.now().astimezone(timezone.utc)

    def today(self) -> date:
        """Calendar date in the clock's own zone."""
        return self.now().date()


class SystemClock(Clock):
    """Wall clock.

    Month boundaries and anniversaries are calendar events for the payroll
    office, so the host's local zone is used unless ``tz`` is given.
    """

    def __init__(self, tz: tzinfo | None = None):
        self._tz = tz

    def now(self) -> datetime:
        if self._tz is None:
            return datetime.now().astimezone()
        return datetime.now(self._tz)


class DeterministicClock(Clock):
    """Clock that only moves when told to."""

    def __init__(self, fixed_time: datetime | None = None):
        self._current = fixed_time or _DEFAULT_FIXED_TIME

    def now(self) -> datetime:
        return self._current

    def set_time(self, time: datetime) -> None:
        self._current = time

    def advance(self, seconds: float = 1) -> None:
        self._current += timedelta(seconds=seconds)

    def tick(self) -> datetime:
        """Move forward one second and return the new instant."""
        self.advance(1)
        return self._current
