"""
Injectable source of "today".

The asset service uses it for the default as-of date of depreciation
postings and the refresh run. The reference cache uses it to expire
entries. Engines never consult a clock; every date they use is an argument.
"""

from abc import ABC, abstractmethod
from datetime import UTC, date, datetime, timedelta


class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime:
        """Timezone-aware UTC time."""

    def today(self) -> date:
        return self.now().date()

    def monotonic_seconds(self) -> float:
        return self.now().timestamp()


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(UTC)


class DeterministicClock(Clock):
    """
    Clock frozen at a given instant, for tests.

    Time moves only through :meth:`advance` (relative) or :meth:`set_time`
    (absolute), so a depreciation run or a cache expiry can be placed on an
    exact day.
    """

    def __init__(self, fixed_time: datetime | None = None):
        self._instant = fixed_time or datetime(2024, 1, 1, 12, 0, tzinfo=UTC)

    def now(self) -> datetime:
        return self._instant

    def set_time(self, time: datetime) -> None:
        self._instant = time

    def advance(self, seconds: float = 1) -> None:
        self._instant += timedelta(seconds=seconds)
