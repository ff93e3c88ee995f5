"""Clock implementations."""

from datetime import datetime, timedelta

from batchledger.core.entities.timestamps import utc_now
from batchledger.core.interfaces.clock import IClock


class SystemClock(IClock):
    """Wall clock in naive UTC."""

    def now(self) -> datetime:
        return utc_now()


class FixedClock(IClock):
    """Clock pinned to a given instant; ``advance`` moves it forward."""

    def __init__(self, fixed: datetime):
        self._now = fixed

    def now(self) -> datetime:
        return self._now

    def advance(self, **kwargs: float) -> None:
        self._now += timedelta(**kwargs)
