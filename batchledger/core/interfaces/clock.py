"""Injectable time source."""

from abc import ABC, abstractmethod
from datetime import date, datetime


class IClock(ABC):
    """Clock used for receipt and movement dates.

    Use cases never call ``date.today()`` directly so that tests can pin time.
    """

    @abstractmethod
    def now(self) -> datetime:
        """Current naive UTC time."""
        ...

    def today(self) -> date:
        return self.now().date()
