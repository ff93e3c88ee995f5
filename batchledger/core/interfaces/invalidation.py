"""Outbound port to the cache layer."""

from abc import ABC, abstractmethod

from batchledger.core.entities.events import InvalidationEvent


class IInvalidationSink(ABC):
    """Receives post-commit invalidation events.

    Delivery is fire-and-forget: the ledger never waits on it and a failure
    here never affects a committed operation.
    """

    @abstractmethod
    async def publish(self, event: InvalidationEvent) -> None:
        pass
