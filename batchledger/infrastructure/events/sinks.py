"""Invalidation sinks and post-commit dispatch."""

import asyncio

from batchledger.config import get_logger
from batchledger.core.entities.events import InvalidationEvent
from batchledger.core.interfaces.invalidation import IInvalidationSink

logger = get_logger(__name__)


class NullInvalidationSink(IInvalidationSink):
    """Drops every event."""

    async def publish(self, event: InvalidationEvent) -> None:
        return None


class LoggingInvalidationSink(IInvalidationSink):
    """Logs events; the default when no cache layer is attached."""

    async def publish(self, event: InvalidationEvent) -> None:
        logger.info(
            "cache_invalidated",
            material_id=event.material_id,
            location_id=event.location_id,
        )


class RecordingInvalidationSink(IInvalidationSink):
    """Keeps every event in memory, in delivery order."""

    def __init__(self):
        self.events: list[InvalidationEvent] = []

    async def publish(self, event: InvalidationEvent) -> None:
        self.events.append(event)


class InvalidationDispatcher:
    """
    Hands committed events to a sink without waiting on it.

    Each event is published in its own task. Failures are logged at warning
    and never reach the caller of the ledger operation.
    """

    def __init__(self, sink: IInvalidationSink):
        self.sink = sink
        self._pending: set[asyncio.Task] = set()

    def dispatch(self, events: list[InvalidationEvent]) -> None:
        for event in dict.fromkeys(events):
            task = asyncio.create_task(self._deliver(event))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

    async def _deliver(self, event: InvalidationEvent) -> None:
        try:
            await self.sink.publish(event)
        except Exception as e:
            logger.warning(
                "invalidation_delivery_failed",
                material_id=event.material_id,
                location_id=event.location_id,
                error=str(e),
            )

    async def drain(self) -> None:
        """Wait for in-flight deliveries (shutdown and tests)."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
