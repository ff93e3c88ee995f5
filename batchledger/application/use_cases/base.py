"""
Shared plumbing for ledger use cases.

Write operations run in one locked transaction, retried from scratch on
ConcurrencyConflictError and bounded by the operation timeout. Invalidation
events collected during the transaction are dispatched only after commit.
"""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import timezone
from decimal import Decimal
from typing import Any, TypeVar

from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from batchledger.config import LedgerSettings, bind_operation, get_logger, get_settings
from batchledger.core.entities.events import InvalidationEvent
from batchledger.core.exceptions import ConcurrencyConflictError, ValidationError
from batchledger.core.interfaces.clock import IClock
from batchledger.core.interfaces.unit_of_work import ILedgerSession, IUnitOfWork
from batchledger.infrastructure.events import InvalidationDispatcher, LoggingInvalidationSink

logger = get_logger(__name__)

T = TypeVar("T")

WriteWork = Callable[[ILedgerSession, list[InvalidationEvent]], Awaitable[T]]
ReadWork = Callable[[ILedgerSession], Awaitable[T]]


def check_places(field: str, value: Decimal, places: int) -> Decimal:
    """Reject values with more decimal places than the ledger stores."""
    exponent = value.normalize().as_tuple().exponent
    if isinstance(exponent, int) and -exponent > places:
        raise ValidationError(field, f"more than {places} decimal places", value)
    return value


def base36_timestamp(clock: IClock) -> str:
    """Millisecond timestamp in upper-case base 36."""
    millis = int(clock.now().replace(tzinfo=timezone.utc).timestamp() * 1000)
    digits = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    encoded = ""
    while millis:
        millis, rem = divmod(millis, 36)
        encoded = digits[rem] + encoded
    return encoded or "0"


class LedgerUseCase:
    """Base class wiring a unit of work, clock, settings and event dispatch."""

    def __init__(
        self,
        unit_of_work: IUnitOfWork | None = None,
        clock: IClock | None = None,
        dispatcher: InvalidationDispatcher | None = None,
        settings: LedgerSettings | None = None,
    ):
        self._unit_of_work = unit_of_work
        self._clock = clock
        self._dispatcher = dispatcher
        self._settings = settings

    async def _get_unit_of_work(self) -> IUnitOfWork:
        if self._unit_of_work is None:
            from batchledger.infrastructure.storage.sqlite import get_unit_of_work

            self._unit_of_work = await get_unit_of_work()
        return self._unit_of_work

    @property
    def clock(self) -> IClock:
        if self._clock is None:
            from batchledger.infrastructure.clock import SystemClock

            self._clock = SystemClock()
        return self._clock

    @property
    def dispatcher(self) -> InvalidationDispatcher:
        if self._dispatcher is None:
            self._dispatcher = InvalidationDispatcher(LoggingInvalidationSink())
        return self._dispatcher

    @property
    def settings(self) -> LedgerSettings:
        if self._settings is None:
            self._settings = get_settings().ledger
        return self._settings

    def _get_retry_decorator(self, operation: str) -> Any:
        """Get tenacity retry decorator for conflict retries."""
        settings = self.settings

        def log_retry(retry_state: RetryCallState) -> None:
            logger.warning(
                "ledger_conflict_retry",
                operation=operation,
                attempt=retry_state.attempt_number,
                error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
            )

        return retry(
            stop=stop_after_attempt(settings.conflict_retries),
            wait=wait_exponential(
                multiplier=settings.retry_delay,
                min=settings.retry_delay,
                max=settings.retry_delay * (settings.retry_multiplier**3),
            ),
            retry=retry_if_exception_type(ConcurrencyConflictError),
            before_sleep=log_retry,
            reraise=True,
        )

    async def _run_write(self, operation: str, work: WriteWork[T]) -> T:
        """
        Run ``work`` in a locked transaction and dispatch its events after commit.

        Each retry starts a fresh transaction and a fresh event list. The
        timeout covers every attempt; expiry cancels the attempt in flight,
        which rolls it back.
        """
        unit_of_work = await self._get_unit_of_work()

        async def attempt() -> tuple[T, list[InvalidationEvent]]:
            events: list[InvalidationEvent] = []
            async with unit_of_work.transaction() as session:
                result = await work(session, events)
            return result, events

        with bind_operation(operation):
            result, events = await asyncio.wait_for(
                self._get_retry_decorator(operation)(attempt)(),
                timeout=self.settings.operation_timeout,
            )
        self.dispatcher.dispatch(events)
        return result

    async def _run_read(self, work: ReadWork[T]) -> T:
        """Run ``work`` on a snapshot session; never takes the write lock."""
        unit_of_work = await self._get_unit_of_work()

        async def read() -> T:
            async with unit_of_work.snapshot() as session:
                return await work(session)

        return await asyncio.wait_for(read(), timeout=self.settings.operation_timeout)
