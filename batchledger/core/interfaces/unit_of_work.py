"""Transactional scope shared by the ledger stores."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager

from batchledger.core.interfaces.aggregate_store import IMaterialAggregateStore
from batchledger.core.interfaces.batch_store import IBatchStore
from batchledger.core.interfaces.movement_ledger import IMovementLedger


class ILedgerSession(ABC):
    """Stores bound to a single database connection."""

    batches: IBatchStore
    movements: IMovementLedger
    aggregates: IMaterialAggregateStore


class IUnitOfWork(ABC):
    """Opens ledger sessions.

    ``transaction()`` takes the write lock before yielding and commits on
    normal exit; any exception, cancellation included, rolls everything back.
    ``snapshot()`` is a read-only session that never takes the write lock.
    """

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[ILedgerSession]:
        pass

    @abstractmethod
    def snapshot(self) -> AbstractAsyncContextManager[ILedgerSession]:
        pass
