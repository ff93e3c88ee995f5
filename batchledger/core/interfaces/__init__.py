"""Core interfaces (ports) for dependency injection."""

from batchledger.core.interfaces.aggregate_store import IMaterialAggregateStore
from batchledger.core.interfaces.batch_store import IBatchStore
from batchledger.core.interfaces.clock import IClock
from batchledger.core.interfaces.invalidation import IInvalidationSink
from batchledger.core.interfaces.movement_ledger import IMovementLedger
from batchledger.core.interfaces.unit_of_work import ILedgerSession, IUnitOfWork

__all__ = [
    # Storage interfaces
    "IBatchStore",
    "IMovementLedger",
    "IMaterialAggregateStore",
    "ILedgerSession",
    "IUnitOfWork",
    # Collaborators
    "IClock",
    "IInvalidationSink",
]
