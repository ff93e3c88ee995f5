"""SQLite storage implementations."""

from batchledger.infrastructure.storage.sqlite.aggregate_store import (
    SQLiteMaterialAggregateStore,
)
from batchledger.infrastructure.storage.sqlite.batch_store import SQLiteBatchStore
from batchledger.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from batchledger.infrastructure.storage.sqlite.movement_store import SQLiteMovementLedger
from batchledger.infrastructure.storage.sqlite.unit_of_work import (
    SQLiteLedgerSession,
    SQLiteUnitOfWork,
)

# Singleton instance
_unit_of_work: SQLiteUnitOfWork | None = None


async def get_unit_of_work() -> SQLiteUnitOfWork:
    """Get singleton unit of work on the global connection pool."""
    global _unit_of_work
    if _unit_of_work is None:
        _unit_of_work = SQLiteUnitOfWork(await get_pool())
    return _unit_of_work


def reset_unit_of_work() -> None:
    """Forget the singleton (for testing, after close_pool)."""
    global _unit_of_work
    _unit_of_work = None


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteBatchStore",
    "SQLiteMovementLedger",
    "SQLiteMaterialAggregateStore",
    "SQLiteLedgerSession",
    "SQLiteUnitOfWork",
    # Factory functions
    "get_unit_of_work",
    "reset_unit_of_work",
]
