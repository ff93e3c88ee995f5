"""Unit of work binding the SQLite stores to one pooled connection."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiosqlite

from batchledger.core.interfaces.unit_of_work import ILedgerSession, IUnitOfWork
from batchledger.infrastructure.storage.sqlite.aggregate_store import (
    SQLiteMaterialAggregateStore,
)
from batchledger.infrastructure.storage.sqlite.batch_store import SQLiteBatchStore
from batchledger.infrastructure.storage.sqlite.connection import ConnectionPool
from batchledger.infrastructure.storage.sqlite.movement_store import SQLiteMovementLedger


class SQLiteLedgerSession(ILedgerSession):
    """The three ledger stores sharing a connection."""

    def __init__(self, conn: aiosqlite.Connection):
        self.conn = conn
        self.batches = SQLiteBatchStore(conn)
        self.movements = SQLiteMovementLedger(conn)
        self.aggregates = SQLiteMaterialAggregateStore(conn)


class SQLiteUnitOfWork(IUnitOfWork):
    """Opens ledger sessions on a connection pool."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[SQLiteLedgerSession]:
        async with self._pool.transaction() as conn:
            yield SQLiteLedgerSession(conn)

    @asynccontextmanager
    async def snapshot(self) -> AsyncIterator[SQLiteLedgerSession]:
        async with self._pool.snapshot() as conn:
            yield SQLiteLedgerSession(conn)
