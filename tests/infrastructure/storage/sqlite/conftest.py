"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from datetime import date
from decimal import Decimal
from pathlib import Path
from unittest.mock import MagicMock

import aiosqlite
import pytest

from batchledger.core.entities.batch import Batch
from batchledger.infrastructure.storage.sqlite.aggregate_store import (
    SQLiteMaterialAggregateStore,
)
from batchledger.infrastructure.storage.sqlite.batch_store import SQLiteBatchStore
from batchledger.infrastructure.storage.sqlite.movement_store import SQLiteMovementLedger


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
async def conn(ledger_db: Path) -> AsyncGenerator[aiosqlite.Connection, None]:
    """Raw connection to a migrated database."""
    async with aiosqlite.connect(ledger_db) as conn:
        await conn.execute("PRAGMA foreign_keys=ON")
        conn.row_factory = aiosqlite.Row
        yield conn


@pytest.fixture
def batch_store(conn: aiosqlite.Connection) -> SQLiteBatchStore:
    return SQLiteBatchStore(conn)


@pytest.fixture
def movement_ledger(conn: aiosqlite.Connection) -> SQLiteMovementLedger:
    return SQLiteMovementLedger(conn)


@pytest.fixture
def aggregate_store(conn: aiosqlite.Connection) -> SQLiteMaterialAggregateStore:
    return SQLiteMaterialAggregateStore(conn)


@pytest.fixture
def new_batch():
    """Factory for unsaved batches."""

    def factory(**overrides) -> Batch:
        quantity = Decimal(overrides.pop("quantity", "10"))
        data = {
            "material_id": "MAT-001",
            "batch_number": "B-1",
            "supplier_id": "SUP-1",
            "receipt_date": date(2026, 1, 10),
            "quantity_received": quantity,
            "remaining_quantity": quantity,
            "unit_cost": Decimal("2.5"),
        }
        data.update(overrides)
        return Batch(**data)

    return factory


@pytest.fixture
def mock_settings(temp_db_path: Path):
    """Mock settings with temp database path."""
    mock = MagicMock()
    mock.storage.db_path = temp_db_path
    mock.storage.pool_size = 2
    mock.storage.busy_timeout = 5000
    return mock
