"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator
from datetime import datetime
from pathlib import Path

import pytest

from batchledger.application.ledger import InventoryLedger
from batchledger.config import LedgerSettings, reset_settings
from batchledger.infrastructure.clock import FixedClock
from batchledger.infrastructure.events import RecordingInvalidationSink
from batchledger.infrastructure.storage.sqlite import ConnectionPool, SQLiteUnitOfWork
from batchledger.infrastructure.storage.sqlite.migrations import initialize_database


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep every test's settings and data directory inside tmp_path."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def ledger_settings() -> LedgerSettings:
    """Ledger settings with short retry delays."""
    return LedgerSettings(
        conflict_retries=3,
        retry_delay=0.01,
        retry_multiplier=2.0,
        operation_timeout=10.0,
    )


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2026, 3, 2, 9, 30))


@pytest.fixture
def sink() -> RecordingInvalidationSink:
    return RecordingInvalidationSink()


@pytest.fixture
async def ledger_db(tmp_path: Path) -> Path:
    """Temporary database with every migration applied."""
    db_path = tmp_path / "ledger.db"
    await initialize_database(db_path, create_backup_before=False)
    return db_path


@pytest.fixture
async def pool(ledger_db: Path) -> AsyncGenerator[ConnectionPool, None]:
    pool = ConnectionPool(ledger_db, pool_size=3, busy_timeout=5000)
    await pool.initialize()
    yield pool
    await pool.close()


@pytest.fixture
def ledger(
    pool: ConnectionPool,
    clock: FixedClock,
    sink: RecordingInvalidationSink,
    ledger_settings: LedgerSettings,
) -> InventoryLedger:
    """Ledger facade over a fresh SQLite database."""
    return InventoryLedger(
        unit_of_work=SQLiteUnitOfWork(pool),
        clock=clock,
        invalidation_sink=sink,
        settings=ledger_settings,
    )
