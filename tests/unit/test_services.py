"""Tests for the ledger factory."""

from decimal import Decimal

import pytest

from batchledger.application.ledger import InventoryLedger
from batchledger.application.services import get_inventory_ledger, reset_services
from batchledger.infrastructure.events import RecordingInvalidationSink
from batchledger.infrastructure.storage.sqlite import close_pool, reset_unit_of_work
from batchledger.infrastructure.storage.sqlite.migrations import initialize_database


@pytest.fixture
async def global_ledger():
    await initialize_database(create_backup_before=False)
    reset_services()
    yield
    reset_services()
    await close_pool()
    reset_unit_of_work()


class TestGetInventoryLedger:
    async def test_singleton(self, global_ledger):
        ledger = await get_inventory_ledger()
        assert isinstance(ledger, InventoryLedger)
        assert await get_inventory_ledger() is ledger

    async def test_round_trip_on_default_database(self, global_ledger):
        sink = RecordingInvalidationSink()
        ledger = await get_inventory_ledger(invalidation_sink=sink)

        result = await ledger.create_batch("MAT-001", "SUP-1", 5, "1.5")
        await ledger.drain_events()

        batch = await ledger.get_batch(result.batch.id)
        assert batch.remaining_quantity == Decimal("5")
        assert len(sink.events) == 1
