"""Tests for SQLite material aggregate store."""

from datetime import date
from decimal import Decimal

from batchledger.core.entities.aggregate import MaterialAggregate


class TestAggregateStore:
    async def test_get_missing(self, aggregate_store):
        assert await aggregate_store.get("MAT-404") is None

    async def test_save_inserts_then_updates(self, aggregate_store):
        aggregate = MaterialAggregate(
            material_id="MAT-001",
            total_quantity=Decimal("10"),
            average_cost=Decimal("2.5000"),
            last_receipt_cost=Decimal("2.5"),
            last_receipt_date=date(2026, 1, 1),
            last_supplier_id="SUP-1",
        )
        await aggregate_store.save(aggregate)

        aggregate.total_quantity = Decimal("4")
        await aggregate_store.save(aggregate)

        loaded = await aggregate_store.get("MAT-001")
        assert loaded.total_quantity == Decimal("4")
        assert loaded.average_cost == Decimal("2.5000")
        assert loaded.last_receipt_date == date(2026, 1, 1)
        assert loaded.last_supplier_id == "SUP-1"

    async def test_optional_fields_round_trip_as_none(self, aggregate_store):
        await aggregate_store.save(MaterialAggregate(material_id="MAT-002"))
        loaded = await aggregate_store.get("MAT-002")
        assert loaded.last_receipt_cost is None
        assert loaded.last_receipt_date is None
