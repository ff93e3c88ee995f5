"""SQLite implementation of the material aggregate projection."""

from datetime import date, datetime
from decimal import Decimal

import aiosqlite

from batchledger.config import get_logger
from batchledger.core.entities.aggregate import MaterialAggregate
from batchledger.core.interfaces.aggregate_store import IMaterialAggregateStore

logger = get_logger(__name__)


class SQLiteMaterialAggregateStore(IMaterialAggregateStore):
    """Material aggregate store bound to one connection."""

    def __init__(self, conn: aiosqlite.Connection):
        self._conn = conn

    async def get(self, material_id: str) -> MaterialAggregate | None:
        cursor = await self._conn.execute(
            "SELECT * FROM material_aggregates WHERE material_id = ?",
            (material_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_aggregate(row)

    async def save(self, aggregate: MaterialAggregate) -> MaterialAggregate:
        """Upsert the aggregate row."""
        await self._conn.execute(
            """
            INSERT INTO material_aggregates (
                material_id, total_quantity, average_cost, last_receipt_cost,
                last_receipt_date, last_supplier_id, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(material_id) DO UPDATE SET
                total_quantity = excluded.total_quantity,
                average_cost = excluded.average_cost,
                last_receipt_cost = excluded.last_receipt_cost,
                last_receipt_date = excluded.last_receipt_date,
                last_supplier_id = excluded.last_supplier_id,
                updated_at = excluded.updated_at
            """,
            (
                aggregate.material_id,
                str(aggregate.total_quantity),
                str(aggregate.average_cost),
                str(aggregate.last_receipt_cost)
                if aggregate.last_receipt_cost is not None
                else None,
                aggregate.last_receipt_date.isoformat()
                if aggregate.last_receipt_date
                else None,
                aggregate.last_supplier_id,
                aggregate.updated_at.isoformat(),
            ),
        )
        logger.debug(
            "material_aggregate_saved",
            material_id=aggregate.material_id,
            total_quantity=str(aggregate.total_quantity),
            average_cost=str(aggregate.average_cost),
        )
        return aggregate

    @staticmethod
    def _row_to_aggregate(row: aiosqlite.Row) -> MaterialAggregate:
        return MaterialAggregate(
            material_id=row["material_id"],
            total_quantity=Decimal(row["total_quantity"]),
            average_cost=Decimal(row["average_cost"]),
            last_receipt_cost=Decimal(row["last_receipt_cost"])
            if row["last_receipt_cost"] is not None
            else None,
            last_receipt_date=date.fromisoformat(row["last_receipt_date"])
            if row["last_receipt_date"]
            else None,
            last_supplier_id=row["last_supplier_id"],
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
