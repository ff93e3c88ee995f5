"""SQLite implementation of batch storage."""

from datetime import date, datetime
from decimal import Decimal

import aiosqlite

from batchledger.config import get_logger
from batchledger.core.entities.batch import (
    Batch,
    BatchCondition,
    BatchDetailsUpdate,
    BatchFilter,
)
from batchledger.core.entities.timestamps import utc_now
from batchledger.core.exceptions import BatchNotFoundError, ConcurrencyConflictError
from batchledger.core.interfaces.batch_store import IBatchStore

logger = get_logger(__name__)

FIFO_ORDER = "ORDER BY receipt_date ASC, id ASC"


class SQLiteBatchStore(IBatchStore):
    """SQLite implementation of batch storage, bound to one connection."""

    def __init__(self, conn: aiosqlite.Connection):
        self._conn = conn

    async def create(self, batch: Batch) -> Batch:
        """Create a new batch."""
        batch.remaining_quantity = batch.quantity_received
        batch.is_depleted = False
        batch.version = 1
        cursor = await self._conn.execute(
            """
            INSERT INTO inventory_batches (
                material_id, batch_number, supplier_id, purchase_order_id,
                location_id, receipt_date, quantity_received, remaining_quantity,
                unit_cost, expiry_date, condition, is_depleted, location, notes,
                source_batch_id, version, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                batch.material_id,
                batch.batch_number,
                batch.supplier_id,
                batch.purchase_order_id,
                batch.location_id,
                batch.receipt_date.isoformat(),
                str(batch.quantity_received),
                str(batch.remaining_quantity),
                str(batch.unit_cost),
                batch.expiry_date.isoformat() if batch.expiry_date else None,
                batch.condition.value,
                0,
                batch.location,
                batch.notes,
                batch.source_batch_id,
                batch.version,
                batch.created_at.isoformat(),
                batch.updated_at.isoformat(),
            ),
        )
        batch.id = cursor.lastrowid
        logger.info(
            "batch_created",
            batch_id=batch.id,
            material_id=batch.material_id,
            quantity=str(batch.quantity_received),
        )
        return batch

    async def get(self, batch_id: int) -> Batch | None:
        """Get batch by ID."""
        cursor = await self._conn.execute(
            "SELECT * FROM inventory_batches WHERE id = ?", (batch_id,)
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_batch(row)

    async def list_active(
        self, material_id: str, location_id: str | None = None
    ) -> list[Batch]:
        """Non-depleted batches of a material in FIFO order."""
        query = "SELECT * FROM inventory_batches WHERE material_id = ? AND is_depleted = 0"
        params: list = [material_id]
        if location_id is not None:
            query += " AND location_id = ?"
            params.append(location_id)
        cursor = await self._conn.execute(f"{query} {FIFO_ORDER}", params)
        rows = await cursor.fetchall()
        return [self._row_to_batch(row) for row in rows]

    async def has_active_at_location(self, material_id: str, location_id: str) -> bool:
        cursor = await self._conn.execute(
            """
            SELECT 1 FROM inventory_batches
            WHERE material_id = ? AND location_id = ? AND is_depleted = 0
            LIMIT 1
            """,
            (material_id, location_id),
        )
        return await cursor.fetchone() is not None

    async def update_quantity(
        self, batch: Batch, remaining_quantity: Decimal, updated_at: datetime | None = None
    ) -> Batch:
        """Set remaining quantity, guarded by the row version."""
        now = updated_at or utc_now()
        depleted = remaining_quantity == 0
        cursor = await self._conn.execute(
            """
            UPDATE inventory_batches SET
                remaining_quantity = ?,
                is_depleted = ?,
                version = version + 1,
                updated_at = ?
            WHERE id = ? AND version = ?
            """,
            (
                str(remaining_quantity),
                1 if depleted else 0,
                now.isoformat(),
                batch.id,
                batch.version,
            ),
        )
        if cursor.rowcount != 1:
            raise ConcurrencyConflictError(
                f"batch {batch.id}", f"version {batch.version} is stale"
            )

        batch.remaining_quantity = remaining_quantity
        batch.is_depleted = depleted
        batch.version += 1
        batch.updated_at = now
        logger.debug(
            "batch_quantity_updated",
            batch_id=batch.id,
            remaining=str(remaining_quantity),
            depleted=depleted,
        )
        return batch

    async def update_details(
        self, batch_id: int, changes: BatchDetailsUpdate, updated_at: datetime | None = None
    ) -> Batch:
        """Edit descriptive batch fields; quantities and cost are untouched."""
        fields = changes.model_dump(exclude_unset=True)
        if "condition" in fields and fields["condition"] is not None:
            fields["condition"] = BatchCondition(fields["condition"]).value
        if "expiry_date" in fields and fields["expiry_date"] is not None:
            fields["expiry_date"] = fields["expiry_date"].isoformat()

        if fields:
            assignments = ", ".join(f"{name} = ?" for name in fields)
            await self._conn.execute(
                f"UPDATE inventory_batches SET {assignments}, updated_at = ? WHERE id = ?",
                (*fields.values(), (updated_at or utc_now()).isoformat(), batch_id),
            )
            logger.info("batch_details_updated", batch_id=batch_id, fields=list(fields))

        batch = await self.get(batch_id)
        if batch is None:
            raise BatchNotFoundError(batch_id)
        return batch

    async def search(
        self, filters: BatchFilter, limit: int = 50, offset: int = 0
    ) -> list[Batch]:
        """List batches matching filters in FIFO order."""
        where, params = self._build_where(filters)
        cursor = await self._conn.execute(
            f"SELECT * FROM inventory_batches {where} {FIFO_ORDER} LIMIT ? OFFSET ?",
            (*params, limit, offset),
        )
        rows = await cursor.fetchall()
        return [self._row_to_batch(row) for row in rows]

    async def count(self, filters: BatchFilter) -> int:
        where, params = self._build_where(filters)
        cursor = await self._conn.execute(
            f"SELECT COUNT(*) FROM inventory_batches {where}", params
        )
        row = await cursor.fetchone()
        return row[0] if row else 0

    async def list_for_material(self, material_id: str) -> list[Batch]:
        cursor = await self._conn.execute(
            f"SELECT * FROM inventory_batches WHERE material_id = ? {FIFO_ORDER}",
            (material_id,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_batch(row) for row in rows]

    @staticmethod
    def _build_where(filters: BatchFilter) -> tuple[str, list]:
        clauses: list[str] = []
        params: list = []
        if filters.material_id is not None:
            clauses.append("material_id = ?")
            params.append(filters.material_id)
        if filters.supplier_id is not None:
            clauses.append("supplier_id = ?")
            params.append(filters.supplier_id)
        if filters.location_id is not None:
            clauses.append("location_id = ?")
            params.append(filters.location_id)
        if not filters.include_depleted:
            clauses.append("is_depleted = 0")
        if filters.search:
            clauses.append("batch_number LIKE ?")
            params.append(f"%{filters.search}%")
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        return where, params

    @staticmethod
    def _row_to_batch(row: aiosqlite.Row) -> Batch:
        """Convert a database row to a Batch entity."""
        return Batch(
            id=row["id"],
            material_id=row["material_id"],
            batch_number=row["batch_number"],
            supplier_id=row["supplier_id"],
            purchase_order_id=row["purchase_order_id"],
            location_id=row["location_id"],
            receipt_date=date.fromisoformat(row["receipt_date"]),
            quantity_received=Decimal(row["quantity_received"]),
            remaining_quantity=Decimal(row["remaining_quantity"]),
            unit_cost=Decimal(row["unit_cost"]),
            expiry_date=date.fromisoformat(row["expiry_date"]) if row["expiry_date"] else None,
            condition=BatchCondition(row["condition"]),
            is_depleted=bool(row["is_depleted"]),
            location=row["location"],
            notes=row["notes"],
            source_batch_id=row["source_batch_id"],
            version=row["version"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
