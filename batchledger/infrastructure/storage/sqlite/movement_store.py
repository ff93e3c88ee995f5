"""SQLite implementation of the append-only movement ledger."""

from datetime import date, datetime
from decimal import Decimal

import aiosqlite

from batchledger.config import get_logger
from batchledger.core.entities.movement import Movement, MovementType
from batchledger.core.interfaces.movement_ledger import IMovementLedger

logger = get_logger(__name__)


class SQLiteMovementLedger(IMovementLedger):
    """Movement ledger bound to one connection.

    The table rejects UPDATE and DELETE through triggers; this class only
    ever inserts and reads.
    """

    def __init__(self, conn: aiosqlite.Connection):
        self._conn = conn

    async def append(self, movement: Movement) -> Movement:
        cursor = await self._conn.execute(
            """
            INSERT INTO batch_movements (
                batch_id, movement_type, quantity, reference_type, reference_id,
                reverses_movement_id, movement_date, notes, actor_id, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                movement.batch_id,
                movement.movement_type.value,
                str(movement.quantity),
                movement.reference_type,
                movement.reference_id,
                movement.reverses_movement_id,
                movement.movement_date.isoformat(),
                movement.notes,
                movement.actor_id,
                movement.created_at.isoformat(),
            ),
        )
        movement.id = cursor.lastrowid
        logger.info(
            "movement_recorded",
            movement_id=movement.id,
            batch_id=movement.batch_id,
            movement_type=movement.movement_type.value,
            quantity=str(movement.quantity),
            reference=f"{movement.reference_type}:{movement.reference_id}",
        )
        return movement

    async def find_by_reference(
        self,
        reference_type: str,
        reference_id: str,
        movement_type: MovementType | None = None,
    ) -> list[Movement]:
        query = """
            SELECT * FROM batch_movements
            WHERE reference_type = ? AND reference_id = ?
        """
        params: list = [reference_type, reference_id]
        if movement_type is not None:
            query += " AND movement_type = ?"
            params.append(movement_type.value)
        cursor = await self._conn.execute(f"{query} ORDER BY id ASC", params)
        rows = await cursor.fetchall()
        return [self._row_to_movement(row) for row in rows]

    async def list_for_batch(
        self, batch_id: int, limit: int = 50, offset: int = 0
    ) -> list[Movement]:
        cursor = await self._conn.execute(
            """
            SELECT * FROM batch_movements
            WHERE batch_id = ?
            ORDER BY id DESC
            LIMIT ? OFFSET ?
            """,
            (batch_id, limit, offset),
        )
        rows = await cursor.fetchall()
        return [self._row_to_movement(row) for row in rows]

    async def sum_for_batches(self, batch_ids: list[int]) -> dict[int, Decimal]:
        """Net movement quantity per batch, summed as Decimal."""
        totals: dict[int, Decimal] = {batch_id: Decimal("0") for batch_id in batch_ids}
        if not batch_ids:
            return totals

        placeholders = ",".join("?" * len(batch_ids))
        cursor = await self._conn.execute(
            f"SELECT batch_id, quantity FROM batch_movements WHERE batch_id IN ({placeholders})",
            batch_ids,
        )
        for row in await cursor.fetchall():
            totals[row["batch_id"]] += Decimal(row["quantity"])
        return totals

    async def list_for_material(self, material_id: str) -> list[Movement]:
        cursor = await self._conn.execute(
            """
            SELECT m.* FROM batch_movements m
            JOIN inventory_batches b ON b.id = m.batch_id
            WHERE b.material_id = ?
            ORDER BY m.id ASC
            """,
            (material_id,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_movement(row) for row in rows]

    @staticmethod
    def _row_to_movement(row: aiosqlite.Row) -> Movement:
        """Convert a database row to a Movement entity."""
        return Movement(
            id=row["id"],
            batch_id=row["batch_id"],
            movement_type=MovementType(row["movement_type"]),
            quantity=Decimal(row["quantity"]),
            reference_type=row["reference_type"],
            reference_id=row["reference_id"],
            reverses_movement_id=row["reverses_movement_id"],
            movement_date=date.fromisoformat(row["movement_date"]),
            notes=row["notes"],
            actor_id=row["actor_id"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
