"""
Aggregate cost recalculator.

Maintains the per-material projection (on-hand quantity, moving average cost)
inside the caller's transaction. Only receipts move the average; consumption,
adjustments and reversals change quantity alone.
"""

from datetime import date
from decimal import Decimal

from batchledger.config import get_logger
from batchledger.core.entities.aggregate import MaterialAggregate
from batchledger.core.entities.movement import MovementType
from batchledger.core.entities.timestamps import utc_now
from batchledger.core.interfaces.clock import IClock
from batchledger.core.interfaces.unit_of_work import ILedgerSession

logger = get_logger(__name__)

ZERO = Decimal("0")


def moving_average(
    old_qty: Decimal, old_avg: Decimal, qty: Decimal, unit_cost: Decimal
) -> Decimal:
    """(old_qty × old_avg + qty × unit_cost) / (old_qty + qty)."""
    total_qty = old_qty + qty
    if total_qty <= 0:
        return unit_cost
    return (old_qty * old_avg + qty * unit_cost) / total_qty


class AggregateRecalculator:
    """Updates MaterialAggregate rows for one ledger session."""

    def __init__(
        self, session: ILedgerSession, cost_places: int = 4, clock: IClock | None = None
    ):
        self._session = session
        self._clock = clock
        self._exp = Decimal(1).scaleb(-cost_places)

    async def on_receipt(
        self,
        material_id: str,
        quantity: Decimal,
        unit_cost: Decimal,
        receipt_date: date | None = None,
        supplier_id: str | None = None,
    ) -> MaterialAggregate:
        """Fold a new receipt into the moving average."""
        aggregate = await self._load(material_id)
        old_qty = aggregate.total_quantity
        old_avg = aggregate.average_cost

        aggregate.average_cost = moving_average(
            old_qty, old_avg, quantity, unit_cost
        ).quantize(self._exp)
        aggregate.total_quantity = old_qty + quantity
        aggregate.last_receipt_cost = unit_cost
        aggregate.last_receipt_date = receipt_date
        aggregate.last_supplier_id = supplier_id

        logger.debug(
            "aggregate_receipt_applied",
            material_id=material_id,
            old_qty=str(old_qty),
            new_qty=str(aggregate.total_quantity),
            new_avg=str(aggregate.average_cost),
        )
        return await self._save(aggregate)

    async def on_consumption(self, material_id: str, quantity: Decimal) -> MaterialAggregate:
        """Stock left the ledger; average cost is unchanged."""
        return await self._shift_quantity(material_id, -quantity)

    async def on_adjustment(self, material_id: str, delta: Decimal) -> MaterialAggregate:
        """Signed correction; average cost is unchanged."""
        return await self._shift_quantity(material_id, delta)

    async def rebuild(self, material_id: str) -> MaterialAggregate:
        """
        Recompute the projection from the ledger.

        Quantity is the sum of remaining over all batches. The average is
        replayed from every movement in creation order: receipts fold into
        the moving average, everything else shifts quantity only.
        """
        batches = {b.id: b for b in await self._session.batches.list_for_material(material_id)}
        movements = await self._session.movements.list_for_material(material_id)

        aggregate = MaterialAggregate(material_id=material_id)
        qty = ZERO
        avg = ZERO
        for movement in movements:
            if movement.movement_type == MovementType.RECEIPT:
                batch = batches[movement.batch_id]
                avg = moving_average(
                    qty, avg, movement.quantity, batch.unit_cost
                ).quantize(self._exp)
                aggregate.last_receipt_cost = batch.unit_cost
                aggregate.last_receipt_date = batch.receipt_date
                aggregate.last_supplier_id = batch.supplier_id
            qty += movement.quantity

        aggregate.total_quantity = sum(
            (b.remaining_quantity for b in batches.values()), ZERO
        )
        aggregate.average_cost = avg.quantize(self._exp)
        logger.info(
            "aggregate_rebuilt",
            material_id=material_id,
            total_quantity=str(aggregate.total_quantity),
            average_cost=str(aggregate.average_cost),
        )
        return await self._save(aggregate)

    async def _shift_quantity(self, material_id: str, delta: Decimal) -> MaterialAggregate:
        aggregate = await self._load(material_id)
        aggregate.total_quantity += delta
        return await self._save(aggregate)

    async def _load(self, material_id: str) -> MaterialAggregate:
        aggregate = await self._session.aggregates.get(material_id)
        if aggregate is None:
            aggregate = MaterialAggregate(material_id=material_id)
        return aggregate

    async def _save(self, aggregate: MaterialAggregate) -> MaterialAggregate:
        aggregate.updated_at = self._clock.now() if self._clock else utc_now()
        return await self._session.aggregates.save(aggregate)
