"""
Create Batch Use Case.

Receipt of a new cost-bearing batch.
"""

from dataclasses import dataclass

from batchledger.application.dto.requests import CreateBatchRequest
from batchledger.application.use_cases.base import (
    LedgerUseCase,
    base36_timestamp,
    check_places,
)
from batchledger.config import get_logger
from batchledger.core.entities.aggregate import MaterialAggregate
from batchledger.core.entities.batch import Batch
from batchledger.core.entities.events import InvalidationEvent
from batchledger.core.entities.movement import Movement, MovementType, ReferenceType
from batchledger.core.interfaces.unit_of_work import ILedgerSession
from batchledger.core.services.aggregate_recalculator import AggregateRecalculator

logger = get_logger(__name__)


@dataclass
class CreateBatchResult:
    """Result of receiving a batch."""

    batch: Batch
    movement: Movement
    aggregate: MaterialAggregate


class CreateBatchUseCase(LedgerUseCase):
    """Receive stock as a new batch with its opening receipt movement."""

    async def execute(self, request: CreateBatchRequest) -> CreateBatchResult:
        """Execute create batch use case."""
        check_places("quantity", request.quantity, self.settings.quantity_places)
        check_places("unit_cost", request.unit_cost, self.settings.cost_places)

        logger.info(
            "create_batch_started",
            material_id=request.material_id,
            quantity=str(request.quantity),
            unit_cost=str(request.unit_cost),
        )

        async def work(
            session: ILedgerSession, events: list[InvalidationEvent]
        ) -> CreateBatchResult:
            now = self.clock.now()
            today = self.clock.today()
            receipt_date = request.receipt_date or today

            batch = await session.batches.create(
                Batch(
                    material_id=request.material_id,
                    batch_number=request.batch_number
                    or f"BATCH-{request.material_id}-{base36_timestamp(self.clock)}",
                    supplier_id=request.supplier_id,
                    purchase_order_id=request.purchase_order_id,
                    location_id=request.location_id,
                    receipt_date=receipt_date,
                    quantity_received=request.quantity,
                    remaining_quantity=request.quantity,
                    unit_cost=request.unit_cost,
                    expiry_date=request.expiry_date,
                    condition=request.condition,
                    location=request.location,
                    notes=request.notes,
                    created_at=now,
                    updated_at=now,
                )
            )

            if request.purchase_order_id:
                reference_type = ReferenceType.PURCHASE_ORDER.value
            else:
                reference_type = ReferenceType.MANUAL_RECEIPT.value
            movement = await session.movements.append(
                Movement(
                    batch_id=batch.id,  # type: ignore[arg-type]
                    movement_type=MovementType.RECEIPT,
                    quantity=request.quantity,
                    reference_type=reference_type,
                    reference_id=request.purchase_order_id,
                    movement_date=receipt_date,
                    notes=f"Batch receipt: {batch.batch_number}",
                    actor_id=request.actor_id,
                    created_at=now,
                )
            )

            aggregate = await AggregateRecalculator(
                session, self.settings.cost_places, clock=self.clock
            ).on_receipt(
                request.material_id,
                request.quantity,
                request.unit_cost,
                receipt_date=receipt_date,
                supplier_id=request.supplier_id,
            )

            events.append(
                InvalidationEvent(
                    material_id=request.material_id,
                    location_id=request.location_id,
                )
            )
            return CreateBatchResult(batch=batch, movement=movement, aggregate=aggregate)

        result = await self._run_write("create_batch", work)

        logger.info(
            "create_batch_complete",
            batch_id=result.batch.id,
            batch_number=result.batch.batch_number,
            average_cost=str(result.aggregate.average_cost),
        )
        return result
