"""
Adjust Batch Use Case.

Signed correction of a batch's remaining quantity.
"""

from dataclasses import dataclass
from decimal import Decimal

from batchledger.application.dto.requests import AdjustBatchRequest
from batchledger.application.use_cases.base import LedgerUseCase, check_places
from batchledger.config import get_logger
from batchledger.core.entities.batch import Batch
from batchledger.core.entities.events import InvalidationEvent
from batchledger.core.entities.movement import Movement, MovementType, ReferenceType
from batchledger.core.exceptions import BatchNotFoundError, InvalidAdjustmentError
from batchledger.core.interfaces.unit_of_work import ILedgerSession
from batchledger.core.services.aggregate_recalculator import AggregateRecalculator

logger = get_logger(__name__)


@dataclass
class AdjustmentResult:
    """Result of adjusting a batch."""

    batch: Batch
    movement: Movement
    previous_quantity: Decimal
    new_quantity: Decimal


class AdjustBatchUseCase(LedgerUseCase):
    """Apply a stock-count correction, damage write-off or found stock."""

    async def execute(self, request: AdjustBatchRequest) -> AdjustmentResult:
        """Execute adjust batch use case."""
        check_places("delta", request.delta, self.settings.quantity_places)

        logger.info(
            "adjust_batch_started",
            batch_id=request.batch_id,
            delta=str(request.delta),
            reason=request.reason,
        )

        async def work(
            session: ILedgerSession, events: list[InvalidationEvent]
        ) -> AdjustmentResult:
            batch = await session.batches.get(request.batch_id)
            if batch is None:
                raise BatchNotFoundError(request.batch_id)

            previous = batch.remaining_quantity
            new_quantity = previous + request.delta
            if new_quantity < 0:
                raise InvalidAdjustmentError(batch.id, previous, request.delta)  # type: ignore[arg-type]
            if new_quantity > batch.quantity_received:
                raise InvalidAdjustmentError(
                    batch.id,  # type: ignore[arg-type]
                    previous,
                    request.delta,
                    reason=f"would exceed quantity received ({batch.quantity_received})",
                )

            batch = await session.batches.update_quantity(
                batch, new_quantity, updated_at=self.clock.now()
            )

            notes = request.reason
            if request.notes:
                notes = f"{request.reason} - {request.notes}"
            movement = await session.movements.append(
                Movement(
                    batch_id=batch.id,  # type: ignore[arg-type]
                    movement_type=MovementType.ADJUSTMENT,
                    quantity=request.delta,
                    reference_type=ReferenceType.MANUAL_ADJUSTMENT.value,
                    reference_id=None,
                    movement_date=self.clock.today(),
                    notes=notes,
                    actor_id=request.actor_id,
                    created_at=self.clock.now(),
                )
            )

            await AggregateRecalculator(
                session, self.settings.cost_places, clock=self.clock
            ).on_adjustment(
                batch.material_id, request.delta
            )

            events.append(
                InvalidationEvent(material_id=batch.material_id, location_id=batch.location_id)
            )
            return AdjustmentResult(
                batch=batch,
                movement=movement,
                previous_quantity=previous,
                new_quantity=new_quantity,
            )

        result = await self._run_write("adjust_batch", work)

        logger.info(
            "adjust_batch_complete",
            batch_id=request.batch_id,
            previous_quantity=str(result.previous_quantity),
            new_quantity=str(result.new_quantity),
        )
        return result
