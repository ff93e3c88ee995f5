"""
Reverse Allocation Use Case.

Undo every issue movement of a reference.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal

from batchledger.application.dto.requests import ReverseAllocationRequest
from batchledger.application.use_cases.base import LedgerUseCase
from batchledger.config import get_logger
from batchledger.core.entities.events import InvalidationEvent
from batchledger.core.entities.movement import Movement, MovementType, Reference
from batchledger.core.exceptions import (
    AllocationNotFoundError,
    AlreadyReversedError,
    BatchNotFoundError,
    InvalidAdjustmentError,
)
from batchledger.core.interfaces.unit_of_work import ILedgerSession
from batchledger.core.services.aggregate_recalculator import AggregateRecalculator

logger = get_logger(__name__)


@dataclass
class ReversalResult:
    """Result of reversing an allocation."""

    reference: Reference
    movements: list[Movement] = field(default_factory=list)
    restored_quantity: Decimal = Decimal("0")


class ReverseAllocationUseCase(LedgerUseCase):
    """
    Restore stock to the exact batches an allocation drew from.

    A reference can be reversed once; the reversal movements reuse the
    reference, so a second attempt finds them and raises AlreadyReversedError.
    """

    async def execute(self, request: ReverseAllocationRequest) -> ReversalResult:
        """Execute reverse allocation use case."""
        reference = request.reference
        logger.info("reverse_allocation_started", reference=str(reference))

        async def work(
            session: ILedgerSession, events: list[InvalidationEvent]
        ) -> ReversalResult:
            reversals = await session.movements.find_by_reference(
                reference.type, reference.id, MovementType.REVERSAL
            )
            if reversals:
                raise AlreadyReversedError(reference.type, reference.id)

            issues = await session.movements.find_by_reference(
                reference.type, reference.id, MovementType.ISSUE
            )
            if not issues:
                raise AllocationNotFoundError(reference.type, reference.id)

            result = ReversalResult(reference=reference)
            restored_by_material: dict[str, Decimal] = defaultdict(Decimal)
            movement_date = self.clock.today()

            for issue in issues:
                credit = -issue.quantity
                batch = await session.batches.get(issue.batch_id)
                if batch is None:
                    raise BatchNotFoundError(issue.batch_id)

                new_quantity = batch.remaining_quantity + credit
                if new_quantity > batch.quantity_received:
                    raise InvalidAdjustmentError(
                        batch.id,  # type: ignore[arg-type]
                        batch.remaining_quantity,
                        credit,
                        reason=f"would exceed quantity received ({batch.quantity_received})",
                    )
                batch = await session.batches.update_quantity(
                    batch, new_quantity, updated_at=self.clock.now()
                )

                movement = await session.movements.append(
                    Movement(
                        batch_id=batch.id,  # type: ignore[arg-type]
                        movement_type=MovementType.REVERSAL,
                        quantity=credit,
                        reference_type=reference.type,
                        reference_id=reference.id,
                        reverses_movement_id=issue.id,
                        movement_date=movement_date,
                        notes=f"Reversal of movement {issue.id}",
                        actor_id=request.actor_id,
                        created_at=self.clock.now(),
                    )
                )
                result.movements.append(movement)
                result.restored_quantity += credit
                restored_by_material[batch.material_id] += credit
                events.append(
                    InvalidationEvent(material_id=batch.material_id, location_id=batch.location_id)
                )

            recalculator = AggregateRecalculator(
                session, self.settings.cost_places, clock=self.clock
            )
            for material_id, quantity in restored_by_material.items():
                await recalculator.on_adjustment(material_id, quantity)

            return result

        result = await self._run_write("reverse_allocation", work)

        logger.info(
            "reverse_allocation_complete",
            reference=str(reference),
            movements=len(result.movements),
            restored_quantity=str(result.restored_quantity),
        )
        return result
