"""
Allocate Stock Use Case.

Commit a FIFO withdrawal against a reference.
"""

from batchledger.application.dto.requests import AllocateRequest
from batchledger.application.use_cases.base import LedgerUseCase, check_places
from batchledger.application.use_cases.preview_allocation import load_candidates
from batchledger.config import get_logger
from batchledger.core.entities.allocation import AllocationResult
from batchledger.core.entities.events import InvalidationEvent
from batchledger.core.entities.movement import Movement, MovementType
from batchledger.core.exceptions import AlreadyReversedError, InsufficientStockError
from batchledger.core.interfaces.unit_of_work import ILedgerSession
from batchledger.core.services.aggregate_recalculator import AggregateRecalculator
from batchledger.core.services.fifo_allocator import plan_fifo_allocation

logger = get_logger(__name__)


class AllocateStockUseCase(LedgerUseCase):
    """
    Withdraw stock oldest-batch-first.

    All or nothing: a short plan raises InsufficientStockError before any
    batch is touched. Each touched batch gets one ``issue`` movement carrying
    the caller's reference. A reversed reference is closed: allocating
    against it raises AlreadyReversedError.
    """

    async def execute(self, request: AllocateRequest) -> AllocationResult:
        """Execute allocate stock use case."""
        check_places("quantity", request.quantity, self.settings.quantity_places)

        logger.info(
            "allocate_stock_started",
            material_id=request.material_id,
            quantity=str(request.quantity),
            reference=str(request.reference),
        )

        async def work(
            session: ILedgerSession, events: list[InvalidationEvent]
        ) -> AllocationResult:
            reversals = await session.movements.find_by_reference(
                request.reference.type, request.reference.id, MovementType.REVERSAL
            )
            if reversals:
                raise AlreadyReversedError(request.reference.type, request.reference.id)

            batches = await load_candidates(
                session,
                request.material_id,
                request.location_id,
                self.settings.location_fallback,
            )
            plan = plan_fifo_allocation(
                request.material_id,
                batches,
                request.quantity,
                location_id=request.location_id,
                cost_places=self.settings.cost_places,
            )
            if not plan.can_fulfill:
                raise InsufficientStockError(
                    material_id=request.material_id,
                    requested=request.quantity,
                    available=plan.available_quantity,
                    location_id=request.location_id,
                )

            by_id = {batch.id: batch for batch in batches}
            movement_date = self.clock.today()
            touched_locations: set[str | None] = set()
            for line in plan.lines:
                batch = by_id[line.batch_id]
                await session.batches.update_quantity(
                    batch, line.remaining_after, updated_at=self.clock.now()
                )
                movement = await session.movements.append(
                    Movement(
                        batch_id=line.batch_id,
                        movement_type=MovementType.ISSUE,
                        quantity=-line.quantity,
                        reference_type=request.reference.type,
                        reference_id=request.reference.id,
                        movement_date=movement_date,
                        notes=request.notes,
                        actor_id=request.actor_id,
                        created_at=self.clock.now(),
                    )
                )
                plan.movement_ids.append(movement.id)  # type: ignore[arg-type]
                touched_locations.add(batch.location_id)

            await AggregateRecalculator(
                session, self.settings.cost_places, clock=self.clock
            ).on_consumption(
                request.material_id, plan.allocated_quantity
            )

            for location_id in sorted(touched_locations, key=lambda loc: loc or ""):
                events.append(
                    InvalidationEvent(material_id=request.material_id, location_id=location_id)
                )
            return plan

        result = await self._run_write("allocate_stock", work)

        logger.info(
            "allocate_stock_complete",
            material_id=request.material_id,
            batches_used=result.batches_used,
            total_cost=str(result.total_cost),
            weighted_average_cost=str(result.weighted_average_cost),
        )
        return result
