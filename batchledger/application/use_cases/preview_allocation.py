"""
Preview Allocation Use Case.

Read-only FIFO plan.
"""

from batchledger.application.dto.requests import PreviewAllocationRequest
from batchledger.application.use_cases.base import LedgerUseCase, check_places
from batchledger.config import get_logger
from batchledger.core.entities.allocation import AllocationResult
from batchledger.core.entities.batch import Batch
from batchledger.core.interfaces.unit_of_work import ILedgerSession
from batchledger.core.services.fifo_allocator import plan_fifo_allocation

logger = get_logger(__name__)


async def load_candidates(
    session: ILedgerSession,
    material_id: str,
    location_id: str | None,
    location_fallback: bool,
) -> list[Batch]:
    """Active batches for a FIFO run, honouring the location fallback setting."""
    if location_id is not None and location_fallback:
        if not await session.batches.has_active_at_location(material_id, location_id):
            logger.info(
                "allocation_location_fallback",
                material_id=material_id,
                location_id=location_id,
            )
            location_id = None
    return await session.batches.list_active(material_id, location_id)


class PreviewAllocationUseCase(LedgerUseCase):
    """Plan a FIFO allocation on a snapshot without changing anything.

    Never raises for a shortfall; the result reports ``can_fulfill`` and
    ``shortfall`` instead.
    """

    async def execute(self, request: PreviewAllocationRequest) -> AllocationResult:
        check_places("quantity", request.quantity, self.settings.quantity_places)

        async def work(session: ILedgerSession) -> AllocationResult:
            batches = await load_candidates(
                session,
                request.material_id,
                request.location_id,
                self.settings.location_fallback,
            )
            return plan_fifo_allocation(
                request.material_id,
                batches,
                request.quantity,
                location_id=request.location_id,
                cost_places=self.settings.cost_places,
            )

        result = await self._run_read(work)

        logger.info(
            "allocation_previewed",
            material_id=request.material_id,
            requested=str(request.quantity),
            available=str(result.available_quantity),
            can_fulfill=result.can_fulfill,
        )
        return result
