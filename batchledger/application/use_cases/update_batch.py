"""
Update Batch Use Case.

Edit descriptive batch fields.
"""

from batchledger.application.dto.requests import UpdateBatchRequest
from batchledger.application.use_cases.base import LedgerUseCase
from batchledger.config import get_logger
from batchledger.core.entities.batch import Batch, BatchDetailsUpdate
from batchledger.core.entities.events import InvalidationEvent
from batchledger.core.exceptions import BatchNotFoundError
from batchledger.core.interfaces.unit_of_work import ILedgerSession

logger = get_logger(__name__)


class UpdateBatchUseCase(LedgerUseCase):
    """
    Edit location, condition, expiry date and notes of a batch.

    Quantities, cost and dates that drive FIFO order cannot be changed here;
    quantity corrections go through adjustments so they leave a movement.
    """

    async def execute(self, request: UpdateBatchRequest) -> Batch:
        changes = BatchDetailsUpdate(
            **request.model_dump(exclude={"batch_id"}, exclude_unset=True)
        )
        logger.info(
            "update_batch_started",
            batch_id=request.batch_id,
            fields=sorted(changes.model_dump(exclude_unset=True)),
        )

        async def work(session: ILedgerSession, events: list[InvalidationEvent]) -> Batch:
            if await session.batches.get(request.batch_id) is None:
                raise BatchNotFoundError(request.batch_id)
            batch = await session.batches.update_details(
                request.batch_id, changes, updated_at=self.clock.now()
            )
            events.append(
                InvalidationEvent(material_id=batch.material_id, location_id=batch.location_id)
            )
            return batch

        batch = await self._run_write("update_batch", work)
        logger.info("update_batch_complete", batch_id=batch.id)
        return batch
