"""Get Batch Use Case."""

from batchledger.application.use_cases.base import LedgerUseCase
from batchledger.core.entities.batch import Batch
from batchledger.core.exceptions import BatchNotFoundError
from batchledger.core.interfaces.unit_of_work import ILedgerSession


class GetBatchUseCase(LedgerUseCase):
    """Fetch one batch or raise BatchNotFoundError."""

    async def execute(self, batch_id: int) -> Batch:
        async def work(session: ILedgerSession) -> Batch:
            batch = await session.batches.get(batch_id)
            if batch is None:
                raise BatchNotFoundError(batch_id)
            return batch

        return await self._run_read(work)
