"""
List Movements Use Case.

A batch's ledger history, newest first.
"""

from batchledger.application.dto.requests import ListMovementsRequest
from batchledger.application.use_cases.base import LedgerUseCase
from batchledger.core.entities.movement import Movement
from batchledger.core.exceptions import BatchNotFoundError
from batchledger.core.interfaces.unit_of_work import ILedgerSession


class ListMovementsUseCase(LedgerUseCase):
    """Page through the movements of one batch."""

    async def execute(self, request: ListMovementsRequest) -> list[Movement]:
        limit = request.limit or self.settings.movement_page_size

        async def work(session: ILedgerSession) -> list[Movement]:
            if await session.batches.get(request.batch_id) is None:
                raise BatchNotFoundError(request.batch_id)
            return await session.movements.list_for_batch(
                request.batch_id, limit=limit, offset=request.offset
            )

        return await self._run_read(work)
