"""
List Batches Use Case.

Filtered, paginated batch listing.
"""

from dataclasses import dataclass

from batchledger.application.dto.requests import ListBatchesRequest
from batchledger.application.use_cases.base import LedgerUseCase
from batchledger.core.entities.batch import Batch, BatchFilter
from batchledger.core.interfaces.unit_of_work import ILedgerSession


@dataclass
class BatchPage:
    """One page of batches plus the total match count."""

    batches: list[Batch]
    total: int
    limit: int
    offset: int

    @property
    def has_more(self) -> bool:
        return self.offset + len(self.batches) < self.total


class ListBatchesUseCase(LedgerUseCase):
    """List batches in FIFO order, depleted ones hidden unless requested."""

    async def execute(self, request: ListBatchesRequest) -> BatchPage:
        filters = BatchFilter(
            material_id=request.material_id,
            supplier_id=request.supplier_id,
            location_id=request.location_id,
            include_depleted=request.include_depleted,
            search=request.search,
        )

        async def work(session: ILedgerSession) -> BatchPage:
            batches = await session.batches.search(
                filters, limit=request.limit, offset=request.offset
            )
            total = await session.batches.count(filters)
            return BatchPage(
                batches=batches,
                total=total,
                limit=request.limit,
                offset=request.offset,
            )

        return await self._run_read(work)
