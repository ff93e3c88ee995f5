"""
Get Material Summary Use Case.

Aggregate plus live batch statistics.
"""

from decimal import Decimal

from batchledger.application.use_cases.base import LedgerUseCase
from batchledger.config import get_logger
from batchledger.core.entities.aggregate import MaterialAggregate, MaterialSummary
from batchledger.core.exceptions import MaterialNotFoundError, ValidationError
from batchledger.core.interfaces.unit_of_work import ILedgerSession

logger = get_logger(__name__)

ZERO = Decimal("0")


class GetMaterialSummaryUseCase(LedgerUseCase):
    """Read a material's aggregate and active-batch statistics from one snapshot."""

    async def execute(self, material_id: str) -> MaterialSummary:
        if not material_id:
            raise ValidationError("material_id", "must not be empty", material_id)

        async def work(session: ILedgerSession) -> MaterialSummary:
            aggregate = await session.aggregates.get(material_id)
            batches = await session.batches.list_active(material_id)
            if aggregate is None and not batches:
                raise MaterialNotFoundError(material_id)

            quantity = sum((b.remaining_quantity for b in batches), ZERO)
            value = sum((b.total_value for b in batches), ZERO)
            average = ZERO
            if quantity > 0:
                average = (value / quantity).quantize(
                    Decimal(1).scaleb(-self.settings.cost_places)
                )
            dates = [b.receipt_date for b in batches]

            return MaterialSummary(
                aggregate=aggregate or MaterialAggregate(material_id=material_id),
                batch_count=len(batches),
                batch_quantity=quantity,
                batch_value=value,
                batch_average_cost=average,
                oldest_receipt_date=min(dates) if dates else None,
                newest_receipt_date=max(dates) if dates else None,
            )

        summary = await self._run_read(work)
        logger.debug(
            "material_summary_loaded",
            material_id=material_id,
            batch_count=summary.batch_count,
            total_quantity=str(summary.aggregate.total_quantity),
        )
        return summary
