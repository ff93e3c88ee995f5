"""
Reconcile Material Use Case.

Cross-check batches, ledger and aggregate.
"""

from decimal import Decimal

from batchledger.application.use_cases.base import LedgerUseCase
from batchledger.config import get_logger
from batchledger.core.entities.aggregate import ReconciliationReport
from batchledger.core.entities.events import InvalidationEvent
from batchledger.core.exceptions import MaterialNotFoundError
from batchledger.core.interfaces.unit_of_work import ILedgerSession
from batchledger.core.services.aggregate_recalculator import AggregateRecalculator

logger = get_logger(__name__)

ZERO = Decimal("0")


async def build_report(session: ILedgerSession, material_id: str) -> ReconciliationReport:
    """Compare remaining quantities with movement sums and the aggregate."""
    batches = await session.batches.list_for_material(material_id)
    aggregate = await session.aggregates.get(material_id)
    if aggregate is None and not batches:
        raise MaterialNotFoundError(material_id)

    sums = await session.movements.sum_for_batches([b.id for b in batches])  # type: ignore[misc]
    drifted = [b.id for b in batches if sums[b.id] != b.remaining_quantity]  # type: ignore[index]

    return ReconciliationReport(
        material_id=material_id,
        batch_total=sum((b.remaining_quantity for b in batches), ZERO),
        ledger_total=sum(sums.values(), ZERO),
        aggregate_total=aggregate.total_quantity if aggregate else ZERO,
        drifted_batch_ids=drifted,  # type: ignore[arg-type]
    )


class ReconcileMaterialUseCase(LedgerUseCase):
    """
    Verify that a material's three views of on-hand stock agree.

    With ``repair`` the aggregate is rebuilt from the batch table when it
    disagrees. Drifted batches are reported, never rewritten; the movement
    ledger is the record of what happened.
    """

    async def execute(self, material_id: str, repair: bool = False) -> ReconciliationReport:
        logger.info("reconcile_material_started", material_id=material_id, repair=repair)

        if not repair:
            report = await self._run_read(lambda session: build_report(session, material_id))
        else:

            async def work(
                session: ILedgerSession, events: list[InvalidationEvent]
            ) -> ReconciliationReport:
                report = await build_report(session, material_id)
                if report.aggregate_total != report.batch_total:
                    aggregate = await AggregateRecalculator(
                        session, self.settings.cost_places, clock=self.clock
                    ).rebuild(material_id)
                    report.aggregate_total = aggregate.total_quantity
                    report.repaired = True
                    events.append(InvalidationEvent(material_id=material_id))
                return report

            report = await self._run_write("reconcile_material", work)

        if report.is_consistent:
            logger.info("reconcile_material_complete", material_id=material_id)
        else:
            logger.warning(
                "reconcile_material_drift",
                material_id=material_id,
                batch_total=str(report.batch_total),
                ledger_total=str(report.ledger_total),
                aggregate_total=str(report.aggregate_total),
                drifted_batch_ids=report.drifted_batch_ids,
                repaired=report.repaired,
            )
        return report
