"""Per-material aggregate and reporting entities."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from batchledger.core.entities.timestamps import utc_now


class MaterialAggregate(BaseModel):
    """Tracks on-hand quantity and moving average cost for a material.

    A projection of the batch table, written in the same transaction as every
    batch mutation. Never the source of truth for individual batches.
    """

    material_id: str
    total_quantity: Decimal = Decimal("0")
    average_cost: Decimal = Decimal("0")  # moving average, receipts only
    last_receipt_cost: Decimal | None = None
    last_receipt_date: date | None = None
    last_supplier_id: str | None = None
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def total_value(self) -> Decimal:
        """Total inventory value = quantity * average_cost."""
        return self.total_quantity * self.average_cost


class MaterialSummary(BaseModel):
    """Aggregate plus live statistics over a material's active batches."""

    aggregate: MaterialAggregate
    batch_count: int = 0
    batch_quantity: Decimal = Decimal("0")
    batch_value: Decimal = Decimal("0")
    batch_average_cost: Decimal = Decimal("0")
    oldest_receipt_date: date | None = None
    newest_receipt_date: date | None = None

    @property
    def material_id(self) -> str:
        return self.aggregate.material_id


class ReconciliationReport(BaseModel):
    """Cross-check of batch, ledger and aggregate quantities for a material."""

    material_id: str
    batch_total: Decimal
    ledger_total: Decimal
    aggregate_total: Decimal
    drifted_batch_ids: list[int] = Field(default_factory=list)
    repaired: bool = False

    @property
    def is_consistent(self) -> bool:
        return (
            not self.drifted_batch_ids
            and self.batch_total == self.ledger_total == self.aggregate_total
        )
