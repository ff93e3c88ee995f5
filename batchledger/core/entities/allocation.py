"""FIFO allocation results (transient, never persisted)."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field


class AllocationLine(BaseModel):
    """Quantity taken from a single batch."""

    batch_id: int
    batch_number: str | None = None
    quantity: Decimal
    unit_cost: Decimal
    receipt_date: date
    supplier_id: str | None = None
    remaining_after: Decimal

    @property
    def cost(self) -> Decimal:
        return self.quantity * self.unit_cost


class AllocationResult(BaseModel):
    """Per-batch breakdown of a FIFO run plus its weighted average cost."""

    material_id: str
    location_id: str | None = None
    requested_quantity: Decimal
    allocated_quantity: Decimal = Decimal("0")
    available_quantity: Decimal = Decimal("0")
    total_cost: Decimal = Decimal("0")
    weighted_average_cost: Decimal = Decimal("0")
    lines: list[AllocationLine] = Field(default_factory=list)
    movement_ids: list[int] = Field(default_factory=list)  # empty for previews

    @property
    def shortfall(self) -> Decimal:
        return max(self.requested_quantity - self.allocated_quantity, Decimal("0"))

    @property
    def can_fulfill(self) -> bool:
        return self.shortfall == 0

    @property
    def batches_used(self) -> int:
        return len(self.lines)
