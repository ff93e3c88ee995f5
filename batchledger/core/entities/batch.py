"""Batch domain entities."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from batchledger.core.entities.timestamps import utc_now


class BatchCondition(str, Enum):
    """Physical condition of received stock."""

    NEW = "new"
    USED = "used"
    REFURBISHED = "refurbished"
    DAMAGED = "damaged"


class Batch(BaseModel):
    """One received lot of one material, consumed oldest-first."""

    id: int | None = None
    material_id: str
    batch_number: str | None = None
    supplier_id: str
    purchase_order_id: str | None = None
    location_id: str | None = None  # branch / warehouse
    receipt_date: date
    quantity_received: Decimal
    remaining_quantity: Decimal
    unit_cost: Decimal
    expiry_date: date | None = None
    condition: BatchCondition = BatchCondition.NEW
    is_depleted: bool = False
    location: str | None = None  # free-text bin / shelf
    notes: str | None = None
    source_batch_id: int | None = None  # set on transfer-created batches
    version: int = 1
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def total_value(self) -> Decimal:
        """Value of the stock still held in this batch."""
        return self.remaining_quantity * self.unit_cost

    @property
    def consumed_quantity(self) -> Decimal:
        return self.quantity_received - self.remaining_quantity


class BatchFilter(BaseModel):
    """Criteria for listing batches."""

    material_id: str | None = None
    supplier_id: str | None = None
    location_id: str | None = None
    include_depleted: bool = False
    search: str | None = None  # matched against batch_number


class BatchDetailsUpdate(BaseModel):
    """Descriptive batch fields that may be edited after receipt."""

    location: str | None = None
    condition: BatchCondition | None = None
    expiry_date: date | None = None
    notes: str | None = None
