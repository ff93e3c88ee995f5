"""Movement ledger entities."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from batchledger.core.entities.timestamps import utc_now


class MovementType(str, Enum):
    """Kinds of signed quantity change applied to a batch."""

    RECEIPT = "receipt"
    ISSUE = "issue"
    ADJUSTMENT = "adjustment"
    TRANSFER_OUT = "transfer_out"
    TRANSFER_IN = "transfer_in"
    REVERSAL = "reversal"


class ReferenceType(str, Enum):
    """Reference tags the ledger emits on its own movements.

    Callers settle allocations against any other tag (``sales_order``,
    ``wastage``, ...); the ledger treats reference types as opaque.
    """

    PURCHASE_ORDER = "purchase_order"
    MANUAL_RECEIPT = "manual_receipt"
    MANUAL_ADJUSTMENT = "manual_adjustment"
    BATCH_TRANSFER = "batch_transfer"


class Reference(BaseModel):
    """Opaque key of the business event a movement settles against."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(..., min_length=1, max_length=64)
    id: str = Field(..., min_length=1, max_length=128)

    def __str__(self) -> str:
        return f"{self.type}:{self.id}"


class Movement(BaseModel):
    """One signed, append-only quantity change on exactly one batch."""

    id: int | None = None
    batch_id: int
    movement_type: MovementType
    quantity: Decimal  # positive increases remaining, negative decreases
    reference_type: str
    reference_id: str | None = None
    reverses_movement_id: int | None = None
    movement_date: date
    notes: str | None = None
    actor_id: str | None = None
    created_at: datetime = Field(default_factory=utc_now)

    @property
    def is_outflow(self) -> bool:
        return self.quantity < 0
