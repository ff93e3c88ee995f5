"""Request DTOs for ledger operations.

Pydantic v2 models validating caller input before any transaction opens.
Failures are translated into the ledger's ValidationError by ``parse_request``.
"""

from datetime import date
from decimal import Decimal
from typing import Any, TypeVar

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from batchledger.core.entities.batch import BatchCondition
from batchledger.core.entities.movement import Reference
from batchledger.core.exceptions import ValidationError

RequestT = TypeVar("RequestT", bound=BaseModel)


def parse_request(model: type[RequestT], **data: Any) -> RequestT:
    """Build a request model, raising ValidationError on the first bad field."""
    try:
        return model(**data)
    except PydanticValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or model.__name__
        raise ValidationError(field, error["msg"], error.get("input")) from e


class CreateBatchRequest(BaseModel):
    """Request to receive a new batch."""

    material_id: str = Field(..., min_length=1, description="Material catalog ID")
    supplier_id: str = Field(..., min_length=1, description="Supplier the stock came from")
    quantity: Decimal = Field(..., gt=0, description="Quantity received")
    unit_cost: Decimal = Field(..., ge=0, description="Cost per unit")
    receipt_date: date | None = Field(
        default=None,
        description="Receipt date (defaults to today)",
    )
    purchase_order_id: str | None = Field(default=None, description="Purchase order")
    location_id: str | None = Field(default=None, description="Branch / warehouse")
    batch_number: str | None = Field(
        default=None,
        description="Batch number (generated when omitted)",
    )
    expiry_date: date | None = None
    condition: BatchCondition = BatchCondition.NEW
    location: str | None = Field(default=None, description="Bin or shelf")
    notes: str | None = None
    actor_id: str | None = None


class PreviewAllocationRequest(BaseModel):
    """Request to preview a FIFO allocation."""

    material_id: str = Field(..., min_length=1, description="Material catalog ID")
    quantity: Decimal = Field(..., gt=0, description="Quantity to withdraw")
    location_id: str | None = None


class AllocateRequest(PreviewAllocationRequest):
    """Request to commit a FIFO allocation against a reference."""

    reference: Reference = Field(..., description="Business event being settled")
    actor_id: str | None = None
    notes: str | None = None


class AdjustBatchRequest(BaseModel):
    """Request to correct a batch's remaining quantity."""

    batch_id: int = Field(..., gt=0)
    delta: Decimal = Field(..., description="Signed quantity change")
    reason: str = Field(..., description="Why the stock changed")
    actor_id: str | None = None
    notes: str | None = None

    @field_validator("delta")
    @classmethod
    def non_zero_delta(cls, v: Decimal) -> Decimal:
        if v == 0:
            raise ValueError("must not be zero")
        return v

    @field_validator("reason")
    @classmethod
    def non_blank_reason(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v


class TransferBatchRequest(BaseModel):
    """Request to move part of a batch to another location."""

    batch_id: int = Field(..., gt=0)
    quantity: Decimal = Field(..., gt=0, description="Quantity to move")
    to_location_id: str = Field(..., min_length=1, description="Destination location")
    actor_id: str | None = None
    notes: str | None = None


class ReverseAllocationRequest(BaseModel):
    """Request to undo every issue movement of a reference."""

    reference_type: str = Field(..., min_length=1)
    reference_id: str = Field(..., min_length=1)
    actor_id: str | None = None

    @property
    def reference(self) -> Reference:
        return Reference(type=self.reference_type, id=self.reference_id)


class UpdateBatchRequest(BaseModel):
    """Request to edit a batch's descriptive fields."""

    batch_id: int = Field(..., gt=0)
    location: str | None = None
    condition: BatchCondition | None = None
    expiry_date: date | None = None
    notes: str | None = None


class ListBatchesRequest(BaseModel):
    """Request to list batches."""

    material_id: str | None = None
    supplier_id: str | None = None
    location_id: str | None = None
    include_depleted: bool = False
    search: str | None = None
    limit: int = Field(default=50, ge=1, le=500)
    offset: int = Field(default=0, ge=0)


class ListMovementsRequest(BaseModel):
    """Request to page through a batch's movements."""

    batch_id: int = Field(..., gt=0)
    limit: int | None = Field(default=None, ge=1, le=500)
    offset: int = Field(default=0, ge=0)
