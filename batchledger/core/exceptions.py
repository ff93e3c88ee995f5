"""
Domain exceptions for the batch ledger.

Every operation either fully succeeds or raises one of these; the surrounding
transaction is always rolled back before the error reaches the caller.
"""

from decimal import Decimal
from typing import Any


class LedgerError(Exception):
    """Base exception for all ledger errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Validation Exceptions
class ValidationError(LedgerError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


# Lookup Exceptions
class NotFoundError(LedgerError):
    """Referenced record does not exist."""

    pass


class BatchNotFoundError(NotFoundError):
    """Batch not found in storage."""

    def __init__(self, batch_id: int):
        super().__init__(
            f"Batch not found: {batch_id}",
            code="BATCH_NOT_FOUND",
            details={"batch_id": batch_id},
        )


class MaterialNotFoundError(NotFoundError):
    """Material has no batches or aggregate in the ledger."""

    def __init__(self, material_id: str):
        super().__init__(
            f"Material not found: {material_id}",
            code="MATERIAL_NOT_FOUND",
            details={"material_id": material_id},
        )


class AllocationNotFoundError(NotFoundError):
    """No issue movements exist for a reference."""

    def __init__(self, reference_type: str, reference_id: str):
        super().__init__(
            f"No allocation found for {reference_type}:{reference_id}",
            code="ALLOCATION_NOT_FOUND",
            details={"reference_type": reference_type, "reference_id": reference_id},
        )


# Stock Exceptions
class InsufficientStockError(LedgerError):
    """Active batches cannot satisfy the requested quantity."""

    def __init__(
        self,
        material_id: str,
        requested: Decimal,
        available: Decimal,
        location_id: str | None = None,
    ):
        self.requested = requested
        self.available = available
        self.shortfall = requested - available
        super().__init__(
            f"Insufficient stock for material {material_id}: "
            f"requested {requested}, available {available}",
            code="INSUFFICIENT_STOCK",
            details={
                "material_id": material_id,
                "location_id": location_id,
                "requested": str(requested),
                "available": str(available),
                "shortfall": str(self.shortfall),
            },
        )


class InvalidAdjustmentError(LedgerError):
    """Adjustment would break a batch quantity invariant."""

    def __init__(
        self,
        batch_id: int,
        current: Decimal,
        delta: Decimal,
        reason: str = "would result in negative quantity",
    ):
        super().__init__(
            f"Invalid adjustment on batch {batch_id}: {reason} "
            f"(current {current}, change {delta})",
            code="INVALID_ADJUSTMENT",
            details={
                "batch_id": batch_id,
                "current": str(current),
                "delta": str(delta),
                "reason": reason,
            },
        )


class AlreadyReversedError(LedgerError):
    """A reversal already exists for the reference."""

    def __init__(self, reference_type: str, reference_id: str):
        super().__init__(
            f"Allocation {reference_type}:{reference_id} has already been reversed",
            code="ALREADY_REVERSED",
            details={"reference_type": reference_type, "reference_id": reference_id},
        )


class ConcurrencyConflictError(LedgerError):
    """Lock or version conflict; safe to retry the whole operation."""

    def __init__(self, resource: str, reason: str):
        super().__init__(
            f"Concurrent modification of {resource}: {reason}",
            code="CONCURRENCY_CONFLICT",
            details={"resource": resource, "reason": reason},
        )


# Storage Exceptions
class StorageError(LedgerError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class ConfigurationError(LedgerError):
    """Configuration error."""

    pass
