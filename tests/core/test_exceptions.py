"""Unit tests for domain exceptions."""

from decimal import Decimal

import pytest

from batchledger.core.exceptions import (
    AllocationNotFoundError,
    AlreadyReversedError,
    BatchNotFoundError,
    ConcurrencyConflictError,
    ConfigurationError,
    DatabaseError,
    InsufficientStockError,
    InvalidAdjustmentError,
    LedgerError,
    MaterialNotFoundError,
    NotFoundError,
    StorageError,
    ValidationError,
)


class TestLedgerError:
    """Tests for base LedgerError exception."""

    def test_basic_initialization(self):
        error = LedgerError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.code == "LedgerError"
        assert error.details == {}

    def test_with_custom_code(self):
        error = LedgerError("Error message", code="CUSTOM_ERROR")
        assert error.code == "CUSTOM_ERROR"

    def test_to_dict(self):
        error = LedgerError("Boom", code="X", details={"a": 1})
        assert error.to_dict() == {"error": "X", "message": "Boom", "details": {"a": 1}}

    def test_can_be_raised_and_caught(self):
        with pytest.raises(LedgerError):
            raise LedgerError("Test error")


class TestValidationError:
    def test_fields(self):
        error = ValidationError("quantity", "must be positive", Decimal("-1"))
        assert error.code == "VALIDATION_ERROR"
        assert error.details["field"] == "quantity"
        assert error.details["value"] == "-1"
        assert "quantity" in str(error)

    def test_value_truncated(self):
        error = ValidationError("notes", "too long", "x" * 500)
        assert len(error.details["value"]) == 100

    def test_none_value(self):
        error = ValidationError("reason", "required")
        assert error.details["value"] is None


class TestNotFoundErrors:
    @pytest.mark.parametrize(
        "error",
        [
            BatchNotFoundError(7),
            MaterialNotFoundError("MAT-001"),
            AllocationNotFoundError("sales_order", "SO-1"),
        ],
    )
    def test_are_not_found_errors(self, error):
        assert isinstance(error, NotFoundError)
        assert isinstance(error, LedgerError)

    def test_batch_not_found_details(self):
        error = BatchNotFoundError(42)
        assert error.code == "BATCH_NOT_FOUND"
        assert error.details == {"batch_id": 42}

    def test_allocation_not_found_message(self):
        error = AllocationNotFoundError("sales_order", "SO-1")
        assert "sales_order:SO-1" in str(error)


class TestInsufficientStockError:
    def test_shortfall(self):
        error = InsufficientStockError("MAT-001", Decimal("10"), Decimal("8"))
        assert error.requested == Decimal("10")
        assert error.available == Decimal("8")
        assert error.shortfall == Decimal("2")
        assert error.details["shortfall"] == "2"
        assert error.details["location_id"] is None

    def test_location_in_details(self):
        error = InsufficientStockError("MAT-001", Decimal("5"), Decimal("0"), location_id="WH-1")
        assert error.details["location_id"] == "WH-1"


class TestOperationErrors:
    def test_invalid_adjustment_default_reason(self):
        error = InvalidAdjustmentError(3, Decimal("2"), Decimal("-5"))
        assert error.code == "INVALID_ADJUSTMENT"
        assert "negative" in error.details["reason"]

    def test_already_reversed(self):
        error = AlreadyReversedError("sales_order", "SO-9")
        assert error.code == "ALREADY_REVERSED"
        assert error.details["reference_id"] == "SO-9"

    def test_concurrency_conflict(self):
        error = ConcurrencyConflictError("batch 1", "version 3 is stale")
        assert error.code == "CONCURRENCY_CONFLICT"
        assert "batch 1" in str(error)


class TestStorageErrors:
    def test_database_error(self):
        error = DatabaseError("insert", "disk full")
        assert isinstance(error, StorageError)
        assert error.details == {"operation": "insert", "error": "disk full"}

    def test_configuration_error(self):
        error = ConfigurationError("bad setting")
        assert error.code == "ConfigurationError"
