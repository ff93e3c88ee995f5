"""Tests for TransferBatchUseCase."""

from decimal import Decimal

import pytest

from batchledger.application.dto.requests import TransferBatchRequest
from batchledger.application.use_cases.transfer_batch import TransferBatchUseCase
from batchledger.core.entities.movement import MovementType
from batchledger.core.exceptions import InsufficientStockError, ValidationError


@pytest.fixture
def use_case(deps):
    return TransferBatchUseCase(**deps)


class TestTransferBatchUseCase:
    async def test_splits_batch(self, use_case, session, make_batch):
        source = make_batch(1, "20", received="20", cost="3.5")
        session.batches.get.return_value = source

        result = await use_case.execute(
            TransferBatchRequest(batch_id=1, quantity=5, to_location_id="WH-2")
        )

        assert result.source.remaining_quantity == Decimal("15")
        destination = result.destination
        assert destination.location_id == "WH-2"
        assert destination.quantity_received == Decimal("5")
        assert destination.receipt_date == source.receipt_date
        assert destination.unit_cost == Decimal("3.5")
        assert destination.source_batch_id == 1
        assert destination.batch_number.startswith("B-1-TRF-")
        assert destination.notes == "Transferred from batch B-1"

    async def test_paired_movements(self, use_case, session, make_batch):
        session.batches.get.return_value = make_batch(1, "20", received="20")

        result = await use_case.execute(
            TransferBatchRequest(batch_id=1, quantity=5, to_location_id="WH-2")
        )

        assert result.out_movement.movement_type == MovementType.TRANSFER_OUT
        assert result.out_movement.quantity == Decimal("-5")
        assert result.out_movement.reference_id == str(result.destination.id)
        assert result.in_movement.movement_type == MovementType.TRANSFER_IN
        assert result.in_movement.quantity == Decimal("5")
        assert result.in_movement.reference_id == "1"

    async def test_aggregate_untouched(self, use_case, session, make_batch):
        session.batches.get.return_value = make_batch(1, "20", received="20")

        await use_case.execute(TransferBatchRequest(batch_id=1, quantity=5, to_location_id="WH-2"))

        session.aggregates.save.assert_not_awaited()

    async def test_invalidates_both_locations(
        self, use_case, session, make_batch, dispatcher, sink
    ):
        session.batches.get.return_value = make_batch(1, "20", received="20")

        await use_case.execute(TransferBatchRequest(batch_id=1, quantity=5, to_location_id="WH-2"))
        await dispatcher.drain()

        assert [e.location_id for e in sink.events] == ["WH-1", "WH-2"]

    async def test_same_location_rejected(self, use_case, session, make_batch):
        session.batches.get.return_value = make_batch(1, "20", received="20")

        with pytest.raises(ValidationError) as exc_info:
            await use_case.execute(
                TransferBatchRequest(batch_id=1, quantity=5, to_location_id="WH-1")
            )
        assert exc_info.value.details["field"] == "to_location_id"

    async def test_more_than_remaining_rejected(self, use_case, session, make_batch):
        session.batches.get.return_value = make_batch(1, "4")

        with pytest.raises(InsufficientStockError):
            await use_case.execute(
                TransferBatchRequest(batch_id=1, quantity=5, to_location_id="WH-2")
            )
        session.batches.create.assert_not_awaited()
