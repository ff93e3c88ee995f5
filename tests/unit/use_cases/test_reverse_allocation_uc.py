"""Tests for ReverseAllocationUseCase."""

from datetime import date
from decimal import Decimal

import pytest

from batchledger.application.dto.requests import ReverseAllocationRequest
from batchledger.application.use_cases.reverse_allocation import ReverseAllocationUseCase
from batchledger.core.entities.movement import Movement, MovementType
from batchledger.core.exceptions import (
    AllocationNotFoundError,
    AlreadyReversedError,
    InvalidAdjustmentError,
)

REQUEST = ReverseAllocationRequest(reference_type="sales_order", reference_id="SO-1")


def issue(movement_id: int, batch_id: int, quantity: str) -> Movement:
    return Movement(
        id=movement_id,
        batch_id=batch_id,
        movement_type=MovementType.ISSUE,
        quantity=-Decimal(quantity),
        reference_type="sales_order",
        reference_id="SO-1",
        movement_date=date(2026, 3, 1),
    )


@pytest.fixture
def use_case(deps):
    return ReverseAllocationUseCase(**deps)


@pytest.fixture
def ledger_movements(session):
    """Route find_by_reference to per-type movement lists."""
    by_type: dict[MovementType, list[Movement]] = {}

    async def find_by_reference(reference_type, reference_id, movement_type=None):
        return by_type.get(movement_type, [])

    session.movements.find_by_reference.side_effect = find_by_reference
    return by_type


class TestReverseAllocationUseCase:
    async def test_restores_each_batch(self, use_case, session, make_batch, ledger_movements):
        ledger_movements[MovementType.ISSUE] = [issue(7, 1, "10"), issue(8, 2, "5")]
        batches = {1: make_batch(1, "0"), 2: make_batch(2, "5")}
        session.batches.get.side_effect = lambda batch_id: batches[batch_id]

        result = await use_case.execute(REQUEST)

        assert result.restored_quantity == Decimal("15")
        assert [(m.batch_id, m.quantity) for m in result.movements] == [
            (1, Decimal("10")),
            (2, Decimal("5")),
        ]
        assert [m.reverses_movement_id for m in result.movements] == [7, 8]
        assert all(m.movement_type == MovementType.REVERSAL for m in result.movements)
        assert all(m.reference_id == "SO-1" for m in result.movements)
        assert result.movements[0].notes == "Reversal of movement 7"
        assert batches[1].remaining_quantity == Decimal("10")
        assert batches[2].remaining_quantity == Decimal("10")

    async def test_aggregate_credited_once_per_material(
        self, use_case, session, make_batch, ledger_movements
    ):
        ledger_movements[MovementType.ISSUE] = [issue(7, 1, "4"), issue(8, 2, "3")]
        batches = {1: make_batch(1, "6"), 2: make_batch(2, "7")}
        session.batches.get.side_effect = lambda batch_id: batches[batch_id]

        await use_case.execute(REQUEST)

        assert session.aggregates.save.await_count == 1
        assert session.aggregates.save.call_args[0][0].total_quantity == Decimal("7")

    async def test_already_reversed(self, use_case, session, ledger_movements):
        ledger_movements[MovementType.ISSUE] = [issue(7, 1, "4")]
        ledger_movements[MovementType.REVERSAL] = [issue(9, 1, "-4")]

        with pytest.raises(AlreadyReversedError):
            await use_case.execute(REQUEST)
        session.batches.update_quantity.assert_not_awaited()

    async def test_unknown_reference(self, use_case, ledger_movements):
        with pytest.raises(AllocationNotFoundError):
            await use_case.execute(REQUEST)

    async def test_credit_above_received_rejected(
        self, use_case, session, make_batch, ledger_movements
    ):
        ledger_movements[MovementType.ISSUE] = [issue(7, 1, "4")]
        session.batches.get.return_value = make_batch(1, "8", received="10")

        with pytest.raises(InvalidAdjustmentError):
            await use_case.execute(REQUEST)
        session.movements.append.assert_not_awaited()
