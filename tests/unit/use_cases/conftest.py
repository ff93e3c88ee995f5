"""Fixtures for use case unit tests: mocked stores behind a fake unit of work."""

import itertools
from contextlib import asynccontextmanager
from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from batchledger.core.entities.batch import Batch
from batchledger.core.interfaces.unit_of_work import IUnitOfWork
from batchledger.infrastructure.events import InvalidationDispatcher


class FakeUnitOfWork(IUnitOfWork):
    """Yields the same mocked session for every transaction and snapshot."""

    def __init__(self, session):
        self.session = session
        self.transactions = 0
        self.snapshots = 0

    @asynccontextmanager
    async def transaction(self):
        self.transactions += 1
        yield self.session

    @asynccontextmanager
    async def snapshot(self):
        self.snapshots += 1
        yield self.session


@pytest.fixture
def session():
    ids = itertools.count(100)

    def append(movement):
        movement.id = next(ids)
        return movement

    def create(batch):
        batch.id = next(ids)
        batch.remaining_quantity = batch.quantity_received
        return batch

    def update_quantity(batch, remaining, updated_at=None):
        batch.remaining_quantity = remaining
        batch.updated_at = updated_at or batch.updated_at
        batch.is_depleted = remaining == 0
        batch.version += 1
        return batch

    batches = AsyncMock()
    batches.create.side_effect = create
    batches.update_quantity.side_effect = update_quantity
    batches.has_active_at_location.return_value = True

    movements = AsyncMock()
    movements.append.side_effect = append
    movements.find_by_reference.return_value = []

    aggregates = AsyncMock()
    aggregates.get.return_value = None
    aggregates.save.side_effect = lambda aggregate: aggregate

    return SimpleNamespace(batches=batches, movements=movements, aggregates=aggregates)


@pytest.fixture
def unit_of_work(session) -> FakeUnitOfWork:
    return FakeUnitOfWork(session)


@pytest.fixture
def dispatcher(sink) -> InvalidationDispatcher:
    return InvalidationDispatcher(sink)


@pytest.fixture
def deps(unit_of_work, clock, dispatcher, ledger_settings) -> dict:
    """Constructor arguments shared by every use case."""
    return {
        "unit_of_work": unit_of_work,
        "clock": clock,
        "dispatcher": dispatcher,
        "settings": ledger_settings,
    }


@pytest.fixture
def make_batch():
    """Factory for persisted-looking batches."""

    def factory(batch_id: int, remaining: str = "10", **overrides) -> Batch:
        data = {
            "id": batch_id,
            "material_id": "MAT-001",
            "batch_number": f"B-{batch_id}",
            "supplier_id": "SUP-1",
            "location_id": "WH-1",
            "receipt_date": date(2026, 1, batch_id % 28 + 1),
            "quantity_received": Decimal(overrides.pop("received", "10")),
            "remaining_quantity": Decimal(remaining),
            "unit_cost": Decimal(overrides.pop("cost", "2")),
        }
        data.update(overrides)
        data["is_depleted"] = data["remaining_quantity"] == 0
        return Batch(**data)

    return factory
