"""Unit tests for ledger interface abstract classes."""

import typing
from datetime import date, datetime

import pytest

from batchledger.core.entities.batch import Batch
from batchledger.core.interfaces import (
    IBatchStore,
    IClock,
    IInvalidationSink,
    IMaterialAggregateStore,
    IMovementLedger,
    IUnitOfWork,
)
from batchledger.infrastructure.storage.sqlite.batch_store import SQLiteBatchStore


class TestIBatchStoreInterface:
    def test_is_abstract_class(self):
        with pytest.raises(TypeError, match="Can't instantiate abstract class"):
            IBatchStore()

    def test_operations_defined(self):
        expected = {
            "create",
            "get",
            "list_active",
            "has_active_at_location",
            "update_quantity",
            "update_details",
            "search",
            "count",
            "list_for_material",
        }
        assert expected == set(IBatchStore.__abstractmethods__)

    def test_return_annotations_resolve(self):
        hints = typing.get_type_hints(SQLiteBatchStore.list_for_material)
        assert hints["return"] == list[Batch]


class TestIMovementLedgerInterface:
    def test_is_abstract_class(self):
        with pytest.raises(TypeError, match="Can't instantiate abstract class"):
            IMovementLedger()

    def test_no_update_or_delete(self):
        methods = set(IMovementLedger.__abstractmethods__)
        assert "append" in methods
        assert not any(m.startswith(("update", "delete")) for m in methods)


class TestOtherPorts:
    @pytest.mark.parametrize(
        "port", [IMaterialAggregateStore, IUnitOfWork, IClock, IInvalidationSink]
    )
    def test_is_abstract_class(self, port):
        with pytest.raises(TypeError, match="Can't instantiate abstract class"):
            port()

    def test_clock_today_derives_from_now(self):
        class StubClock(IClock):
            def now(self) -> datetime:
                return datetime(2026, 5, 4, 23, 59)

        assert StubClock().today() == date(2026, 5, 4)
