"""
Inventory ledger facade.

The single entry point the surrounding application calls. Each method
validates its arguments into a request DTO and delegates to one use case.
"""

from decimal import Decimal
from typing import Any

from batchledger.application.dto.requests import (
    AdjustBatchRequest,
    AllocateRequest,
    CreateBatchRequest,
    ListBatchesRequest,
    ListMovementsRequest,
    PreviewAllocationRequest,
    ReverseAllocationRequest,
    TransferBatchRequest,
    UpdateBatchRequest,
    parse_request,
)
from batchledger.application.use_cases import (
    AdjustBatchUseCase,
    AdjustmentResult,
    AllocateStockUseCase,
    BatchPage,
    CreateBatchResult,
    CreateBatchUseCase,
    GetBatchUseCase,
    GetMaterialSummaryUseCase,
    ListBatchesUseCase,
    ListMovementsUseCase,
    PreviewAllocationUseCase,
    ReconcileMaterialUseCase,
    ReversalResult,
    ReverseAllocationUseCase,
    TransferBatchUseCase,
    TransferResult,
    UpdateBatchUseCase,
)
from batchledger.config import LedgerSettings
from batchledger.core.entities.aggregate import MaterialSummary, ReconciliationReport
from batchledger.core.entities.allocation import AllocationResult
from batchledger.core.entities.batch import Batch
from batchledger.core.entities.movement import Movement, Reference
from batchledger.core.interfaces.clock import IClock
from batchledger.core.interfaces.invalidation import IInvalidationSink
from batchledger.core.interfaces.unit_of_work import IUnitOfWork
from batchledger.infrastructure.events import InvalidationDispatcher, LoggingInvalidationSink


class InventoryLedger:
    """FIFO batch ledger operations over one unit of work."""

    def __init__(
        self,
        unit_of_work: IUnitOfWork | None = None,
        clock: IClock | None = None,
        invalidation_sink: IInvalidationSink | None = None,
        settings: LedgerSettings | None = None,
    ):
        self.dispatcher = InvalidationDispatcher(invalidation_sink or LoggingInvalidationSink())
        deps: dict[str, Any] = {
            "unit_of_work": unit_of_work,
            "clock": clock,
            "dispatcher": self.dispatcher,
            "settings": settings,
        }
        self._create_batch = CreateBatchUseCase(**deps)
        self._preview = PreviewAllocationUseCase(**deps)
        self._allocate = AllocateStockUseCase(**deps)
        self._adjust = AdjustBatchUseCase(**deps)
        self._transfer = TransferBatchUseCase(**deps)
        self._reverse = ReverseAllocationUseCase(**deps)
        self._summary = GetMaterialSummaryUseCase(**deps)
        self._movements = ListMovementsUseCase(**deps)
        self._get_batch = GetBatchUseCase(**deps)
        self._list_batches = ListBatchesUseCase(**deps)
        self._update_batch = UpdateBatchUseCase(**deps)
        self._reconcile = ReconcileMaterialUseCase(**deps)

    async def create_batch(
        self,
        material_id: str,
        supplier_id: str,
        quantity: Decimal | int | str,
        unit_cost: Decimal | int | str,
        **options: Any,
    ) -> CreateBatchResult:
        """Receive a batch. Options: receipt_date, purchase_order_id,
        location_id, batch_number, expiry_date, condition, location, notes,
        actor_id."""
        request = parse_request(
            CreateBatchRequest,
            material_id=material_id,
            supplier_id=supplier_id,
            quantity=quantity,
            unit_cost=unit_cost,
            **options,
        )
        return await self._create_batch.execute(request)

    async def preview_allocation(
        self,
        material_id: str,
        quantity: Decimal | int | str,
        location_id: str | None = None,
    ) -> AllocationResult:
        request = parse_request(
            PreviewAllocationRequest,
            material_id=material_id,
            quantity=quantity,
            location_id=location_id,
        )
        return await self._preview.execute(request)

    async def allocate(
        self,
        material_id: str,
        quantity: Decimal | int | str,
        reference: Reference | dict,
        location_id: str | None = None,
        actor_id: str | None = None,
        notes: str | None = None,
    ) -> AllocationResult:
        request = parse_request(
            AllocateRequest,
            material_id=material_id,
            quantity=quantity,
            reference=reference,
            location_id=location_id,
            actor_id=actor_id,
            notes=notes,
        )
        return await self._allocate.execute(request)

    async def adjust(
        self,
        batch_id: int,
        delta: Decimal | int | str,
        reason: str,
        actor_id: str | None = None,
        notes: str | None = None,
    ) -> AdjustmentResult:
        request = parse_request(
            AdjustBatchRequest,
            batch_id=batch_id,
            delta=delta,
            reason=reason,
            actor_id=actor_id,
            notes=notes,
        )
        return await self._adjust.execute(request)

    async def transfer(
        self,
        batch_id: int,
        quantity: Decimal | int | str,
        to_location_id: str,
        actor_id: str | None = None,
        notes: str | None = None,
    ) -> TransferResult:
        request = parse_request(
            TransferBatchRequest,
            batch_id=batch_id,
            quantity=quantity,
            to_location_id=to_location_id,
            actor_id=actor_id,
            notes=notes,
        )
        return await self._transfer.execute(request)

    async def reverse(
        self,
        reference_type: str,
        reference_id: str,
        actor_id: str | None = None,
    ) -> ReversalResult:
        request = parse_request(
            ReverseAllocationRequest,
            reference_type=reference_type,
            reference_id=reference_id,
            actor_id=actor_id,
        )
        return await self._reverse.execute(request)

    async def get_material_summary(self, material_id: str) -> MaterialSummary:
        return await self._summary.execute(material_id)

    async def list_movements(
        self, batch_id: int, limit: int | None = None, offset: int = 0
    ) -> list[Movement]:
        request = parse_request(
            ListMovementsRequest, batch_id=batch_id, limit=limit, offset=offset
        )
        return await self._movements.execute(request)

    async def get_batch(self, batch_id: int) -> Batch:
        return await self._get_batch.execute(batch_id)

    async def list_batches(self, **filters: Any) -> BatchPage:
        """Filters: material_id, supplier_id, location_id, include_depleted,
        search, limit, offset."""
        request = parse_request(ListBatchesRequest, **filters)
        return await self._list_batches.execute(request)

    async def update_batch(self, batch_id: int, **changes: Any) -> Batch:
        """Changes: location, condition, expiry_date, notes."""
        request = parse_request(UpdateBatchRequest, batch_id=batch_id, **changes)
        return await self._update_batch.execute(request)

    async def reconcile_material(
        self, material_id: str, repair: bool = False
    ) -> ReconciliationReport:
        return await self._reconcile.execute(material_id, repair=repair)

    async def drain_events(self) -> None:
        """Wait for pending invalidation deliveries."""
        await self.dispatcher.drain()
