"""
Transfer Batch Use Case.

Move part of a batch to another location.
"""

from dataclasses import dataclass

from batchledger.application.dto.requests import TransferBatchRequest
from batchledger.application.use_cases.base import (
    LedgerUseCase,
    base36_timestamp,
    check_places,
)
from batchledger.config import get_logger
from batchledger.core.entities.batch import Batch
from batchledger.core.entities.events import InvalidationEvent
from batchledger.core.entities.movement import Movement, MovementType, ReferenceType
from batchledger.core.exceptions import (
    BatchNotFoundError,
    InsufficientStockError,
    ValidationError,
)
from batchledger.core.interfaces.unit_of_work import ILedgerSession

logger = get_logger(__name__)


@dataclass
class TransferResult:
    """Result of transferring stock between locations."""

    source: Batch
    destination: Batch
    out_movement: Movement
    in_movement: Movement


class TransferBatchUseCase(LedgerUseCase):
    """
    Split a batch across locations.

    The destination batch inherits the source's receipt date, so it keeps its
    FIFO age. Material-wide quantity and the aggregate are unchanged.
    """

    async def execute(self, request: TransferBatchRequest) -> TransferResult:
        """Execute transfer batch use case."""
        check_places("quantity", request.quantity, self.settings.quantity_places)

        logger.info(
            "transfer_batch_started",
            batch_id=request.batch_id,
            quantity=str(request.quantity),
            to_location_id=request.to_location_id,
        )

        async def work(
            session: ILedgerSession, events: list[InvalidationEvent]
        ) -> TransferResult:
            source = await session.batches.get(request.batch_id)
            if source is None:
                raise BatchNotFoundError(request.batch_id)
            if source.location_id == request.to_location_id:
                raise ValidationError(
                    "to_location_id",
                    "destination must differ from the source location",
                    request.to_location_id,
                )
            if request.quantity > source.remaining_quantity:
                raise InsufficientStockError(
                    material_id=source.material_id,
                    requested=request.quantity,
                    available=source.remaining_quantity,
                    location_id=source.location_id,
                )

            now = self.clock.now()
            source = await session.batches.update_quantity(
                source, source.remaining_quantity - request.quantity, updated_at=now
            )

            source_number = source.batch_number or f"BATCH-{source.id}"
            lineage = f"Transferred from batch {source_number}"
            destination = await session.batches.create(
                Batch(
                    material_id=source.material_id,
                    batch_number=f"{source_number}-TRF-{base36_timestamp(self.clock)}",
                    supplier_id=source.supplier_id,
                    purchase_order_id=source.purchase_order_id,
                    location_id=request.to_location_id,
                    receipt_date=source.receipt_date,
                    quantity_received=request.quantity,
                    remaining_quantity=request.quantity,
                    unit_cost=source.unit_cost,
                    expiry_date=source.expiry_date,
                    condition=source.condition,
                    notes=f"{lineage}. {request.notes}" if request.notes else lineage,
                    source_batch_id=source.id,
                    created_at=now,
                    updated_at=now,
                )
            )

            movement_date = self.clock.today()
            out_movement = await session.movements.append(
                Movement(
                    batch_id=source.id,  # type: ignore[arg-type]
                    movement_type=MovementType.TRANSFER_OUT,
                    quantity=-request.quantity,
                    reference_type=ReferenceType.BATCH_TRANSFER.value,
                    reference_id=str(destination.id),
                    movement_date=movement_date,
                    notes=request.notes,
                    actor_id=request.actor_id,
                    created_at=now,
                )
            )
            in_movement = await session.movements.append(
                Movement(
                    batch_id=destination.id,  # type: ignore[arg-type]
                    movement_type=MovementType.TRANSFER_IN,
                    quantity=request.quantity,
                    reference_type=ReferenceType.BATCH_TRANSFER.value,
                    reference_id=str(source.id),
                    movement_date=movement_date,
                    notes=lineage,
                    actor_id=request.actor_id,
                    created_at=now,
                )
            )

            events.append(
                InvalidationEvent(material_id=source.material_id, location_id=source.location_id)
            )
            events.append(
                InvalidationEvent(
                    material_id=source.material_id, location_id=request.to_location_id
                )
            )
            return TransferResult(
                source=source,
                destination=destination,
                out_movement=out_movement,
                in_movement=in_movement,
            )

        result = await self._run_write("transfer_batch", work)

        logger.info(
            "transfer_batch_complete",
            source_batch_id=result.source.id,
            destination_batch_id=result.destination.id,
            quantity=str(request.quantity),
        )
        return result
