"""Abstract interface for batch storage."""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal

from batchledger.core.entities.batch import Batch, BatchDetailsUpdate, BatchFilter


class IBatchStore(ABC):
    """Interface for batch persistence.

    Implementations are bound to the connection of one unit of work, so every
    call composes with the other stores used in the same transaction.
    """

    @abstractmethod
    async def create(self, batch: Batch) -> Batch:
        """Persist a new batch with remaining_quantity = quantity_received.

        The caller stamps created_at and updated_at.
        """
        pass

    @abstractmethod
    async def get(self, batch_id: int) -> Batch | None:
        """Get batch by ID."""
        pass

    @abstractmethod
    async def list_active(
        self, material_id: str, location_id: str | None = None
    ) -> list[Batch]:
        """Non-depleted batches in FIFO order: (receipt_date, id) ascending."""
        pass

    @abstractmethod
    async def has_active_at_location(self, material_id: str, location_id: str) -> bool:
        """Whether any non-depleted batch of the material sits at the location."""
        pass

    @abstractmethod
    async def update_quantity(
        self, batch: Batch, remaining_quantity: Decimal, updated_at: datetime | None = None
    ) -> Batch:
        """Set remaining quantity and depleted flag.

        Guarded by ``batch.version``; raises ConcurrencyConflictError when the
        row changed since it was read.
        """
        pass

    @abstractmethod
    async def update_details(
        self, batch_id: int, changes: BatchDetailsUpdate, updated_at: datetime | None = None
    ) -> Batch:
        """Edit descriptive fields (location, condition, expiry, notes)."""
        pass

    @abstractmethod
    async def search(
        self, filters: BatchFilter, limit: int = 50, offset: int = 0
    ) -> list[Batch]:
        """List batches matching filters in FIFO order."""
        pass

    @abstractmethod
    async def count(self, filters: BatchFilter) -> int:
        """Count batches matching filters."""
        pass

    @abstractmethod
    async def list_for_material(self, material_id: str) -> list[Batch]:
        """All batches of a material, depleted included, in FIFO order."""
        pass
