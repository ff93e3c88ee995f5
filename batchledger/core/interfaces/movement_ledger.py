"""Abstract interface for the append-only movement ledger."""

from abc import ABC, abstractmethod
from decimal import Decimal

from batchledger.core.entities.movement import Movement, MovementType


class IMovementLedger(ABC):
    """Interface for movement persistence. There is no update or delete."""

    @abstractmethod
    async def append(self, movement: Movement) -> Movement:
        """Record a movement in the current transaction."""
        pass

    @abstractmethod
    async def find_by_reference(
        self,
        reference_type: str,
        reference_id: str,
        movement_type: MovementType | None = None,
    ) -> list[Movement]:
        """Movements tied to one business event, in creation order."""
        pass

    @abstractmethod
    async def list_for_batch(
        self, batch_id: int, limit: int = 50, offset: int = 0
    ) -> list[Movement]:
        """Movements on a batch, newest first."""
        pass

    @abstractmethod
    async def sum_for_batches(self, batch_ids: list[int]) -> dict[int, Decimal]:
        """Net movement quantity per batch."""
        pass

    @abstractmethod
    async def list_for_material(self, material_id: str) -> list[Movement]:
        """Every movement on a material's batches, in creation order."""
        pass
