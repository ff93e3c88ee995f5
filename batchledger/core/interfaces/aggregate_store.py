"""Abstract interface for the per-material aggregate projection."""

from abc import ABC, abstractmethod

from batchledger.core.entities.aggregate import MaterialAggregate


class IMaterialAggregateStore(ABC):
    """Interface for material aggregate persistence."""

    @abstractmethod
    async def get(self, material_id: str) -> MaterialAggregate | None:
        """Get the aggregate row for a material."""
        pass

    @abstractmethod
    async def save(self, aggregate: MaterialAggregate) -> MaterialAggregate:
        """Insert or replace the aggregate row."""
        pass
