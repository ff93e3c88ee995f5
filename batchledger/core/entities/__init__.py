"""Core domain entities."""

from batchledger.core.entities.aggregate import (
    MaterialAggregate,
    MaterialSummary,
    ReconciliationReport,
)
from batchledger.core.entities.allocation import AllocationLine, AllocationResult
from batchledger.core.entities.batch import (
    Batch,
    BatchCondition,
    BatchDetailsUpdate,
    BatchFilter,
)
from batchledger.core.entities.events import InvalidationEvent
from batchledger.core.entities.movement import (
    Movement,
    MovementType,
    Reference,
    ReferenceType,
)

__all__ = [
    # Batch entities
    "Batch",
    "BatchCondition",
    "BatchDetailsUpdate",
    "BatchFilter",
    # Ledger entities
    "Movement",
    "MovementType",
    "Reference",
    "ReferenceType",
    # Allocation entities
    "AllocationLine",
    "AllocationResult",
    # Aggregate entities
    "MaterialAggregate",
    "MaterialSummary",
    "ReconciliationReport",
    # Events
    "InvalidationEvent",
]
