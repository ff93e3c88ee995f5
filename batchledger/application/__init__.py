"""
Application layer - Use cases, DTOs, and the ledger facade.

This layer orchestrates business logic by:
1. Validating caller input into request DTOs
2. Running use cases inside ledger transactions
3. Providing factory functions for dependency injection

The InventoryLedger facade is the only entry point for callers.
"""

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
)
from batchledger.application.ledger import InventoryLedger
from batchledger.application.services import get_inventory_ledger, reset_services
from batchledger.application.use_cases import (
    AdjustmentResult,
    BatchPage,
    CreateBatchResult,
    ReversalResult,
    TransferResult,
)

__all__ = [
    # Request DTOs
    "CreateBatchRequest",
    "PreviewAllocationRequest",
    "AllocateRequest",
    "AdjustBatchRequest",
    "TransferBatchRequest",
    "ReverseAllocationRequest",
    "UpdateBatchRequest",
    "ListBatchesRequest",
    "ListMovementsRequest",
    # Results
    "CreateBatchResult",
    "AdjustmentResult",
    "TransferResult",
    "ReversalResult",
    "BatchPage",
    # Facade
    "InventoryLedger",
    "get_inventory_ledger",
    "reset_services",
]
