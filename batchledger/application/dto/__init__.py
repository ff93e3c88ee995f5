"""Data transfer objects for ledger operations."""

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

__all__ = [
    "CreateBatchRequest",
    "PreviewAllocationRequest",
    "AllocateRequest",
    "AdjustBatchRequest",
    "TransferBatchRequest",
    "ReverseAllocationRequest",
    "UpdateBatchRequest",
    "ListBatchesRequest",
    "ListMovementsRequest",
    "parse_request",
]
