"""Application use cases."""

from batchledger.application.use_cases.adjust_batch import AdjustBatchUseCase, AdjustmentResult
from batchledger.application.use_cases.allocate_stock import AllocateStockUseCase
from batchledger.application.use_cases.base import LedgerUseCase
from batchledger.application.use_cases.create_batch import CreateBatchResult, CreateBatchUseCase
from batchledger.application.use_cases.get_batch import GetBatchUseCase
from batchledger.application.use_cases.get_material_summary import GetMaterialSummaryUseCase
from batchledger.application.use_cases.list_batches import BatchPage, ListBatchesUseCase
from batchledger.application.use_cases.list_movements import ListMovementsUseCase
from batchledger.application.use_cases.preview_allocation import PreviewAllocationUseCase
from batchledger.application.use_cases.reconcile_material import ReconcileMaterialUseCase
from batchledger.application.use_cases.reverse_allocation import (
    ReversalResult,
    ReverseAllocationUseCase,
)
from batchledger.application.use_cases.transfer_batch import TransferBatchUseCase, TransferResult
from batchledger.application.use_cases.update_batch import UpdateBatchUseCase

__all__ = [
    "LedgerUseCase",
    "CreateBatchUseCase",
    "CreateBatchResult",
    "PreviewAllocationUseCase",
    "AllocateStockUseCase",
    "AdjustBatchUseCase",
    "AdjustmentResult",
    "TransferBatchUseCase",
    "TransferResult",
    "ReverseAllocationUseCase",
    "ReversalResult",
    "GetMaterialSummaryUseCase",
    "ListMovementsUseCase",
    "GetBatchUseCase",
    "ListBatchesUseCase",
    "BatchPage",
    "UpdateBatchUseCase",
    "ReconcileMaterialUseCase",
]
