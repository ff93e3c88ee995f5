"""Core domain services."""

from batchledger.core.services.aggregate_recalculator import (
    AggregateRecalculator,
    moving_average,
)
from batchledger.core.services.fifo_allocator import (
    fifo_key,
    plan_fifo_allocation,
    weighted_average_cost,
)

__all__ = [
    "AggregateRecalculator",
    "moving_average",
    "fifo_key",
    "plan_fifo_allocation",
    "weighted_average_cost",
]
