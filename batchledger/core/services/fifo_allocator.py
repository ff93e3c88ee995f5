"""
FIFO allocation planner.

Pure domain logic shared by preview and allocate: given a material's active
batches, decide which units satisfy a withdrawal and at what cost. Nothing
here touches storage; the allocate use case applies the plan under the write
lock.
"""

from collections.abc import Iterable
from decimal import Decimal

from batchledger.core.entities.allocation import AllocationLine, AllocationResult
from batchledger.core.entities.batch import Batch

ZERO = Decimal("0")


def fifo_key(batch: Batch) -> tuple:
    """Total FIFO order: oldest receipt first, id breaks ties."""
    return (batch.receipt_date, batch.id or 0)


def weighted_average_cost(lines: Iterable[AllocationLine], places: int = 4) -> Decimal:
    """Σ(quantity × unit_cost) / Σ(quantity), rounded to ``places``."""
    total_qty = ZERO
    total_cost = ZERO
    for line in lines:
        total_qty += line.quantity
        total_cost += line.quantity * line.unit_cost
    if total_qty == 0:
        return ZERO
    return (total_cost / total_qty).quantize(Decimal(1).scaleb(-places))


def plan_fifo_allocation(
    material_id: str,
    batches: Iterable[Batch],
    quantity: Decimal,
    location_id: str | None = None,
    cost_places: int = 4,
) -> AllocationResult:
    """
    Walk batches oldest-first taking ``min(remaining, still_needed)`` from each.

    The result may be short (``can_fulfill`` is False); callers that commit
    must check it before mutating anything.

    Args:
        material_id: Material being withdrawn
        batches: Candidate batches (any order; re-sorted by FIFO key)
        quantity: Requested quantity, > 0
        location_id: Location scope the batches were loaded for
        cost_places: Decimal places of the weighted average cost

    Returns:
        AllocationResult with one line per touched batch
    """
    ordered = sorted(
        (b for b in batches if not b.is_depleted and b.remaining_quantity > 0),
        key=fifo_key,
    )

    needed = quantity
    lines: list[AllocationLine] = []
    for batch in ordered:
        if needed <= 0:
            break
        take = min(batch.remaining_quantity, needed)
        lines.append(
            AllocationLine(
                batch_id=batch.id,  # type: ignore[arg-type]
                batch_number=batch.batch_number,
                quantity=take,
                unit_cost=batch.unit_cost,
                receipt_date=batch.receipt_date,
                supplier_id=batch.supplier_id,
                remaining_after=batch.remaining_quantity - take,
            )
        )
        needed -= take

    allocated = sum((line.quantity for line in lines), ZERO)
    total_cost = sum((line.cost for line in lines), ZERO)

    return AllocationResult(
        material_id=material_id,
        location_id=location_id,
        requested_quantity=quantity,
        allocated_quantity=allocated,
        available_quantity=sum((b.remaining_quantity for b in ordered), ZERO),
        total_cost=total_cost,
        weighted_average_cost=weighted_average_cost(lines, cost_places),
        lines=lines,
    )
