"""
Factory functions for dependency injection.

Wires the SQLite unit of work, system clock and invalidation sink into the
ledger facade. Callers that need other collaborators build InventoryLedger
directly.
"""

from batchledger.application.ledger import InventoryLedger
from batchledger.core.interfaces.invalidation import IInvalidationSink

# Singleton ledger instance
_inventory_ledger: InventoryLedger | None = None


async def get_inventory_ledger(
    invalidation_sink: IInvalidationSink | None = None,
) -> InventoryLedger:
    """
    Get or create the InventoryLedger on the global connection pool.

    Args:
        invalidation_sink: Optional sink override (only honoured on first call)

    Returns:
        Configured InventoryLedger
    """
    global _inventory_ledger

    if _inventory_ledger is not None:
        return _inventory_ledger

    # Lazy import infrastructure to avoid circular imports
    from batchledger.infrastructure.clock import SystemClock
    from batchledger.infrastructure.storage.sqlite import get_unit_of_work

    _inventory_ledger = InventoryLedger(
        unit_of_work=await get_unit_of_work(),
        clock=SystemClock(),
        invalidation_sink=invalidation_sink,
    )
    return _inventory_ledger


def reset_services() -> None:
    """Reset singleton instances (for testing)."""
    global _inventory_ledger
    _inventory_ledger = None
