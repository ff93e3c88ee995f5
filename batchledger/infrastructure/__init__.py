"""Infrastructure layer implementations."""

from batchledger.infrastructure import events, storage

__all__ = ["storage", "events"]
