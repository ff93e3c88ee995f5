"""Post-commit invalidation events."""

from batchledger.infrastructure.events.sinks import (
    InvalidationDispatcher,
    LoggingInvalidationSink,
    NullInvalidationSink,
    RecordingInvalidationSink,
)

__all__ = [
    "InvalidationDispatcher",
    "LoggingInvalidationSink",
    "NullInvalidationSink",
    "RecordingInvalidationSink",
]
