"""Timestamp helpers shared by entities and the system clock."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current time as naive UTC, the form every stored timestamp uses."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
