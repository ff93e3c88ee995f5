"""FIFO batch inventory ledger."""

__version__ = "1.0.0"
