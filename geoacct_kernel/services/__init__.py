"""Kernel services: ledger store (read/write), reference directories, cache."""

from geoacct_kernel.services.cache import ScopedCache
from geoacct_kernel.services.ledger_store import LedgerStore, SqlLedgerStore
from geoacct_kernel.services.reference_service import ReferenceService

__all__ = [
    "LedgerStore",
    "ReferenceService",
    "ScopedCache",
    "SqlLedgerStore",
]
