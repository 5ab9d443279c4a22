"""
Reference service -- cached access to the account directory and the
cash-flow category map.

The directories are loaded once per cache TTL from the ledger store and
shared by every report built in that scope.  Reseeding the reference data
invalidates them immediately.
"""

from __future__ import annotations

from collections.abc import Iterable

from geoacct_kernel.domain.dtos import AccountInfo, CashFlowCategoryEntry
from geoacct_kernel.domain.reference import AccountDirectory, CashFlowCategoryMap
from geoacct_kernel.logging_config import get_logger
from geoacct_kernel.services.cache import ScopedCache
from geoacct_kernel.services.ledger_store import LedgerStore

logger = get_logger("services.reference")

CACHE_PREFIX = "reference:"
ACCOUNTS_KEY = CACHE_PREFIX + "accounts"
CASHFLOW_KEY = CACHE_PREFIX + "cashflow_map"


class ReferenceService:
    """Account directory and cash-flow map, cached in an injected ScopedCache."""

    def __init__(self, store: LedgerStore, cache: ScopedCache | None = None):
        self._store = store
        self._cache = cache or ScopedCache()

    def account_directory(self) -> AccountDirectory:
        return self._cache.get_or_load(
            ACCOUNTS_KEY,
            lambda: AccountDirectory.from_accounts(self._store.accounts()),
        )

    def cashflow_map(self) -> CashFlowCategoryMap:
        return self._cache.get_or_load(
            CASHFLOW_KEY,
            lambda: CashFlowCategoryMap.from_entries(self._store.cashflow_entries()),
        )

    def reseed(
        self,
        accounts: Iterable[AccountInfo],
        entries: Iterable[CashFlowCategoryEntry],
    ) -> None:
        """Replace stored reference data and drop the cached directories."""
        accounts = list(accounts)
        entries = list(entries)
        # Validate before writing: duplicate codes raise here.
        AccountDirectory.from_accounts(accounts)
        CashFlowCategoryMap.from_entries(entries)

        with self._store.unit_of_work("reference_reseed"):
            self._store.replace_reference_data(accounts, entries)
        self.invalidate()
        logger.info(
            "reference_data_reseeded",
            extra={"accounts": len(accounts), "cashflow_entries": len(entries)},
        )

    def invalidate(self) -> None:
        self._cache.invalidate_prefix(CACHE_PREFIX)
