"""
Reference data set schema.

The human-authored source artifact for reference data: the chart of
accounts, the cash-flow category map and the fixed-asset account routing,
parsed from YAML by ``geoacct_config.loader``.
"""

from __future__ import annotations

from dataclasses import dataclass

from geoacct_kernel.domain.dtos import AccountInfo, CashFlowCategoryEntry
from geoacct_kernel.domain.reference import AccountDirectory, CashFlowCategoryMap
from geoacct_kernel.exceptions import ValidationError
from geoacct_modules.assets.config import AssetConfig


@dataclass(frozen=True)
class ReferenceSet:
    """One consistent set of reference data plus the checksum of its source."""

    accounts: tuple[AccountInfo, ...]
    cashflow_categories: tuple[CashFlowCategoryEntry, ...]
    asset_config: AssetConfig
    checksum: str = ""

    def account_directory(self) -> AccountDirectory:
        return AccountDirectory.from_accounts(self.accounts)

    def cashflow_map(self) -> CashFlowCategoryMap:
        return CashFlowCategoryMap.from_entries(self.cashflow_categories)

    def validate(self) -> None:
        """
        Cross-check the three fragments.

        Raises ValidationError when a cash-flow entry or an asset posting
        account is missing from the chart of accounts.
        """
        directory = self.account_directory()
        self.cashflow_map()
        dangling = sorted(
            {e.account_code for e in self.cashflow_categories if e.account_code not in directory}
            | {c for c in self.asset_config.all_account_codes() if c not in directory}
        )
        if dangling:
            raise ValidationError(
                f"accounts missing from the chart of accounts: {', '.join(dangling)}",
                field="account_code",
                value=dangling,
            )
