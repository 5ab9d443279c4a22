"""
Fixed Assets Configuration Schema.

Holds the one category -> account-code table used by every asset posting,
plus the shared role accounts (cash, depreciation expense, disposal loss).
Defaults match the standard chart of accounts; company-specific values
come from YAML through ``geoacct_config.loader.load_asset_accounts``.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Self

from geoacct_kernel.exceptions import ValidationError
from geoacct_kernel.logging_config import get_logger
from geoacct_modules.assets.profiles import AccountRole

logger = get_logger("modules.assets.config")


@dataclass(frozen=True)
class CategoryAccounts:
    """Fixed-asset and accumulated-depreciation accounts for one category."""

    fixed_asset: str
    accumulated_depreciation: str


DEFAULT_CATEGORY_ACCOUNTS: dict[str, CategoryAccounts] = {
    "equipment": CategoryAccounts("1501", "1601"),
    "vehicle": CategoryAccounts("1503", "1603"),
    "building": CategoryAccounts("1505", "1605"),
    "office": CategoryAccounts("1504", "1604"),
    "other": CategoryAccounts("1501", "1601"),
}

DEFAULT_ROLE_ACCOUNTS: dict[AccountRole, str] = {
    AccountRole.CASH: "1102",
    AccountRole.DEPRECIATION_EXPENSE: "6105",
    AccountRole.LOSS_ON_DISPOSAL: "6105",
}


@dataclass
class AssetConfig:
    """
    Configuration schema for fixed-asset postings.

    Override at instantiation with company-specific values:

        config = AssetConfig(
            account_mappings={AccountRole.CASH: "1101", ...},
            fallback_category="equipment",
        )

    Categories missing from ``category_accounts`` resolve to
    ``fallback_category``; the fallback is logged, never silent.
    """

    category_accounts: dict[str, CategoryAccounts] = field(
        default_factory=lambda: dict(DEFAULT_CATEGORY_ACCOUNTS)
    )
    account_mappings: dict[AccountRole, str] = field(
        default_factory=lambda: dict(DEFAULT_ROLE_ACCOUNTS)
    )
    fallback_category: str = "equipment"

    # Depreciation refresh posts an adjustment only above this difference
    depreciation_tolerance: Decimal = Decimal("0.01")

    def __post_init__(self):
        if self.fallback_category not in self.category_accounts:
            raise ValidationError(
                f"fallback category {self.fallback_category!r} has no accounts",
                field="fallback_category",
                value=self.fallback_category,
            )
        missing = [r.value for r in DEFAULT_ROLE_ACCOUNTS if r not in self.account_mappings]
        if missing:
            raise ValidationError(
                f"missing account mappings for roles: {', '.join(missing)}",
                field="account_mappings",
                value=missing,
            )
        logger.info(
            "asset_config_initialized",
            extra={
                "categories": sorted(self.category_accounts),
                "fallback_category": self.fallback_category,
                "cash_account": self.account_mappings[AccountRole.CASH],
                "depreciation_tolerance": str(self.depreciation_tolerance),
            },
        )

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with the standard chart-of-accounts routing."""
        logger.info("asset_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """
        Create config from a dictionary (e.g. parsed YAML)::

            categories:
              equipment: {fixed_asset: "1501", accumulated_depreciation: "1601"}
            accounts:
              cash: "1102"
              depreciation_expense: "6105"
              loss_on_disposal: "6105"
            fallback_category: equipment
            depreciation_tolerance: "0.01"
        """
        logger.info(
            "asset_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        kwargs: dict[str, Any] = {}
        if "categories" in data:
            kwargs["category_accounts"] = {
                str(name).lower(): CategoryAccounts(
                    fixed_asset=str(row["fixed_asset"]),
                    accumulated_depreciation=str(row["accumulated_depreciation"]),
                )
                for name, row in data["categories"].items()
            }
        if "accounts" in data:
            mappings = dict(DEFAULT_ROLE_ACCOUNTS)
            for role_name, code in data["accounts"].items():
                try:
                    role = AccountRole(role_name)
                except ValueError as exc:
                    raise ValidationError(
                        f"unknown account role: {role_name!r}",
                        field="accounts",
                        value=role_name,
                    ) from exc
                mappings[role] = str(code)
            kwargs["account_mappings"] = mappings
        if "fallback_category" in data:
            kwargs["fallback_category"] = str(data["fallback_category"]).lower()
        if "depreciation_tolerance" in data:
            kwargs["depreciation_tolerance"] = Decimal(str(data["depreciation_tolerance"]))
        return cls(**kwargs)

    def resolve_accounts(self, category: str) -> dict[AccountRole, str]:
        """Role -> account code for an asset of ``category``."""
        key = (category or "").strip().lower()
        accounts = self.category_accounts.get(key)
        if accounts is None:
            logger.warning(
                "asset_category_fallback",
                extra={"category": category, "fallback_category": self.fallback_category},
            )
            accounts = self.category_accounts[self.fallback_category]
        resolved = dict(self.account_mappings)
        resolved[AccountRole.FIXED_ASSET] = accounts.fixed_asset
        resolved[AccountRole.ACCUMULATED_DEPRECIATION] = accounts.accumulated_depreciation
        return resolved

    def all_account_codes(self) -> set[str]:
        codes = set(self.account_mappings.values())
        for accounts in self.category_accounts.values():
            codes.update((accounts.fixed_asset, accounts.accumulated_depreciation))
        return codes
