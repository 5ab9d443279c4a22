"""Tests for AssetConfig and ReportingConfig."""

from decimal import Decimal

import pytest

from geoacct_kernel.exceptions import ValidationError
from geoacct_modules.assets import AccountRole, AssetConfig, CategoryAccounts
from geoacct_modules.reporting import ReportingConfig


class TestAssetConfig:
    def test_defaults(self, captured_logs):
        config = AssetConfig.with_defaults()
        assert config.fallback_category == "equipment"
        assert config.depreciation_tolerance == Decimal("0.01")
        assert any(r["message"] == "asset_config_initialized" for r in captured_logs())

    def test_resolve_accounts(self):
        accounts = AssetConfig.with_defaults().resolve_accounts("Vehicle")
        assert accounts[AccountRole.FIXED_ASSET] == "1503"
        assert accounts[AccountRole.ACCUMULATED_DEPRECIATION] == "1603"
        assert accounts[AccountRole.CASH] == "1102"
        assert accounts[AccountRole.LOSS_ON_DISPOSAL] == "6105"

    def test_fallback_category_must_exist(self):
        with pytest.raises(ValidationError):
            AssetConfig(fallback_category="drone")

    def test_all_roles_required(self):
        with pytest.raises(ValidationError):
            AssetConfig(account_mappings={AccountRole.CASH: "1102"})

    def test_from_dict(self):
        config = AssetConfig.from_dict({
            "categories": {
                "Equipment": {"fixed_asset": "1502", "accumulated_depreciation": "1602"},
            },
            "accounts": {"cash": "1101"},
        })
        assert config.category_accounts == {"equipment": CategoryAccounts("1502", "1602")}
        assert config.account_mappings[AccountRole.CASH] == "1101"
        assert config.account_mappings[AccountRole.DEPRECIATION_EXPENSE] == "6105"

    def test_from_dict_unknown_role(self):
        with pytest.raises(ValidationError):
            AssetConfig.from_dict({"accounts": {"petty_cash": "1101"}})

    def test_all_account_codes(self):
        codes = AssetConfig.with_defaults().all_account_codes()
        assert {"1102", "6105", "1501", "1601", "1505", "1605"} <= codes


class TestReportingConfig:
    def test_defaults(self):
        config = ReportingConfig.with_defaults()
        assert config.cache_ttl_seconds == 300
        assert config.require_full_coverage is False

    def test_from_dict(self):
        config = ReportingConfig.from_dict({"cache_ttl_seconds": 30, "require_full_coverage": True})
        assert config.cache_ttl_seconds == 30
        assert config.require_full_coverage

    def test_non_positive_ttl(self):
        with pytest.raises(ValidationError):
            ReportingConfig(cache_ttl_seconds=0)
