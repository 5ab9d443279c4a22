"""Fixed assets: posting profiles, account routing, builders and service."""

from geoacct_modules.assets.config import AssetConfig, CategoryAccounts
from geoacct_modules.assets.posting import (
    AssetPosting,
    PostingLine,
    post_acquisition,
    post_depreciation_adjustment,
    post_disposal,
    post_value_adjustment,
)
from geoacct_modules.assets.profiles import AccountRole
from geoacct_modules.assets.service import DepreciationRunResult, FixedAssetService

__all__ = [
    "AccountRole",
    "AssetConfig",
    "AssetPosting",
    "CategoryAccounts",
    "DepreciationRunResult",
    "FixedAssetService",
    "PostingLine",
    "post_acquisition",
    "post_depreciation_adjustment",
    "post_disposal",
    "post_value_adjustment",
]
