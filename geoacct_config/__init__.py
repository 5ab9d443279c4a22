"""
Reference data configuration.

Bundled defaults live in ``geoacct_config/defaults``; company-specific
sets are directories holding the same three YAML files.

    from geoacct_config import load_reference_set

    reference = load_reference_set()
    reference.account_directory().get("1102")
"""

from geoacct_config.loader import (
    DEFAULTS_DIR,
    load_asset_accounts,
    load_cashflow_categories,
    load_chart_of_accounts,
    load_reference_set,
)
from geoacct_config.schema import ReferenceSet

__all__ = [
    "DEFAULTS_DIR",
    "ReferenceSet",
    "load_asset_accounts",
    "load_cashflow_categories",
    "load_chart_of_accounts",
    "load_reference_set",
]
