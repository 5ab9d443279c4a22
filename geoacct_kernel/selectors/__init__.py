from geoacct_kernel.selectors.asset_selector import AssetSelector
from geoacct_kernel.selectors.base import BaseSelector
from geoacct_kernel.selectors.ledger_selector import LedgerSelector
from geoacct_kernel.selectors.project_selector import ProjectSelector
from geoacct_kernel.selectors.reference_selector import ReferenceSelector

__all__ = [
    "AssetSelector",
    "BaseSelector",
    "LedgerSelector",
    "ProjectSelector",
    "ReferenceSelector",
]
