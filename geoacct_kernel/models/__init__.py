"""ORM models.  Importing this package registers every table on Base.metadata."""

from geoacct_kernel.models.account import Account, CashFlowCategory
from geoacct_kernel.models.fixed_asset import FixedAsset
from geoacct_kernel.models.project import Billing, Project, ProjectCost
from geoacct_kernel.models.transaction import LedgerTransaction

__all__ = [
    "Account",
    "Billing",
    "CashFlowCategory",
    "FixedAsset",
    "LedgerTransaction",
    "Project",
    "ProjectCost",
]
