"""Pure domain core: values, snapshots, reference directories, clock."""

from geoacct_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from geoacct_kernel.domain.dtos import (
    AccountInfo,
    AccountType,
    ActivityCategory,
    BillingRecord,
    BillingStatus,
    CashFlowCategoryEntry,
    CostStatus,
    FixedAssetSnapshot,
    ProjectCostRecord,
    ProjectSnapshot,
    ProjectStatus,
    TransactionRecord,
)
from geoacct_kernel.domain.entry_types import (
    EntryKind,
    NormalizedEntry,
    ProfitRole,
    normalize_entry,
)
from geoacct_kernel.domain.reference import AccountDirectory, CashFlowCategoryMap

__all__ = [
    "AccountDirectory",
    "AccountInfo",
    "AccountType",
    "ActivityCategory",
    "BillingRecord",
    "BillingStatus",
    "CashFlowCategoryEntry",
    "CashFlowCategoryMap",
    "Clock",
    "CostStatus",
    "DeterministicClock",
    "EntryKind",
    "FixedAssetSnapshot",
    "NormalizedEntry",
    "ProfitRole",
    "ProjectCostRecord",
    "ProjectSnapshot",
    "ProjectStatus",
    "SystemClock",
    "TransactionRecord",
    "normalize_entry",
]
