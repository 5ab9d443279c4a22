"""
Entry kinds -- one internal vocabulary for transaction types.

Responsibility:
    Ledger rows arrive with ``type`` values from several vocabularies:
    ``debit``/``credit`` from the posting paths, ``income``/``expense``
    from cash-book entry, ``EXPENSE``/``REVENUE``/``WIP_INCREASE``/
    ``WIP_DECREASE`` from project costing, and localized labels written
    by older imports.  ``normalize_entry`` translates every one of them
    into an ``EntryKind`` plus a non-negative magnitude at ingestion.

Sign convention:
    ``EntryKind.direction`` is +1 for a cash inflow and -1 for an outflow.
    A debit is an inflow, a credit an outflow.  Revenue-like kinds are
    inflows, cost-like kinds are outflows.

Profit role:
    ``EntryKind.role`` tells the profitability aggregator whether the
    entry counts as an indirect cost, indirect revenue, or neither.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from geoacct_kernel.db.types import ZERO, to_decimal
from geoacct_kernel.exceptions import ValidationError


class ProfitRole(str, Enum):
    NONE = "none"
    COST = "cost"
    REVENUE = "revenue"


class EntryKind(str, Enum):
    """Internal transaction kind with an explicit direction and profit role."""

    DEBIT = "debit"
    CREDIT = "credit"
    REVENUE = "revenue"
    EXPENSE = "expense"
    WIP_INCREASE = "wip_increase"
    WIP_DECREASE = "wip_decrease"

    @property
    def direction(self) -> int:
        return _DIRECTIONS[self]

    @property
    def role(self) -> ProfitRole:
        return _ROLES[self]

    def signed(self, magnitude: Decimal) -> Decimal:
        """Apply this kind's direction to a non-negative magnitude."""
        return magnitude if self.direction > 0 else -magnitude


_DIRECTIONS: dict[EntryKind, int] = {
    EntryKind.DEBIT: 1,
    EntryKind.CREDIT: -1,
    EntryKind.REVENUE: 1,
    EntryKind.EXPENSE: -1,
    EntryKind.WIP_INCREASE: -1,
    EntryKind.WIP_DECREASE: 1,
}

_ROLES: dict[EntryKind, ProfitRole] = {
    EntryKind.DEBIT: ProfitRole.NONE,
    EntryKind.CREDIT: ProfitRole.NONE,
    EntryKind.REVENUE: ProfitRole.REVENUE,
    EntryKind.EXPENSE: ProfitRole.COST,
    EntryKind.WIP_INCREASE: ProfitRole.COST,
    EntryKind.WIP_DECREASE: ProfitRole.REVENUE,
}

# Case-insensitive vocabularies
_FOLDED_VOCABULARY: dict[str, EntryKind] = {
    "debit": EntryKind.DEBIT,
    "credit": EntryKind.CREDIT,
    "income": EntryKind.REVENUE,
    "revenue": EntryKind.REVENUE,
    "expense": EntryKind.EXPENSE,
    "wip_increase": EntryKind.WIP_INCREASE,
    "wip_decrease": EntryKind.WIP_DECREASE,
}

# Localized labels written by older imports
_LOCALIZED_VOCABULARY: dict[str, EntryKind] = {
    "Pendapatan": EntryKind.REVENUE,
    "Beban": EntryKind.EXPENSE,
}

# Labels that carry no direction of their own; the stored sign decides.
SIGNED_LABELS: frozenset[str] = frozenset({
    "Aset Tetap",
    "Akumulasi Penyusutan",
    "Pengeluaran",
})

_OPPOSITE_SIDE = {EntryKind.DEBIT: EntryKind.CREDIT, EntryKind.CREDIT: EntryKind.DEBIT}


@dataclass(frozen=True, slots=True)
class NormalizedEntry:
    kind: EntryKind
    magnitude: Decimal

    @property
    def signed_amount(self) -> Decimal:
        return self.kind.signed(self.magnitude)


def normalize_entry(raw_type: str, amount: object) -> NormalizedEntry:
    """
    Translate a stored ``(type, amount)`` pair into the internal vocabulary.

    Postconditions:
        - ``magnitude >= 0``.
        - For debit/credit a negative stored amount flips the side.
        - For signed labels the stored sign picks debit (>= 0) or credit.
        - Other kinds carry their own direction; the stored sign is dropped.

    Raises:
        ValidationError: unknown type value or non-numeric amount.
    """
    value = to_decimal(amount)
    if not isinstance(raw_type, str) or not raw_type.strip():
        raise ValidationError("transaction type is required", field="type", value=raw_type)

    label = raw_type.strip()
    kind = _LOCALIZED_VOCABULARY.get(label) or _FOLDED_VOCABULARY.get(label.lower())

    if kind is None:
        if label not in SIGNED_LABELS:
            raise ValidationError(
                f"Unknown transaction type: {raw_type!r}", field="type", value=raw_type,
            )
        kind = EntryKind.DEBIT if value >= ZERO else EntryKind.CREDIT
    elif value < ZERO and kind in _OPPOSITE_SIDE:
        kind = _OPPOSITE_SIDE[kind]

    return NormalizedEntry(kind=kind, magnitude=abs(value))


def parse_entry_kind(raw_type: str) -> EntryKind:
    """Resolve a type label whose direction does not depend on an amount."""
    return normalize_entry(raw_type, ZERO).kind
