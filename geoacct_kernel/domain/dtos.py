"""
DTOs -- immutable snapshots that flow between storage and the engines.

Responsibility:
    Defines the frozen records read from storage (accounts, cash-flow
    entries, transactions, fixed assets, projects with their costs and
    billings) and the enums that constrain their fields.

Architecture position:
    Kernel > Domain -- pure, zero I/O.  ORM models convert to these
    records through ``to_dto()``; engines and modules only ever see
    the records, never ORM entities.

Invariants enforced:
    - TransactionRecord.amount is a non-negative magnitude; direction lives
      in ``kind`` (see entry_types).
    - FixedAssetSnapshot: value > 0, useful_life > 0,
      0 <= accumulated_depreciation <= value.
    - ProjectCostRecord.amount > 0; BillingRecord.amount > 0 and
      0 < percentage <= 100.

Failure modes:
    - ValidationError from __post_init__ on any violated invariant.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID, uuid4

from geoacct_kernel.db.types import HUNDRED, ZERO, round_money, to_decimal
from geoacct_kernel.domain.entry_types import EntryKind, normalize_entry
from geoacct_kernel.exceptions import ValidationError


class AccountType(str, Enum):
    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"


class ActivityCategory(str, Enum):
    """Statement-of-cash-flows activity."""

    OPERATING = "operating"
    INVESTING = "investing"
    FINANCING = "financing"


class ProjectStatus(str, Enum):
    PLANNED = "planned"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class CostStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class BillingStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"


def parse_enum(enum_cls: type[Enum], value: object, field: str) -> Enum:
    """Coerce a raw value into ``enum_cls`` or raise ValidationError."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError as exc:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(
            f"Invalid {field}: {value!r} (expected one of {allowed})",
            field=field,
            value=value,
        ) from exc


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AccountInfo:
    """Chart-of-accounts row."""

    code: str
    name: str
    account_type: AccountType
    category: str = ""

    def __post_init__(self) -> None:
        if not self.code:
            raise ValidationError("account code is required", field="code")
        object.__setattr__(
            self, "account_type", parse_enum(AccountType, self.account_type, "type"),
        )


@dataclass(frozen=True, slots=True)
class CashFlowCategoryEntry:
    """Maps one account code to its cash-flow activity."""

    account_code: str
    activity_category: ActivityCategory
    subcategory: str = ""

    def __post_init__(self) -> None:
        if not self.account_code:
            raise ValidationError("account code is required", field="account_code")
        object.__setattr__(
            self,
            "activity_category",
            parse_enum(ActivityCategory, self.activity_category, "activity_category"),
        )


# ---------------------------------------------------------------------------
# Ledger
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TransactionRecord:
    """
    One ledger row, normalized.

    ``raw_type`` keeps the label the row was stored with; ``kind`` and
    ``amount`` are its normalized form.
    """

    txn_date: date
    kind: EntryKind
    account_code: str
    amount: Decimal
    project_id: UUID | None = None
    description: str = ""
    notes: str | None = None
    raw_type: str = ""
    id: UUID | None = None

    def __post_init__(self) -> None:
        if self.amount < ZERO:
            raise ValidationError(
                "transaction amount must be a non-negative magnitude",
                field="amount",
                value=self.amount,
            )
        if not self.account_code:
            raise ValidationError("account code is required", field="account_code")

    @classmethod
    def from_raw(
        cls,
        *,
        txn_date: date,
        raw_type: str,
        account_code: str,
        amount: object,
        project_id: UUID | None = None,
        description: str = "",
        notes: str | None = None,
        id: UUID | None = None,
    ) -> TransactionRecord:
        """Build a record from a stored row in any legacy vocabulary."""
        normalized = normalize_entry(raw_type, amount)
        return cls(
            txn_date=txn_date,
            kind=normalized.kind,
            account_code=str(account_code),
            amount=normalized.magnitude,
            project_id=project_id,
            description=description,
            notes=notes,
            raw_type=raw_type,
            id=id,
        )

    @property
    def signed_amount(self) -> Decimal:
        return self.kind.signed(self.amount)


# ---------------------------------------------------------------------------
# Fixed assets
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FixedAssetSnapshot:
    """Fixed asset state as read from or written to storage."""

    asset_name: str
    category: str
    acquisition_date: date
    value: Decimal
    useful_life: int
    accumulated_depreciation: Decimal = ZERO
    description: str | None = None
    location: str | None = None
    id: UUID | None = None

    def __post_init__(self) -> None:
        if not self.asset_name:
            raise ValidationError("asset name is required", field="asset_name")
        # every leg is derived from these two figures, so they are held in cents
        object.__setattr__(self, "value", round_money(self.value))
        object.__setattr__(
            self, "accumulated_depreciation", round_money(self.accumulated_depreciation),
        )
        if self.value <= ZERO:
            raise ValidationError(
                "asset value must be positive", field="value", value=self.value,
            )
        if isinstance(self.useful_life, bool) or not isinstance(self.useful_life, int) \
                or self.useful_life <= 0:
            raise ValidationError(
                "useful life must be a positive whole number of years",
                field="useful_life",
                value=self.useful_life,
            )
        if not ZERO <= self.accumulated_depreciation <= self.value:
            raise ValidationError(
                "accumulated depreciation must lie between 0 and value",
                field="accumulated_depreciation",
                value=self.accumulated_depreciation,
            )

    @property
    def book_value(self) -> Decimal:
        return self.value - self.accumulated_depreciation

    def with_state(
        self,
        *,
        value: Decimal | None = None,
        accumulated_depreciation: Decimal | None = None,
    ) -> FixedAssetSnapshot:
        """Return a copy with a new value and/or accumulated depreciation."""
        changes: dict[str, Decimal] = {}
        if value is not None:
            changes["value"] = value
        if accumulated_depreciation is not None:
            changes["accumulated_depreciation"] = accumulated_depreciation
        return replace(self, **changes)

    def with_id(self) -> FixedAssetSnapshot:
        return self if self.id is not None else replace(self, id=uuid4())


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ProjectCostRecord:
    category: str
    amount: Decimal
    cost_date: date
    status: CostStatus = CostStatus.PENDING
    description: str = ""
    id: UUID | None = None

    def __post_init__(self) -> None:
        if self.amount <= ZERO:
            raise ValidationError(
                "cost amount must be positive", field="amount", value=self.amount,
            )
        object.__setattr__(self, "status", parse_enum(CostStatus, self.status, "status"))


@dataclass(frozen=True, slots=True)
class BillingRecord:
    billing_date: date
    percentage: Decimal
    amount: Decimal
    status: BillingStatus = BillingStatus.PENDING
    id: UUID | None = None

    def __post_init__(self) -> None:
        if self.amount <= ZERO:
            raise ValidationError(
                "billing amount must be positive", field="amount", value=self.amount,
            )
        if not ZERO < self.percentage <= HUNDRED:
            raise ValidationError(
                "billing percentage must be in (0, 100]",
                field="percentage",
                value=self.percentage,
            )
        object.__setattr__(
            self, "status", parse_enum(BillingStatus, self.status, "status"),
        )


@dataclass(frozen=True, slots=True)
class ProjectSnapshot:
    """
    A project with its associated costs, billings and transactions.

    ``progress`` is stored as given (None when the project has never
    reported progress); ``clamped_progress`` is the value engines use.
    ``total_value`` may be zero here (input validation requires > 0); the
    engines report zero ratios for such a project.
    """

    project_code: str
    total_value: Decimal
    progress: Decimal | None = None
    status: ProjectStatus = ProjectStatus.PLANNED
    name: str = ""
    costs: tuple[ProjectCostRecord, ...] = ()
    billings: tuple[BillingRecord, ...] = ()
    transactions: tuple[TransactionRecord, ...] = ()
    id: UUID | None = None

    def __post_init__(self) -> None:
        if not self.project_code:
            raise ValidationError("project code is required", field="project_code")
        if self.total_value < ZERO:
            raise ValidationError(
                "project total value cannot be negative",
                field="total_value",
                value=self.total_value,
            )
        if self.progress is not None:
            object.__setattr__(self, "progress", to_decimal(self.progress, "progress"))
        object.__setattr__(
            self, "status", parse_enum(ProjectStatus, self.status, "status"),
        )

    @property
    def clamped_progress(self) -> Decimal:
        if self.progress is None:
            return ZERO
        return min(max(self.progress, ZERO), HUNDRED)

    @property
    def total_billed(self) -> Decimal:
        return sum((b.amount for b in self.billings), ZERO)
