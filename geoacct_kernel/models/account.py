"""
Module: geoacct_kernel.models.account
Responsibility: ORM persistence for the chart of accounts and the
    cash-flow category map.  Both are reference data created by setup
    (see scripts/seed_reference.py) and never mutated by the engine.
Architecture position: Kernel > Models.  May import from db/base.py and
    domain/dtos.py.  MUST NOT import from selectors/, services/ or outer
    layers.
"""

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from geoacct_kernel.db.base import TrackedBase
from geoacct_kernel.domain.dtos import AccountInfo, CashFlowCategoryEntry


class Account(TrackedBase):
    """
    Chart-of-accounts entry.

    Contract:
        Account.code is unique (uq_account_code).  account_type is one of
        asset, liability, equity, revenue, expense.
    """

    __tablename__ = "accounts"

    __table_args__ = (
        UniqueConstraint("code", name="uq_account_code"),
    )

    code: Mapped[str] = mapped_column(String(20), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    account_type: Mapped[str] = mapped_column(String(20), nullable=False)
    # Free-text grouping, e.g. "Fixed Assets", "Bank"
    category: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    def __repr__(self) -> str:
        return f"<Account {self.code}: {self.name}>"

    def to_dto(self) -> AccountInfo:
        return AccountInfo(
            code=self.code,
            name=self.name,
            account_type=self.account_type,
            category=self.category or "",
        )

    @classmethod
    def from_dto(cls, dto: AccountInfo) -> "Account":
        return cls(
            code=dto.code,
            name=dto.name,
            account_type=dto.account_type.value,
            category=dto.category,
        )


class CashFlowCategory(TrackedBase):
    """One account code -> cash-flow activity mapping (uq_cashflow_account)."""

    __tablename__ = "cashflow_categories"

    __table_args__ = (
        UniqueConstraint("account_code", name="uq_cashflow_account"),
    )

    account_code: Mapped[str] = mapped_column(
        String(20), ForeignKey("accounts.code"), nullable=False,
    )
    activity_category: Mapped[str] = mapped_column(String(20), nullable=False)
    subcategory: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    def __repr__(self) -> str:
        return f"<CashFlowCategory {self.account_code}: {self.activity_category}>"

    def to_dto(self) -> CashFlowCategoryEntry:
        return CashFlowCategoryEntry(
            account_code=self.account_code,
            activity_category=self.activity_category,
            subcategory=self.subcategory or "",
        )

    @classmethod
    def from_dto(cls, dto: CashFlowCategoryEntry) -> "CashFlowCategory":
        return cls(
            account_code=dto.account_code,
            activity_category=dto.activity_category.value,
            subcategory=dto.subcategory,
        )
