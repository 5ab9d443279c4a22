"""
Module: geoacct_kernel.models.project
Responsibility: ORM persistence for projects, project costs and billings.
Architecture position: Kernel > Models.

WIP is never stored on the project row; it is always derived from
total_value, progress and billings at read time.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import CheckConstraint, Date, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from geoacct_kernel.db.base import TrackedBase, UUIDString
from geoacct_kernel.db.types import round_money
from geoacct_kernel.domain.dtos import (
    BillingRecord,
    ProjectCostRecord,
    ProjectSnapshot,
)
from geoacct_kernel.models.transaction import LedgerTransaction


class Project(TrackedBase):
    """Project header with its cost, billing and transaction collections."""

    __tablename__ = "projects"

    __table_args__ = (
        UniqueConstraint("project_code", name="uq_project_code"),
    )

    project_code: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    total_value: Mapped[Decimal] = mapped_column(nullable=False)
    progress: Mapped[Decimal | None] = mapped_column(nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="planned")

    costs: Mapped[list["ProjectCost"]] = relationship(
        back_populates="project", cascade="all, delete-orphan", lazy="selectin",
        order_by="ProjectCost.cost_date",
    )
    billings: Mapped[list["Billing"]] = relationship(
        back_populates="project", cascade="all, delete-orphan", lazy="selectin",
        order_by="Billing.billing_date",
    )
    transactions: Mapped[list[LedgerTransaction]] = relationship(
        lazy="selectin", order_by=LedgerTransaction.txn_date,
    )

    def __repr__(self) -> str:
        return f"<Project {self.project_code}>"

    def to_dto(self) -> ProjectSnapshot:
        return ProjectSnapshot(
            id=self.id,
            project_code=self.project_code,
            name=self.name or "",
            total_value=round_money(self.total_value),
            progress=self.progress,
            status=self.status,
            costs=tuple(c.to_dto() for c in self.costs),
            billings=tuple(b.to_dto() for b in self.billings),
            transactions=tuple(t.to_dto() for t in self.transactions),
        )


class ProjectCost(TrackedBase):
    __tablename__ = "project_costs"

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_project_cost_amount_positive"),
    )

    project_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("projects.id"), nullable=False,
    )
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    cost_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    description: Mapped[str] = mapped_column(String(500), nullable=False, default="")

    project: Mapped[Project] = relationship(back_populates="costs")

    def to_dto(self) -> ProjectCostRecord:
        return ProjectCostRecord(
            id=self.id,
            category=self.category,
            amount=round_money(self.amount),
            cost_date=self.cost_date,
            status=self.status,
            description=self.description or "",
        )


class Billing(TrackedBase):
    __tablename__ = "billings"

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_billing_amount_positive"),
        CheckConstraint(
            "percentage > 0 AND percentage <= 100", name="ck_billing_percentage_range",
        ),
    )

    project_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("projects.id"), nullable=False,
    )
    billing_date: Mapped[date] = mapped_column(Date, nullable=False)
    percentage: Mapped[Decimal] = mapped_column(nullable=False)
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")

    project: Mapped[Project] = relationship(back_populates="billings")

    def to_dto(self) -> BillingRecord:
        return BillingRecord(
            id=self.id,
            billing_date=self.billing_date,
            percentage=self.percentage,
            amount=round_money(self.amount),
            status=self.status,
        )
