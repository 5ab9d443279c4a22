"""
Module: geoacct_kernel.models.transaction
Responsibility: ORM persistence for ledger transactions.
Architecture position: Kernel > Models.

The ``type`` column keeps whatever vocabulary the row was written in
(``debit``/``credit`` from the posting engine, ``income``/``expense`` or
``EXPENSE``/``REVENUE``/``WIP_*`` from other writers).  Rows are
normalized into ``EntryKind`` only when read (``to_dto``).  Rows are
append-only: corrections are new rows, never updates.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from geoacct_kernel.db.base import TrackedBase, UUIDString
from geoacct_kernel.db.types import round_money
from geoacct_kernel.domain.dtos import TransactionRecord
from geoacct_kernel.domain.entry_types import EntryKind


class LedgerTransaction(TrackedBase):
    """A single ledger row."""

    __tablename__ = "transactions"

    __table_args__ = (
        Index("idx_transaction_date", "txn_date"),
        Index("idx_transaction_account", "account_code"),
        Index("idx_transaction_project", "project_id"),
    )

    txn_date: Mapped[date] = mapped_column(Date, nullable=False)
    type: Mapped[str] = mapped_column(String(30), nullable=False)
    account_code: Mapped[str] = mapped_column(String(20), nullable=False)
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    project_id: Mapped[UUID | None] = mapped_column(
        UUIDString(), ForeignKey("projects.id"), nullable=True,
    )
    description: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<LedgerTransaction {self.txn_date} {self.type} {self.account_code} {self.amount}>"

    def to_dto(self) -> TransactionRecord:
        return TransactionRecord.from_raw(
            id=self.id,
            txn_date=self.txn_date,
            raw_type=self.type,
            account_code=self.account_code,
            amount=round_money(self.amount),
            project_id=self.project_id,
            description=self.description or "",
            notes=self.notes,
        )

    @classmethod
    def from_dto(cls, dto: TransactionRecord) -> "LedgerTransaction":
        # Side kinds are written canonically; the magnitude no longer carries a sign.
        if dto.kind in (EntryKind.DEBIT, EntryKind.CREDIT):
            stored_type = dto.kind.value
        else:
            stored_type = dto.raw_type or dto.kind.value
        return cls(
            txn_date=dto.txn_date,
            type=stored_type,
            account_code=dto.account_code,
            amount=dto.amount,
            project_id=dto.project_id,
            description=dto.description,
            notes=dto.notes,
        )
