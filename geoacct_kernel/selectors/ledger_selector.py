"""
Module: geoacct_kernel.selectors.ledger_selector
Responsibility: Read access to ledger transactions, optionally filtered by
    date range, project or account.
Architecture position: Kernel > Selectors.

Rows are normalized into ``TransactionRecord`` (EntryKind + magnitude) as
they are read, so every consumer sees one vocabulary.
"""

from datetime import date
from uuid import UUID

from sqlalchemy import func, select

from geoacct_kernel.domain.dtos import TransactionRecord
from geoacct_kernel.models.transaction import LedgerTransaction
from geoacct_kernel.selectors.base import BaseSelector


class LedgerSelector(BaseSelector[LedgerTransaction]):
    """Transactions as normalized DTOs, ordered by date."""

    def transactions(
        self,
        start: date | None = None,
        end: date | None = None,
        project_id: UUID | None = None,
        account_codes: tuple[str, ...] | None = None,
    ) -> list[TransactionRecord]:
        """
        Preconditions: start <= end when both are given (inclusive bounds).
        Postconditions: returns records ordered by (txn_date, created_at).
        """
        stmt = select(LedgerTransaction)
        if start is not None:
            stmt = stmt.where(LedgerTransaction.txn_date >= start)
        if end is not None:
            stmt = stmt.where(LedgerTransaction.txn_date <= end)
        if project_id is not None:
            stmt = stmt.where(LedgerTransaction.project_id == project_id)
        if account_codes:
            stmt = stmt.where(LedgerTransaction.account_code.in_(account_codes))
        stmt = stmt.order_by(LedgerTransaction.txn_date, LedgerTransaction.created_at)
        return [row.to_dto() for row in self.session.scalars(stmt)]

    def count(self) -> int:
        return self.session.scalar(select(func.count()).select_from(LedgerTransaction)) or 0
