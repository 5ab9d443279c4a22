"""Read access to the chart of accounts and the cash-flow category map."""

from sqlalchemy import select

from geoacct_kernel.domain.dtos import AccountInfo, CashFlowCategoryEntry
from geoacct_kernel.domain.reference import AccountDirectory, CashFlowCategoryMap
from geoacct_kernel.exceptions import AccountNotFoundError
from geoacct_kernel.models.account import Account, CashFlowCategory
from geoacct_kernel.selectors.base import BaseSelector


class ReferenceSelector(BaseSelector[Account]):
    """Accounts and cash-flow mappings as DTOs and directories."""

    def accounts(self) -> list[AccountInfo]:
        rows = self.session.scalars(select(Account).order_by(Account.code))
        return [row.to_dto() for row in rows]

    def account(self, code: str) -> AccountInfo:
        row = self.session.scalars(
            select(Account).where(Account.code == code)
        ).one_or_none()
        if row is None:
            raise AccountNotFoundError(code)
        return row.to_dto()

    def cashflow_entries(self) -> list[CashFlowCategoryEntry]:
        rows = self.session.scalars(
            select(CashFlowCategory).order_by(CashFlowCategory.account_code)
        )
        return [row.to_dto() for row in rows]

    def account_directory(self) -> AccountDirectory:
        return AccountDirectory.from_accounts(self.accounts())

    def cashflow_map(self) -> CashFlowCategoryMap:
        return CashFlowCategoryMap.from_entries(self.cashflow_entries())
