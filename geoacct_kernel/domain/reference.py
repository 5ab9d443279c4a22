"""
Reference directories -- account codes and cash-flow categories.

Responsibility:
    ``AccountDirectory`` answers "what is account X?" and
    ``CashFlowCategoryMap`` answers "which cash-flow activity does
    account X belong to?".  Both are built once from a list of rows
    (storage or the bundled YAML) and are read-only afterwards.

Architecture position:
    Kernel > Domain -- pure.  Leaf dependency of the posting engine,
    the cash-flow classifier and the reporting service.

Invariants enforced:
    - One row per account code; duplicates raise ValidationError.
    - Immutable after construction (MappingProxyType).
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from types import MappingProxyType

from geoacct_kernel.domain.dtos import (
    AccountInfo,
    AccountType,
    ActivityCategory,
    CashFlowCategoryEntry,
)
from geoacct_kernel.exceptions import AccountNotFoundError, ValidationError


class AccountDirectory:
    """Read-only lookup of account code -> AccountInfo."""

    __slots__ = ("_accounts",)

    def __init__(self, accounts: dict[str, AccountInfo]):
        self._accounts = MappingProxyType(dict(sorted(accounts.items())))

    @classmethod
    def from_accounts(cls, accounts: Iterable[AccountInfo]) -> AccountDirectory:
        by_code: dict[str, AccountInfo] = {}
        for account in accounts:
            if account.code in by_code:
                raise ValidationError(
                    f"Duplicate account code: {account.code}",
                    field="code",
                    value=account.code,
                )
            by_code[account.code] = account
        return cls(by_code)

    def get(self, code: str) -> AccountInfo:
        try:
            return self._accounts[code]
        except KeyError:
            raise AccountNotFoundError(code) from None

    def find(self, code: str) -> AccountInfo | None:
        return self._accounts.get(code)

    def contains(self, code: str) -> bool:
        return code in self._accounts

    def of_type(self, account_type: AccountType) -> tuple[AccountInfo, ...]:
        return tuple(a for a in self._accounts.values() if a.account_type == account_type)

    def require(self, *codes: str) -> None:
        """Raise AccountNotFoundError for the first code not in the directory."""
        for code in codes:
            self.get(code)

    def __iter__(self) -> Iterator[AccountInfo]:
        return iter(self._accounts.values())

    def __len__(self) -> int:
        return len(self._accounts)

    def __contains__(self, code: object) -> bool:
        return code in self._accounts


class CashFlowCategoryMap:
    """Read-only lookup of account code -> CashFlowCategoryEntry."""

    __slots__ = ("_entries",)

    def __init__(self, entries: dict[str, CashFlowCategoryEntry]):
        self._entries = MappingProxyType(dict(sorted(entries.items())))

    @classmethod
    def from_entries(cls, entries: Iterable[CashFlowCategoryEntry]) -> CashFlowCategoryMap:
        by_code: dict[str, CashFlowCategoryEntry] = {}
        for entry in entries:
            if entry.account_code in by_code:
                raise ValidationError(
                    f"Duplicate cash-flow mapping for account {entry.account_code}",
                    field="account_code",
                    value=entry.account_code,
                )
            by_code[entry.account_code] = entry
        return cls(by_code)

    def lookup(self, account_code: str) -> CashFlowCategoryEntry | None:
        return self._entries.get(account_code)

    def contains(self, account_code: str) -> bool:
        return account_code in self._entries

    def codes_for(self, activity: ActivityCategory) -> tuple[str, ...]:
        return tuple(
            code for code, e in self._entries.items() if e.activity_category == activity
        )

    def __iter__(self) -> Iterator[CashFlowCategoryEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)
