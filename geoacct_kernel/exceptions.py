"""
Typed exception hierarchy for the geoacct engine.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from GeoAcctError:

    GeoAcctError (base)
    |
    +-- ValidationError
    |
    +-- NotFoundError
    |   +-- ProjectNotFoundError
    |   +-- FixedAssetNotFoundError
    |   +-- AccountNotFoundError
    |
    +-- PostingError
    |   +-- UnbalancedPostingError
    |
    +-- UnmappedAccountError      (soft; a diagnostic, see below)
    |
    +-- PersistenceError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                  | When Raised
----------------|-----------------------|---------------------------------------
Validation      | VALIDATION_ERROR      | Non-positive value/useful life/amount,
                |                       | bad enum value, percentage out of range,
                |                       | missing required field
----------------|-----------------------|---------------------------------------
Lookup          | PROJECT_NOT_FOUND     | Project id doesn't exist
                | FIXED_ASSET_NOT_FOUND | Fixed asset id doesn't exist
                | ACCOUNT_NOT_FOUND     | Account code not in the directory
----------------|-----------------------|---------------------------------------
Posting         | UNBALANCED_POSTING    | Debits != Credits for one event
----------------|-----------------------|---------------------------------------
Cash flow       | UNMAPPED_ACCOUNT      | Account code absent from the cash-flow
                |                       | category map
----------------|-----------------------|---------------------------------------
Storage         | PERSISTENCE_ERROR     | A write failed; unit of work rolled back

UnmappedAccountError is never raised by the classifier itself.  The
classifier excludes the transaction and records it on the statement so
report consumers can detect coverage gaps.  Callers that require full
coverage call ``CashFlowStatement.raise_if_unmapped()``.

Every class carries a ``code`` class attribute and stores its context as
attributes so the structured log formatter can emit them as fields.
"""

from __future__ import annotations

from typing import Any


class GeoAcctError(Exception):
    """
    Base exception for all geoacct errors.

    All subclasses must define a ``code`` class attribute for
    machine-readable error identification.
    """

    code: str = "GEOACCT_ERROR"


# Validation


class ValidationError(GeoAcctError):
    """Input rejected before any computation or posting proceeds."""

    code: str = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None, value: Any = None):
        self.field = field
        self.value = value
        super().__init__(message)


# Lookups


class NotFoundError(GeoAcctError):
    """Base exception for missing referenced records."""

    code: str = "NOT_FOUND"


class ProjectNotFoundError(NotFoundError):
    """Project id does not exist."""

    code: str = "PROJECT_NOT_FOUND"

    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__(f"Project not found: {project_id}")


class FixedAssetNotFoundError(NotFoundError):
    """Fixed asset id does not exist."""

    code: str = "FIXED_ASSET_NOT_FOUND"

    def __init__(self, asset_id: str):
        self.asset_id = asset_id
        super().__init__(f"Fixed asset not found: {asset_id}")


class AccountNotFoundError(NotFoundError):
    """Account code is not in the account directory."""

    code: str = "ACCOUNT_NOT_FOUND"

    def __init__(self, account_code: str):
        self.account_code = account_code
        super().__init__(f"Account not found: {account_code}")


# Posting


class PostingError(GeoAcctError):
    """Base exception for ledger posting errors."""

    code: str = "POSTING_ERROR"


class UnbalancedPostingError(PostingError):
    """Emitted legs for one event do not balance."""

    code: str = "UNBALANCED_POSTING"

    def __init__(self, event: str, debits: str, credits: str):
        self.event = event
        self.debits = debits
        self.credits = credits
        super().__init__(
            f"Unbalanced posting for {event}: debits={debits}, credits={credits}"
        )


# Cash flow


class UnmappedAccountError(GeoAcctError):
    """Transactions reference accounts missing from the cash-flow map."""

    code: str = "UNMAPPED_ACCOUNT"

    def __init__(self, account_codes: tuple[str, ...], count: int):
        self.account_codes = account_codes
        self.count = count
        super().__init__(
            f"{count} transaction(s) excluded from cash flow; "
            f"unmapped accounts: {', '.join(account_codes)}"
        )


# Storage


class PersistenceError(GeoAcctError):
    """A write to the storage collaborator failed and was rolled back."""

    code: str = "PERSISTENCE_ERROR"

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"Persistence failure during {operation}: {reason}")
