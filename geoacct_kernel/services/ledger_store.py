"""
Ledger store -- the storage collaborator behind the engine.

Responsibility:
    ``LedgerStore`` is the repository interface the modules depend on:
    reads return frozen DTOs, writes append transactions and insert,
    update or delete fixed assets.  ``SqlLedgerStore`` implements it over
    a SQLAlchemy Session by composing the selectors.

Architecture position:
    Kernel > Services.  Imports selectors and models; imported by
    geoacct_modules.

Invariants enforced:
    - Writes are only accepted inside ``unit_of_work()``.  The unit commits
      once on exit; any exception rolls back every write made inside it,
      so a partially written posting is never observable.
    - SQLAlchemy failures surface as PersistenceError (original chained);
      domain errors propagate unchanged after the rollback.

Failure modes:
    - PersistenceError -- flush/commit failed; session rolled back.
    - FixedAssetNotFoundError / ProjectNotFoundError -- read misses.
    - RuntimeError -- a write outside a unit of work.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from contextlib import contextmanager
from datetime import date
from typing import Protocol, runtime_checkable
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from geoacct_kernel.domain.dtos import (
    AccountInfo,
    CashFlowCategoryEntry,
    FixedAssetSnapshot,
    ProjectSnapshot,
    ProjectStatus,
    TransactionRecord,
)
from geoacct_kernel.exceptions import (
    FixedAssetNotFoundError,
    PersistenceError,
    ProjectNotFoundError,
    ValidationError,
)
from geoacct_kernel.logging_config import get_logger
from geoacct_kernel.models.account import Account, CashFlowCategory
from geoacct_kernel.models.fixed_asset import FixedAsset
from geoacct_kernel.models.project import Project
from geoacct_kernel.models.transaction import LedgerTransaction
from geoacct_kernel.selectors import (
    AssetSelector,
    LedgerSelector,
    ProjectSelector,
    ReferenceSelector,
)

logger = get_logger("services.ledger_store")


@runtime_checkable
class LedgerStore(Protocol):
    """Repository interface consumed by the posting, WIP and reporting services."""

    # -- reads ---------------------------------------------------------------

    def accounts(self) -> list[AccountInfo]: ...

    def cashflow_entries(self) -> list[CashFlowCategoryEntry]: ...

    def transactions(
        self,
        start: date | None = None,
        end: date | None = None,
        project_id: UUID | None = None,
    ) -> list[TransactionRecord]: ...

    def fixed_asset(self, asset_id: UUID, for_update: bool = False) -> FixedAssetSnapshot: ...

    def fixed_assets(self) -> list[FixedAssetSnapshot]: ...

    def project(self, project_id: UUID) -> ProjectSnapshot: ...

    def projects(self) -> list[ProjectSnapshot]: ...

    # -- writes (inside unit_of_work only) ------------------------------------

    def unit_of_work(self, operation: str): ...

    def append_transactions(self, records: Sequence[TransactionRecord]) -> None: ...

    def insert_fixed_asset(self, snapshot: FixedAssetSnapshot) -> FixedAssetSnapshot: ...

    def save_fixed_asset(self, snapshot: FixedAssetSnapshot) -> FixedAssetSnapshot: ...

    def delete_fixed_asset(self, asset_id: UUID) -> None: ...

    def update_project_status(self, project_id: UUID, status: ProjectStatus) -> None: ...

    def replace_reference_data(
        self,
        accounts: Iterable[AccountInfo],
        entries: Iterable[CashFlowCategoryEntry],
    ) -> None: ...


class SqlLedgerStore:
    """
    LedgerStore over a SQLAlchemy Session.

    Contract:
        The caller owns the session.  This class owns the transaction
        boundary of each ``unit_of_work`` it opens.

    Non-goals:
        - No locking of its own beyond the optional FOR UPDATE read;
          PostgreSQL row locks serialize concurrent postings per asset.
    """

    def __init__(self, session: Session):
        self._session = session
        self._references = ReferenceSelector(session)
        self._ledger = LedgerSelector(session)
        self._assets = AssetSelector(session)
        self._projects = ProjectSelector(session)
        self._active_operation: str | None = None

    @property
    def session(self) -> Session:
        return self._session

    # -- reads ---------------------------------------------------------------

    def accounts(self) -> list[AccountInfo]:
        return self._references.accounts()

    def cashflow_entries(self) -> list[CashFlowCategoryEntry]:
        return self._references.cashflow_entries()

    def transactions(
        self,
        start: date | None = None,
        end: date | None = None,
        project_id: UUID | None = None,
    ) -> list[TransactionRecord]:
        return self._ledger.transactions(start=start, end=end, project_id=project_id)

    def fixed_asset(self, asset_id: UUID, for_update: bool = False) -> FixedAssetSnapshot:
        return self._assets.get(asset_id, for_update=for_update)

    def fixed_assets(self) -> list[FixedAssetSnapshot]:
        return self._assets.all()

    def project(self, project_id: UUID) -> ProjectSnapshot:
        return self._projects.get(project_id)

    def projects(self) -> list[ProjectSnapshot]:
        return self._projects.all()

    # -- unit of work --------------------------------------------------------

    @contextmanager
    def unit_of_work(self, operation: str) -> Iterator[SqlLedgerStore]:
        """
        Scope a group of writes that must commit together.

        Commits on normal exit.  Rolls back on any exception; SQLAlchemy
        errors are re-raised as PersistenceError.
        """
        if self._active_operation is not None:
            raise RuntimeError(
                f"unit of work {operation!r} opened inside {self._active_operation!r}"
            )
        self._active_operation = operation
        try:
            yield self
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            logger.error(
                "unit_of_work_rolled_back",
                extra={"operation": operation, "reason": type(exc).__name__},
            )
            raise PersistenceError(operation, str(exc)) from exc
        except Exception:
            self._session.rollback()
            logger.warning("unit_of_work_aborted", extra={"operation": operation})
            raise
        finally:
            self._active_operation = None

    def _require_unit(self) -> None:
        if self._active_operation is None:
            raise RuntimeError("ledger writes must run inside unit_of_work()")

    # -- writes --------------------------------------------------------------

    def append_transactions(self, records: Sequence[TransactionRecord]) -> None:
        self._require_unit()
        self._session.add_all([LedgerTransaction.from_dto(r) for r in records])
        self._session.flush()

    def insert_fixed_asset(self, snapshot: FixedAssetSnapshot) -> FixedAssetSnapshot:
        """Add a new asset row. An id that is already registered is rejected."""
        self._require_unit()
        snapshot = snapshot.with_id()
        if self._session.get(FixedAsset, snapshot.id) is not None:
            raise ValidationError(
                "fixed asset is already registered",
                field="id",
                value=str(snapshot.id),
            )
        self._session.add(FixedAsset.from_dto(snapshot))
        self._session.flush()
        return snapshot

    def save_fixed_asset(self, snapshot: FixedAssetSnapshot) -> FixedAssetSnapshot:
        """Insert (id unset or unknown) or update the asset row; returns the stored state."""
        self._require_unit()
        snapshot = snapshot.with_id()
        row = self._session.get(FixedAsset, snapshot.id)
        if row is None:
            row = FixedAsset.from_dto(snapshot)
            self._session.add(row)
        else:
            row.apply(snapshot)
        self._session.flush()
        return snapshot

    def delete_fixed_asset(self, asset_id: UUID) -> None:
        self._require_unit()
        row = self._session.get(FixedAsset, asset_id)
        if row is None:
            raise FixedAssetNotFoundError(str(asset_id))
        self._session.delete(row)
        self._session.flush()

    def update_project_status(self, project_id: UUID, status: ProjectStatus) -> None:
        self._require_unit()
        row = self._session.get(Project, project_id)
        if row is None:
            raise ProjectNotFoundError(str(project_id))
        row.status = ProjectStatus(status).value
        self._session.flush()

    def replace_reference_data(
        self,
        accounts: Iterable[AccountInfo],
        entries: Iterable[CashFlowCategoryEntry],
    ) -> None:
        """Replace the cash-flow map and upsert accounts by code."""
        self._require_unit()
        self._session.execute(delete(CashFlowCategory))
        existing = {a.code: a for a in self._session.scalars(select(Account))}
        for info in accounts:
            row = existing.get(info.code)
            if row is None:
                self._session.add(Account.from_dto(info))
            else:
                row.name = info.name
                row.account_type = info.account_type.value
                row.category = info.category
        self._session.flush()
        self._session.add_all([CashFlowCategory.from_dto(e) for e in entries])
        self._session.flush()
