"""
WIP adjustment builder.

Compares a project's earned-value WIP with the WIP already booked on the
WIP account and produces the single ``wip_increase`` / ``wip_decrease``
entry that closes the gap. Repeating the calculation on unchanged data
books nothing, because the gap is then zero.

Pure; ``WipService.post_adjustment`` persists the result.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from geoacct_kernel.db.types import ZERO, round_money
from geoacct_kernel.domain.dtos import ProjectSnapshot, ProjectStatus, TransactionRecord
from geoacct_kernel.domain.entry_types import EntryKind
from geoacct_engines.earned_value import WipResult, progress_status, project_wip
from geoacct_modules.wip.config import WipConfig

DEFAULT_NOTES = "WIP value updated. Earned Value Method calculation."


@dataclass(frozen=True)
class WipPosting:
    wip: WipResult
    recorded_wip: Decimal
    transaction: TransactionRecord | None
    status_before: ProjectStatus
    status_after: ProjectStatus

    @property
    def adjustment(self) -> Decimal:
        """Signed change booked to the WIP account (0 when nothing is posted)."""
        if self.transaction is None:
            return ZERO
        if self.transaction.kind == EntryKind.WIP_INCREASE:
            return self.transaction.amount
        return -self.transaction.amount

    @property
    def status_changed(self) -> bool:
        return self.status_after != self.status_before


def booked_wip(entries: Iterable[TransactionRecord], wip_account_code: str) -> Decimal:
    """Net WIP on the account: increases less decreases."""
    total = ZERO
    for entry in entries:
        if entry.account_code != wip_account_code:
            continue
        if entry.kind == EntryKind.WIP_INCREASE:
            total += entry.amount
        elif entry.kind == EntryKind.WIP_DECREASE:
            total -= entry.amount
    return total


def build_wip_adjustment(
    project: ProjectSnapshot,
    booked_entries: Iterable[TransactionRecord],
    config: WipConfig,
    as_of: date,
    notes: str | None = None,
) -> WipPosting:
    result = project_wip(project)
    recorded = booked_wip(booked_entries, config.wip_account_code)
    gap = round_money(result.wip - recorded)

    transaction = None
    if abs(gap) > config.threshold:
        kind = EntryKind.WIP_INCREASE if gap > ZERO else EntryKind.WIP_DECREASE
        transaction = TransactionRecord(
            txn_date=as_of,
            kind=kind,
            account_code=config.wip_account_code,
            amount=abs(gap),
            project_id=project.id,
            description=f"WIP adjustment for project {project.project_code or project.name}",
            notes=notes or DEFAULT_NOTES,
            raw_type=kind.value,
        )

    # a project that never reported progress keeps its status
    status_after = project.status
    if config.sync_status and project.progress is not None:
        status_after = progress_status(project.clamped_progress, project.status)

    return WipPosting(
        wip=result,
        recorded_wip=recorded,
        transaction=transaction,
        status_before=project.status,
        status_after=status_after,
    )
