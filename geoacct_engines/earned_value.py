"""
Earned value and WIP -- pure functions.

WIP under the earned-value method is the value of work performed that has
not yet been billed: ``total_value * progress / 100 - total_billed``.  A
negative WIP means the project is over-billed; that is a valid signal,
not an error.  WIP is always derived from a snapshot and never stored.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from geoacct_kernel.db.types import HUNDRED, ZERO, round_money
from geoacct_kernel.domain.dtos import ProjectSnapshot, ProjectStatus
from geoacct_kernel.logging_config import get_logger
from geoacct_engines.tracer import traced_engine

logger = get_logger("engines.earned_value")

# |WIP| above this counts as "has WIP" in portfolio summaries
WIP_THRESHOLD = Decimal("0.01")


def earned_value(project: ProjectSnapshot) -> Decimal:
    """Contract value times percent complete (progress clamped to [0, 100])."""
    return round_money(project.total_value * project.clamped_progress / HUNDRED)


def wip(project: ProjectSnapshot, total_billed: Decimal) -> Decimal:
    """Earned value minus billed; negative when over-billed."""
    return earned_value(project) - total_billed


@dataclass(frozen=True)
class WipResult:
    project_id: UUID | None
    project_code: str
    total_value: Decimal
    progress: Decimal
    earned_value: Decimal
    total_billed: Decimal
    wip: Decimal

    @property
    def is_over_billed(self) -> bool:
        return self.wip < ZERO


@dataclass(frozen=True)
class WipSummary:
    total_projects: int
    projects_with_wip: int
    total_value: Decimal
    total_billed: Decimal
    total_earned_value: Decimal
    total_wip: Decimal


def project_wip(project: ProjectSnapshot) -> WipResult:
    """WIP for one project, billed amount taken from its billings."""
    billed = project.total_billed
    ev = earned_value(project)
    return WipResult(
        project_id=project.id,
        project_code=project.project_code,
        total_value=project.total_value,
        progress=project.clamped_progress,
        earned_value=ev,
        total_billed=billed,
        wip=ev - billed,
    )


@traced_engine("earned_value", "1.0")
def recalculate_all(projects: Iterable[ProjectSnapshot]) -> tuple[WipResult, ...]:
    """Apply ``project_wip`` to every project.  Pure; inputs are not mutated."""
    return tuple(project_wip(p) for p in projects)


def summarize_wip(results: Iterable[WipResult]) -> WipSummary:
    results = tuple(results)
    return WipSummary(
        total_projects=len(results),
        projects_with_wip=sum(1 for r in results if abs(r.wip) > WIP_THRESHOLD),
        total_value=sum((r.total_value for r in results), ZERO),
        total_billed=sum((r.total_billed for r in results), ZERO),
        total_earned_value=sum((r.earned_value for r in results), ZERO),
        total_wip=sum((r.wip for r in results), ZERO),
    )


def progress_status(progress: Decimal, current: ProjectStatus) -> ProjectStatus:
    """Status implied by a progress update; cancelled projects stay cancelled."""
    if current == ProjectStatus.CANCELLED:
        return current
    if progress <= ZERO:
        return ProjectStatus.PLANNED
    if progress >= HUNDRED:
        return ProjectStatus.COMPLETED
    return ProjectStatus.ONGOING
