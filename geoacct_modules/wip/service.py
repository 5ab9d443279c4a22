"""
WIP Module Service (``geoacct_modules.wip.service``).

Loads project snapshots from the ledger store and hands them to the
earned-value engine. ``project_wip``, ``recalculate_all`` and ``summary``
only read. ``post_adjustment`` books the change in a project's WIP to the
WIP account and brings the project's status in line with its progress, in
one unit of work.
"""

from __future__ import annotations

from datetime import date
from uuid import UUID

from geoacct_kernel.domain.clock import Clock, SystemClock
from geoacct_kernel.domain.reference import AccountDirectory
from geoacct_kernel.logging_config import LogContext, get_logger
from geoacct_kernel.services.ledger_store import LedgerStore
from geoacct_engines.earned_value import (
    WipResult,
    WipSummary,
    project_wip,
    recalculate_all,
    summarize_wip,
)
from geoacct_modules.wip.config import WipConfig
from geoacct_modules.wip.posting import WipPosting, build_wip_adjustment

logger = get_logger("modules.wip.service")


class WipService:
    def __init__(
        self,
        store: LedgerStore,
        config: WipConfig | None = None,
        clock: Clock | None = None,
    ):
        self._store = store
        self._config = config or WipConfig.with_defaults()
        self._clock = clock or SystemClock()

    def project_wip(self, project_id: UUID) -> WipResult:
        with LogContext.bind(project_id=str(project_id)):
            result = project_wip(self._store.project(project_id))
            logger.info("project_wip_calculated", extra={
                "project_code": result.project_code,
                "wip": result.wip,
            })
            return result

    def recalculate_all(self) -> tuple[WipResult, ...]:
        results = recalculate_all(self._store.projects())
        logger.info("wip_recalculated", extra={"projects": len(results)})
        return results

    def summary(self) -> WipSummary:
        return summarize_wip(self.recalculate_all())

    def post_adjustment(
        self,
        project_id: UUID,
        as_of: date | None = None,
        notes: str | None = None,
    ) -> WipPosting:
        """
        Book the difference between earned-value WIP and the WIP already on
        the WIP account, when it exceeds the configured threshold.

        Raises:
            ProjectNotFoundError: unknown project.
            AccountNotFoundError: the WIP account is not in the chart of accounts.
        """
        as_of = as_of if as_of is not None else self._clock.today()
        code = self._config.wip_account_code
        with LogContext.bind(project_id=str(project_id)):
            with self._store.unit_of_work("wip.adjustment"):
                AccountDirectory.from_accounts(self._store.accounts()).require(code)
                project = self._store.project(project_id)
                posting = build_wip_adjustment(
                    project,
                    self._store.transactions(project_id=project_id),
                    self._config,
                    as_of,
                    notes,
                )
                if posting.transaction is not None:
                    self._store.append_transactions([posting.transaction])
                if posting.status_changed:
                    self._store.update_project_status(project_id, posting.status_after)

            logger.info("wip_adjustment_committed", extra={
                "wip": posting.wip.wip,
                "recorded_wip": posting.recorded_wip,
                "adjustment": posting.adjustment,
                "status": posting.status_after,
            })
            return posting
