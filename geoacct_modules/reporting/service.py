"""
Reporting Module Service (``geoacct_modules.reporting.service``).

Responsibility
--------------
Builds cash-flow statements (single period and period over period) and
project / portfolio profitability from stored data.

Architecture position
---------------------
**Modules layer** -- read-only orchestration.  Loads transactions and
projects from the ``LedgerStore``, reference data from the cached
``ReferenceService``, and delegates every figure to ``geoacct_engines``.

Failure modes
-------------
* ValidationError  -> a date range whose start is after its end.
* ProjectNotFoundError  -> unknown project id.
* UnmappedAccountError  -> only when ``ReportingConfig.require_full_coverage``
  is set and the period touches accounts missing from the cash-flow map.
"""

from __future__ import annotations

from datetime import date
from uuid import UUID

from geoacct_kernel.logging_config import LogContext, get_logger
from geoacct_kernel.services.cache import ScopedCache
from geoacct_kernel.services.ledger_store import LedgerStore
from geoacct_kernel.services.reference_service import ReferenceService
from geoacct_engines.cashflow import (
    CashFlowClassifier,
    CashFlowComparison,
    CashFlowStatement,
    DateRange,
    compare_cash_flows,
)
from geoacct_engines.profitability import (
    PortfolioSummary,
    ProjectProfitability,
    calculate_project_profitability,
    summarize_portfolio,
)
from geoacct_modules.reporting.config import ReportingConfig
from geoacct_modules.reporting.render import render_to_dict

logger = get_logger("modules.reporting.service")


class ReportingService:
    """
    Report generation service.

    Contract
    --------
    * All methods are read-only.
    * Reference data is shared through the injected ``ReferenceService``;
      when none is given, one is built over a cache with the configured TTL.
    """

    def __init__(
        self,
        store: LedgerStore,
        reference: ReferenceService | None = None,
        config: ReportingConfig | None = None,
    ):
        self._store = store
        self._config = config or ReportingConfig.with_defaults()
        self._reference = reference or ReferenceService(
            store, ScopedCache(default_ttl_seconds=self._config.cache_ttl_seconds),
        )
        self._classifier = CashFlowClassifier()

    # =========================================================================
    # Cash flow
    # =========================================================================

    def _statement(self, date_range: DateRange) -> CashFlowStatement:
        transactions = self._store.transactions(start=date_range.start, end=date_range.end)
        classification = self._classifier.classify(
            transactions, self._reference.cashflow_map(), date_range,
        )
        statement = self._classifier.aggregate(classification)

        if statement.unmapped:
            directory = self._reference.account_directory()
            unknown = sorted({
                t.account_code for t in statement.unmapped
                if t.account_code not in directory
            })
            if unknown:
                logger.warning("cash_flow_unknown_accounts", extra={"account_codes": unknown})
        if self._config.require_full_coverage:
            statement.raise_if_unmapped()
        return statement

    def cash_flow(self, start: date, end: date) -> CashFlowStatement:
        """Statement of cash flows for the inclusive range ``start`` .. ``end``."""
        statement = self._statement(DateRange(start, end))
        logger.info("cash_flow_statement_generated", extra={
            "period_start": start.isoformat(),
            "period_end": end.isoformat(),
            "net_cash_flow": str(statement.net_cash_flow),
            "unmapped_count": statement.unmapped_count,
        })
        return statement

    def comparative_cash_flow(
        self,
        current: DateRange,
        previous: DateRange,
    ) -> CashFlowComparison:
        comparison = compare_cash_flows(self._statement(current), self._statement(previous))
        logger.info("comparative_cash_flow_generated", extra={
            "current_start": current.start.isoformat(),
            "previous_start": previous.start.isoformat(),
            "net_change": str(comparison.net_cash_flow.change),
        })
        return comparison

    # =========================================================================
    # Profitability
    # =========================================================================

    def project_profitability(self, project_id: UUID) -> ProjectProfitability:
        with LogContext.bind(project_id=str(project_id)):
            result = calculate_project_profitability(self._store.project(project_id))
            logger.info("project_profitability_generated", extra={
                "project_code": result.project_code,
                "gross_profit": str(result.gross_profit),
                "profit_margin": str(result.profit_margin),
            })
            return result

    def portfolio_profitability(self) -> PortfolioSummary:
        return summarize_portfolio(
            calculate_project_profitability(p) for p in self._store.projects()
        )

    def to_dict(self, report: object) -> dict:
        """Convert any report object to a plain dict for JSON serialization."""
        return render_to_dict(report)
