"""
Module: geoacct_engines
Responsibility:
    Package entrypoint re-exporting the pure calculation engines:
    depreciation, earned value / WIP, cash-flow classification and
    profitability.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import geoacct_kernel domain values, db.types helpers and
    logging.  MUST NOT import geoacct_modules or geoacct_config.

Invariants enforced:
    - Purity: engines never call ``date.today()``; dates are parameters.
    - Decimal-only arithmetic.
    - Determinism: identical inputs always produce identical outputs.

Usage:
    from geoacct_engines import CashFlowClassifier, DateRange
    from geoacct_engines import calculate_project_profitability
"""

from geoacct_engines.cashflow import (
    ActivitySection,
    CashFlowClassifier,
    CashFlowComparison,
    CashFlowStatement,
    Classification,
    ClassifiedEntry,
    DateRange,
    FigureChange,
    compare_cash_flows,
)
from geoacct_engines.depreciation import (
    DepreciationSummary,
    MonthlyDepreciationSchedule,
    ScheduleEntry,
    build_monthly_schedule,
    compute_accumulated_depreciation,
    compute_book_value,
    summarize_depreciation,
)
from geoacct_engines.earned_value import (
    WipResult,
    WipSummary,
    earned_value,
    progress_status,
    recalculate_all,
    summarize_wip,
    wip,
)
from geoacct_engines.profitability import (
    PortfolioSummary,
    ProjectProfitability,
    calculate_project_profitability,
    summarize_portfolio,
)
from geoacct_engines.tracer import traced_engine

__all__ = [
    "ActivitySection",
    "CashFlowClassifier",
    "CashFlowComparison",
    "CashFlowStatement",
    "Classification",
    "ClassifiedEntry",
    "DateRange",
    "DepreciationSummary",
    "FigureChange",
    "MonthlyDepreciationSchedule",
    "PortfolioSummary",
    "ProjectProfitability",
    "ScheduleEntry",
    "WipResult",
    "WipSummary",
    "build_monthly_schedule",
    "calculate_project_profitability",
    "compare_cash_flows",
    "compute_accumulated_depreciation",
    "compute_book_value",
    "earned_value",
    "progress_status",
    "recalculate_all",
    "summarize_depreciation",
    "summarize_portfolio",
    "summarize_wip",
    "traced_engine",
    "wip",
]
