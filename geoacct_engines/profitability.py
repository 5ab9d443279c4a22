"""
geoacct_engines.profitability -- Project and portfolio profitability.

Responsibility:
    Roll a project's costs, billings and ledger transactions into margin,
    cost ratio, ROI, completion and WIP figures, and sum those across a
    portfolio.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Consumed by
    geoacct_modules.reporting.

Definitions:
    direct_costs      sum of every ProjectCost amount, whatever its status
    indirect_costs    transactions whose kind has the cost role
                      (EXPENSE, WIP_INCREASE)
    direct_billings   sum of Billing amounts
    indirect_revenue  transactions whose kind has the revenue role
                      (REVENUE, WIP_DECREASE)

    Two WIP figures are reported side by side and are not reconciled:
    ``earned_value_wip`` (earned value minus direct billings) and
    ``cost_basis_wip`` (total costs minus total billed).

Invariants enforced:
    - Percentages are computed at full precision and rounded to two places
      only on the result objects.
    - Division by a zero contract value or zero total cost yields 0.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from uuid import UUID

from geoacct_kernel.db.types import ZERO, percent_of, round_percent
from geoacct_kernel.domain.dtos import ProjectSnapshot
from geoacct_kernel.domain.entry_types import ProfitRole
from geoacct_kernel.logging_config import get_logger
from geoacct_engines.earned_value import wip as earned_value_wip
from geoacct_engines.tracer import traced_engine

logger = get_logger("engines.profitability")


@dataclass(frozen=True)
class ProjectProfitability:
    project_id: UUID | None
    project_code: str
    total_value: Decimal
    direct_costs: Decimal
    indirect_costs: Decimal
    direct_billings: Decimal
    indirect_revenue: Decimal
    total_costs: Decimal
    total_billed: Decimal
    gross_profit: Decimal
    profit_margin: Decimal
    cost_ratio: Decimal
    roi: Decimal
    completion: Decimal
    earned_value_wip: Decimal
    cost_basis_wip: Decimal
    is_profitable: bool
    cost_breakdown: Mapping[str, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class PortfolioSummary:
    total_projects: int
    profitable_projects: int
    unprofitable_projects: int
    profitable_percentage: Decimal
    total_value: Decimal
    total_costs: Decimal
    total_billed: Decimal
    total_gross_profit: Decimal
    overall_profit_margin: Decimal
    total_earned_value_wip: Decimal
    total_cost_basis_wip: Decimal
    projects: tuple[ProjectProfitability, ...] = ()


@traced_engine("profitability", "1.0")
def calculate_project_profitability(project: ProjectSnapshot) -> ProjectProfitability:
    direct_costs = sum((c.amount for c in project.costs), ZERO)
    direct_billings = sum((b.amount for b in project.billings), ZERO)
    indirect_costs = sum(
        (t.amount for t in project.transactions if t.kind.role == ProfitRole.COST), ZERO,
    )
    indirect_revenue = sum(
        (t.amount for t in project.transactions if t.kind.role == ProfitRole.REVENUE), ZERO,
    )

    total_costs = direct_costs + indirect_costs
    total_billed = direct_billings + indirect_revenue
    gross_profit = total_billed - total_costs

    if project.progress is not None:
        completion = project.clamped_progress
    else:
        completion = percent_of(total_billed, project.total_value)

    breakdown: dict[str, Decimal] = {}
    for cost in project.costs:
        breakdown[cost.category] = breakdown.get(cost.category, ZERO) + cost.amount

    return ProjectProfitability(
        project_id=project.id,
        project_code=project.project_code,
        total_value=project.total_value,
        direct_costs=direct_costs,
        indirect_costs=indirect_costs,
        direct_billings=direct_billings,
        indirect_revenue=indirect_revenue,
        total_costs=total_costs,
        total_billed=total_billed,
        gross_profit=gross_profit,
        profit_margin=round_percent(percent_of(gross_profit, project.total_value)),
        cost_ratio=round_percent(percent_of(total_costs, project.total_value)),
        roi=round_percent(percent_of(gross_profit, total_costs)),
        completion=round_percent(completion),
        earned_value_wip=earned_value_wip(project, direct_billings),
        cost_basis_wip=total_costs - total_billed,
        is_profitable=gross_profit > ZERO,
        cost_breakdown=MappingProxyType(dict(sorted(breakdown.items()))),
    )


@traced_engine("profitability_portfolio", "1.0")
def summarize_portfolio(results: Iterable[ProjectProfitability]) -> PortfolioSummary:
    """Portfolio totals over per-project results."""
    results = tuple(results)
    profitable = sum(1 for r in results if r.is_profitable)
    total_value = sum((r.total_value for r in results), ZERO)
    total_gross_profit = sum((r.gross_profit for r in results), ZERO)

    summary = PortfolioSummary(
        total_projects=len(results),
        profitable_projects=profitable,
        unprofitable_projects=len(results) - profitable,
        profitable_percentage=round_percent(
            percent_of(Decimal(profitable), Decimal(len(results)))
        ),
        total_value=total_value,
        total_costs=sum((r.total_costs for r in results), ZERO),
        total_billed=sum((r.total_billed for r in results), ZERO),
        total_gross_profit=total_gross_profit,
        overall_profit_margin=round_percent(percent_of(total_gross_profit, total_value)),
        total_earned_value_wip=sum((r.earned_value_wip for r in results), ZERO),
        total_cost_basis_wip=sum((r.cost_basis_wip for r in results), ZERO),
        projects=results,
    )
    logger.info("portfolio_summarized", extra={
        "total_projects": summary.total_projects,
        "profitable_projects": summary.profitable_projects,
        "total_gross_profit": summary.total_gross_profit,
    })
    return summary
