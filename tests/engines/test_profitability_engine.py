"""Tests for project and portfolio profitability."""

from datetime import date
from decimal import Decimal

from geoacct_engines.profitability import calculate_project_profitability, summarize_portfolio
from geoacct_kernel.domain.dtos import (
    BillingRecord,
    ProjectCostRecord,
    ProjectSnapshot,
    TransactionRecord,
)
from geoacct_kernel.domain.entry_types import EntryKind


def _project(code="PRJ-001", progress="25", costs=(), billings=(), transactions=()):
    return ProjectSnapshot(
        project_code=code,
        total_value=Decimal("100000000"),
        progress=None if progress is None else Decimal(progress),
        status="ongoing",
        costs=tuple(
            ProjectCostRecord(category, Decimal(amount), date(2024, 1, 15), status)
            for category, amount, status in costs
        ),
        billings=tuple(
            BillingRecord(date(2024, 2, 1), Decimal("20"), Decimal(amount)) for amount in billings
        ),
        transactions=tuple(
            TransactionRecord(date(2024, 2, 10), kind, code_, Decimal(amount))
            for kind, code_, amount in transactions
        ),
    )


def _sample():
    return _project(
        costs=(("material", "3000000", "paid"), ("labor", "2000000", "pending")),
        billings=("20000000",),
        transactions=(
            (EntryKind.EXPENSE, "5101", "1000000"),
            (EntryKind.WIP_DECREASE, "1301", "500000"),
            (EntryKind.DEBIT, "1102", "9999999"),
        ),
    )


class TestProjectProfitability:
    def test_totals(self):
        result = calculate_project_profitability(_sample())
        assert result.direct_costs == Decimal("5000000")
        assert result.indirect_costs == Decimal("1000000")
        assert result.direct_billings == Decimal("20000000")
        assert result.indirect_revenue == Decimal("500000")
        assert result.total_costs == Decimal("6000000")
        assert result.total_billed == Decimal("20500000")
        assert result.gross_profit == Decimal("14500000")
        assert result.is_profitable

    def test_ratios(self):
        result = calculate_project_profitability(_sample())
        assert result.profit_margin == Decimal("14.50")
        assert result.cost_ratio == Decimal("6.00")
        assert result.roi == Decimal("241.67")
        assert result.completion == Decimal("25.00")

    def test_both_wip_figures(self):
        result = calculate_project_profitability(_sample())
        assert result.earned_value_wip == Decimal("5000000.00")
        assert result.cost_basis_wip == Decimal("-14500000")

    def test_debit_and_credit_rows_ignored(self):
        project = _project(transactions=((EntryKind.DEBIT, "1102", "5"), (EntryKind.CREDIT, "1102", "5")))
        result = calculate_project_profitability(project)
        assert result.indirect_costs == 0
        assert result.indirect_revenue == 0

    def test_cost_breakdown_by_category(self):
        project = _project(costs=(
            ("material", "100", "paid"), ("labor", "50", "pending"), ("material", "25", "pending"),
        ))
        result = calculate_project_profitability(project)
        assert dict(result.cost_breakdown) == {"labor": Decimal("50"), "material": Decimal("125")}

    def test_completion_from_billing_without_progress(self):
        result = calculate_project_profitability(_project(progress=None, billings=("20500000",)))
        assert result.completion == Decimal("20.50")

    def test_no_costs_gives_zero_roi(self):
        result = calculate_project_profitability(_project(billings=("1000",)))
        assert result.roi == 0
        assert result.total_costs == 0


class TestPortfolio:
    def test_summary(self):
        loss = _project("PRJ-002", costs=(("equipment", "8000000", "paid"),), billings=("1000000",))
        summary = summarize_portfolio([
            calculate_project_profitability(_sample()),
            calculate_project_profitability(loss),
        ])
        assert summary.total_projects == 2
        assert summary.profitable_projects == 1
        assert summary.unprofitable_projects == 1
        assert summary.profitable_percentage == Decimal("50.00")
        assert summary.total_value == Decimal("200000000")
        assert summary.total_gross_profit == Decimal("7500000")
        assert summary.overall_profit_margin == Decimal("3.75")

    def test_empty_portfolio(self):
        summary = summarize_portfolio([])
        assert summary.total_projects == 0
        assert summary.profitable_percentage == 0
        assert summary.overall_profit_margin == 0
