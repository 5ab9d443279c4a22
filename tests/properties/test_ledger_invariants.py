"""
Property-based tests for the engine invariants.

Invariants checked over generated inputs:
- Every asset posting balances and carries only positive legs
- 0 <= accumulated depreciation <= value, non-decreasing in the as-of date
- book value == value - accumulated depreciation
- The monthly schedule sums exactly to value
- Cash-flow net equals the sum of its sections and of the signed amounts
- WIP recalculation is idempotent
"""

from datetime import date, timedelta
from decimal import Decimal

from hypothesis import assume, given, settings
from hypothesis import strategies as st

from geoacct_engines.cashflow import CashFlowClassifier, DateRange
from geoacct_engines.depreciation import (
    MonthlyDepreciationSchedule,
    compute_accumulated_depreciation,
    compute_book_value,
)
from geoacct_engines.earned_value import recalculate_all
from geoacct_kernel.domain.dtos import (
    ActivityCategory,
    BillingRecord,
    CashFlowCategoryEntry,
    FixedAssetSnapshot,
    ProjectSnapshot,
    TransactionRecord,
)
from geoacct_kernel.domain.entry_types import EntryKind
from geoacct_kernel.domain.reference import CashFlowCategoryMap
from geoacct_modules.assets import (
    AssetConfig,
    post_acquisition,
    post_depreciation_adjustment,
    post_disposal,
    post_value_adjustment,
)

CONFIG = AssetConfig.with_defaults()

money = st.decimals(
    min_value=Decimal("0.01"), max_value=Decimal("999999999.99"),
    places=2, allow_nan=False, allow_infinity=False,
)
dates = st.dates(min_value=date(2000, 1, 1), max_value=date(2035, 12, 31))
lives = st.integers(min_value=1, max_value=40)
categories = st.sampled_from(["equipment", "vehicle", "building", "office", "drone"])


@st.composite
def assets(draw):
    value = draw(money)
    fraction = draw(st.decimals(min_value=0, max_value=1, places=4))
    return FixedAssetSnapshot(
        asset_name="Generated asset",
        category=draw(categories),
        acquisition_date=draw(dates),
        value=value,
        useful_life=draw(lives),
        accumulated_depreciation=(value * fraction).quantize(Decimal("0.01")),
    )


def _assert_balanced(posting):
    assert posting.total_debits == posting.total_credits
    assert all(line.amount > 0 for line in posting.lines)


class TestPostingBalance:
    @given(asset=assets(), as_of=dates)
    @settings(max_examples=200, deadline=None)
    def test_acquisition_and_disposal_balance(self, asset, as_of):
        fresh = asset.with_state(accumulated_depreciation=Decimal("0"))
        _assert_balanced(post_acquisition(fresh, CONFIG, as_of))
        _assert_balanced(post_disposal(asset, CONFIG, as_of))

    @given(asset=assets(), new_value=money)
    @settings(max_examples=200, deadline=None)
    def test_value_adjustment_balances(self, asset, new_value):
        assume(new_value >= asset.accumulated_depreciation)
        posting = post_value_adjustment(asset, new_value, CONFIG, date(2024, 3, 1))
        _assert_balanced(posting)
        assert posting.asset_after.book_value == new_value - asset.accumulated_depreciation

    @given(asset=assets(), fraction=st.decimals(min_value=0, max_value=1, places=4))
    @settings(max_examples=200, deadline=None)
    def test_depreciation_adjustment_balances(self, asset, fraction):
        target = (asset.value * fraction).quantize(Decimal("0.01"))
        assume(target <= asset.value)
        posting = post_depreciation_adjustment(asset, target, CONFIG, date(2024, 3, 1))
        _assert_balanced(posting)
        after = posting.asset_after
        assert after.accumulated_depreciation == max(target, asset.accumulated_depreciation)


class TestDepreciationBounds:
    @given(value=money, life=lives, acquired=dates, as_of=dates)
    @settings(max_examples=300, deadline=None)
    def test_bounds_and_book_value(self, value, life, acquired, as_of):
        accumulated = compute_accumulated_depreciation(value, life, acquired, as_of)
        assert 0 <= accumulated <= value
        assert compute_book_value(value, accumulated) == value - accumulated

    @given(
        value=money, life=lives, acquired=dates, as_of=dates,
        step=st.integers(min_value=0, max_value=3000),
    )
    @settings(max_examples=300, deadline=None)
    def test_monotonic_in_as_of_date(self, value, life, acquired, as_of, step):
        later = as_of + timedelta(days=step)
        assert compute_accumulated_depreciation(value, life, acquired, as_of) <= \
            compute_accumulated_depreciation(value, life, acquired, later)

    @given(value=money, life=st.integers(min_value=1, max_value=10), start=dates)
    @settings(max_examples=50, deadline=None)
    def test_schedule_sums_to_value(self, value, life, start):
        entries = list(MonthlyDepreciationSchedule(value, life, start))
        assert len(entries) == life * 12
        assert sum(e.depreciation_amount for e in entries) == value
        assert entries[-1].book_value == 0


CASHFLOW_MAP = CashFlowCategoryMap.from_entries([
    CashFlowCategoryEntry("1102", ActivityCategory.OPERATING, "cash"),
    CashFlowCategoryEntry("1501", ActivityCategory.INVESTING, "fixed_asset"),
    CashFlowCategoryEntry("2201", ActivityCategory.FINANCING, "long_term_liability"),
])

transactions = st.builds(
    TransactionRecord,
    txn_date=st.dates(min_value=date(2024, 1, 1), max_value=date(2024, 12, 31)),
    kind=st.sampled_from(list(EntryKind)),
    account_code=st.sampled_from(["1102", "1501", "2201", "7001"]),
    amount=money,
)


class TestCashFlowAdditivity:
    @given(txns=st.lists(transactions, max_size=40))
    @settings(max_examples=150, deadline=None)
    def test_net_is_sum_of_sections_and_signed_amounts(self, txns):
        date_range = DateRange(date(2024, 3, 1), date(2024, 9, 30))
        classifier = CashFlowClassifier()
        statement = classifier.aggregate(classifier.classify(txns, CASHFLOW_MAP, date_range))

        in_range = [t for t in txns if date_range.contains(t.txn_date)]
        mapped = [t for t in in_range if t.account_code != "7001"]
        assert statement.net_cash_flow == sum(s.total for s in statement.sections)
        assert statement.net_cash_flow == sum((t.signed_amount for t in mapped), Decimal("0"))
        assert statement.unmapped_count == len(in_range) - len(mapped)

    @given(first=st.lists(transactions, max_size=20), second=st.lists(transactions, max_size=20))
    @settings(max_examples=100, deadline=None)
    def test_concatenation_adds_nets(self, first, second):
        date_range = DateRange(date(2024, 1, 1), date(2024, 12, 31))
        classifier = CashFlowClassifier()

        def net(txns):
            return classifier.aggregate(classifier.classify(txns, CASHFLOW_MAP, date_range)).net_cash_flow

        assert net(first + second) == net(first) + net(second)


projects = st.builds(
    ProjectSnapshot,
    project_code=st.text(alphabet="ABCDEFGH0123456789-", min_size=1, max_size=10),
    total_value=st.decimals(min_value=0, max_value=Decimal("1e10"), places=2),
    progress=st.one_of(st.none(), st.decimals(min_value=-50, max_value=200, places=2)),
    billings=st.lists(
        st.builds(
            BillingRecord,
            billing_date=dates,
            percentage=st.decimals(min_value=Decimal("0.01"), max_value=100, places=2),
            amount=money,
        ),
        max_size=5,
    ).map(tuple),
)


class TestWipIdempotence:
    @given(portfolio=st.lists(projects, max_size=10))
    @settings(max_examples=100, deadline=None)
    def test_recalculate_twice_is_identical(self, portfolio):
        first = recalculate_all(portfolio)
        assert recalculate_all(portfolio) == first
        for result in first:
            assert result.wip == result.earned_value - result.total_billed
