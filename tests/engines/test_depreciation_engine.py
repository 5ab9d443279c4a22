"""
Tests for the straight-line depreciation engine.

Covers:
- Accumulated depreciation as of a date (worked example, bounds, future dates)
- Book value and depreciation summary
- Monthly schedule (length, exact final total, resume, month-end clamping)
- Validation of value and useful life
"""

from datetime import date
from decimal import Decimal

import pytest

from geoacct_engines.depreciation import (
    MonthlyDepreciationSchedule,
    add_months,
    build_monthly_schedule,
    compute_accumulated_depreciation,
    compute_book_value,
    summarize_depreciation,
    years_between,
)
from geoacct_kernel.exceptions import ValidationError

VALUE = Decimal("50000000")


class TestAccumulatedDepreciation:
    def test_two_years_into_five_year_life(self):
        """50,000,000 over 5 years, 2 years elapsed = 20,000,000."""
        result = compute_accumulated_depreciation(VALUE, 5, date(2022, 3, 1), date(2024, 3, 1))
        assert result == Decimal("20000000.00")

    def test_on_acquisition_date(self):
        assert compute_accumulated_depreciation(VALUE, 5, date(2024, 3, 1), date(2024, 3, 1)) == 0

    def test_acquired_after_as_of_date(self):
        assert compute_accumulated_depreciation(VALUE, 5, date(2025, 1, 1), date(2024, 3, 1)) == 0

    def test_capped_at_value_after_useful_life(self):
        result = compute_accumulated_depreciation(VALUE, 5, date(2015, 1, 1), date(2024, 3, 1))
        assert result == VALUE

    def test_partial_year_is_between_whole_years(self):
        result = compute_accumulated_depreciation(VALUE, 5, date(2022, 3, 1), date(2024, 9, 1))
        assert Decimal("20000000") < result < Decimal("30000000")

    @pytest.mark.parametrize("value, life", [("0", 5), ("-1", 5), ("1000", 0), ("1000", -2)])
    def test_invalid_inputs(self, value, life):
        with pytest.raises(ValidationError):
            compute_accumulated_depreciation(Decimal(value), life, date(2022, 1, 1), date(2024, 1, 1))


class TestYearsBetween:
    def test_whole_years(self):
        assert years_between(date(2020, 6, 15), date(2023, 6, 15)) == 3

    def test_leap_day_anniversary(self):
        assert years_between(date(2020, 2, 29), date(2021, 2, 28)) == 1

    def test_end_before_start(self):
        assert years_between(date(2024, 1, 1), date(2023, 1, 1)) == 0


class TestBookValue:
    def test_book_value(self):
        assert compute_book_value(VALUE, Decimal("20000000")) == Decimal("30000000")

    def test_accumulated_above_value_rejected(self):
        with pytest.raises(ValidationError):
            compute_book_value(VALUE, VALUE + 1)

    def test_summary(self):
        summary = summarize_depreciation(VALUE, 5, date(2022, 3, 1), date(2024, 3, 1))
        assert summary.accumulated_depreciation == Decimal("20000000.00")
        assert summary.book_value == Decimal("30000000.00")
        assert summary.depreciation_rate == Decimal("20.00")
        assert summary.annual_depreciation == Decimal("10000000.00")
        assert summary.age_years == Decimal("2.00")
        assert summary.remaining_years == Decimal("3.00")

    def test_summary_past_useful_life(self):
        summary = summarize_depreciation(VALUE, 5, date(2010, 1, 1), date(2024, 1, 1))
        assert summary.book_value == 0
        assert summary.remaining_years == 0


class TestMonthlySchedule:
    def test_length_is_life_in_months(self, make_asset):
        schedule = build_monthly_schedule(make_asset())
        assert len(schedule) == 60
        assert len(list(schedule)) == 60

    def test_final_entry_absorbs_rounding(self, make_asset):
        entries = list(build_monthly_schedule(make_asset()))
        assert entries[0].depreciation_amount == Decimal("833333.33")
        assert entries[-1].accumulated_depreciation == VALUE
        assert entries[-1].book_value == 0
        assert sum(e.depreciation_amount for e in entries) == VALUE

    def test_restartable(self, make_asset):
        schedule = build_monthly_schedule(make_asset())
        assert list(schedule) == list(schedule)

    def test_iter_from_matches_full_pass(self, make_asset):
        schedule = build_monthly_schedule(make_asset())
        assert list(schedule.iter_from(25)) == list(schedule)[24:]

    @pytest.mark.parametrize("period", [0, 61])
    def test_iter_from_out_of_range_raises_on_call(self, make_asset, period):
        schedule = build_monthly_schedule(make_asset())
        with pytest.raises(ValidationError):
            schedule.iter_from(period)

    def test_entry_dates_clamp_to_month_end(self):
        schedule = MonthlyDepreciationSchedule(Decimal("1200"), 1, date(2024, 1, 31))
        dates = [e.entry_date for e in schedule]
        assert dates[0] == date(2024, 2, 29)
        assert dates[1] == date(2024, 3, 31)
        assert dates[-1] == date(2025, 1, 31)

    def test_running_total_never_exceeds_value(self):
        schedule = MonthlyDepreciationSchedule(Decimal("100"), 3, date(2024, 1, 1))
        for entry in schedule:
            assert entry.accumulated_depreciation <= Decimal("100")
            assert entry.depreciation_amount >= 0


class TestAddMonths:
    @pytest.mark.parametrize(
        "start, months, expected",
        [
            (date(2024, 1, 31), 1, date(2024, 2, 29)),
            (date(2023, 1, 31), 1, date(2023, 2, 28)),
            (date(2024, 11, 30), 3, date(2025, 2, 28)),
            (date(2024, 12, 15), 12, date(2025, 12, 15)),
        ],
    )
    def test_add_months(self, start, months, expected):
        assert add_months(start, months) == expected
