"""
geoacct_engines.depreciation -- Straight-line depreciation.

Responsibility:
    Accumulated depreciation and book value as of a date, a summary of an
    asset's depreciation position, and the monthly schedule over the
    asset's useful life.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Used standalone by
    reports and by the asset posting flows (initial depreciation on
    acquisition, depreciation refresh runs).

Invariants enforced:
    - 0 <= accumulated depreciation <= value for every valid input, and it
      is non-decreasing as the as-of date moves forward.
    - book value == value - accumulated depreciation.
    - A monthly schedule has exactly ``useful_life * 12`` entries and its
      final accumulated depreciation equals ``value`` exactly; the last
      period absorbs the rounding residue.

Failure modes:
    - ValidationError when value <= 0 or useful life <= 0.
    - An acquisition date after the as-of date yields zero depreciation.

Age convention:
    Age is whole calendar years since acquisition plus the elapsed
    fraction of the current anniversary year, so an asset bought exactly
    N years before the as-of date has age N.

Usage:
    from geoacct_engines.depreciation import compute_accumulated_depreciation

    accumulated = compute_accumulated_depreciation(
        value=Decimal("50000000"), useful_life_years=5,
        acquisition_date=date(2022, 3, 1), as_of_date=date(2024, 3, 1),
    )
    # Decimal("20000000.00")
"""

from __future__ import annotations

import calendar
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from geoacct_kernel.db.types import HUNDRED, ZERO, round_money, round_percent
from geoacct_kernel.domain.dtos import FixedAssetSnapshot
from geoacct_kernel.exceptions import ValidationError
from geoacct_kernel.logging_config import get_logger
from geoacct_engines.tracer import traced_engine

logger = get_logger("engines.depreciation")

MONTHS_PER_YEAR = 12


def _validate(value: Decimal, useful_life_years: int) -> None:
    if value <= ZERO:
        raise ValidationError("value must be positive", field="value", value=value)
    if useful_life_years <= 0:
        raise ValidationError(
            "useful life must be positive", field="useful_life", value=useful_life_years,
        )


def _shift_years(d: date, years: int) -> date:
    try:
        return d.replace(year=d.year + years)
    except ValueError:
        # 29 February in a non-leap target year
        return date(d.year + years, 2, 28)


def add_months(d: date, months: int) -> date:
    """``d`` moved forward by ``months``, clamped to the end of the target month."""
    month_index = d.month - 1 + months
    year = d.year + month_index // MONTHS_PER_YEAR
    month = month_index % MONTHS_PER_YEAR + 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def years_between(start: date, end: date) -> Decimal:
    """Age in years from ``start`` to ``end``; zero when ``end`` is not after ``start``."""
    if end <= start:
        return ZERO
    years = end.year - start.year
    anniversary = _shift_years(start, years)
    if anniversary > end:
        years -= 1
        anniversary = _shift_years(start, years)
    next_anniversary = _shift_years(start, years + 1)
    span_days = (next_anniversary - anniversary).days
    return Decimal(years) + Decimal((end - anniversary).days) / Decimal(span_days)


@traced_engine(
    "depreciation", "1.0",
    fingerprint_fields=("value", "useful_life_years", "acquisition_date", "as_of_date"),
)
def compute_accumulated_depreciation(
    value: Decimal,
    useful_life_years: int,
    acquisition_date: date,
    as_of_date: date,
) -> Decimal:
    """
    Straight-line accumulated depreciation as of ``as_of_date``.

    Postconditions:
        ``0 <= result <= value``; result quantized to cents.
    """
    _validate(value, useful_life_years)
    life = Decimal(useful_life_years)
    age = years_between(acquisition_date, as_of_date)
    raw = min(age, life) * (value / life)
    return min(max(round_money(raw), ZERO), value)


def compute_book_value(value: Decimal, accumulated_depreciation: Decimal) -> Decimal:
    """``value - accumulated_depreciation``."""
    if not ZERO <= accumulated_depreciation <= value:
        raise ValidationError(
            "accumulated depreciation must lie between 0 and value",
            field="accumulated_depreciation",
            value=accumulated_depreciation,
        )
    return value - accumulated_depreciation


@dataclass(frozen=True)
class DepreciationSummary:
    """An asset's depreciation position on one date."""

    as_of_date: date
    accumulated_depreciation: Decimal
    book_value: Decimal
    depreciation_rate: Decimal  # percent of cost per year
    annual_depreciation: Decimal
    age_years: Decimal
    remaining_years: Decimal


def summarize_depreciation(
    value: Decimal,
    useful_life_years: int,
    acquisition_date: date,
    as_of_date: date,
) -> DepreciationSummary:
    accumulated = compute_accumulated_depreciation(
        value, useful_life_years, acquisition_date, as_of_date,
    )
    age = years_between(acquisition_date, as_of_date)
    life = Decimal(useful_life_years)
    return DepreciationSummary(
        as_of_date=as_of_date,
        accumulated_depreciation=accumulated,
        book_value=compute_book_value(value, accumulated),
        depreciation_rate=round_percent(HUNDRED / life),
        annual_depreciation=round_money(value / life),
        age_years=round_money(age),
        remaining_years=round_money(max(life - age, ZERO)),
    )


# ---------------------------------------------------------------------------
# Monthly schedule
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ScheduleEntry:
    period: int
    entry_date: date
    depreciation_amount: Decimal
    accumulated_depreciation: Decimal
    book_value: Decimal


class MonthlyDepreciationSchedule:
    """
    Lazy, finite, restartable monthly schedule.

    Every call to ``iter()`` starts a fresh pass; ``iter_from(period)``
    resumes at any period without replaying earlier ones.

    Regular periods depreciate ``value / months`` rounded to cents, capped
    so the running total never exceeds ``value``.  The final period takes
    whatever remains, so the last ``accumulated_depreciation`` equals
    ``value`` and the last ``book_value`` is zero.
    """

    def __init__(self, value: Decimal, useful_life_years: int, start_date: date):
        _validate(value, useful_life_years)
        self.value = value
        self.start_date = start_date
        self.months = useful_life_years * MONTHS_PER_YEAR
        self.monthly_amount = round_money(value / Decimal(self.months))

    def __len__(self) -> int:
        return self.months

    def __iter__(self) -> Iterator[ScheduleEntry]:
        return self.iter_from(1)

    def _accumulated_through(self, period: int) -> Decimal:
        if period >= self.months:
            return self.value
        return min(self.monthly_amount * period, self.value)

    def iter_from(self, period: int) -> Iterator[ScheduleEntry]:
        if not 1 <= period <= self.months:
            raise ValidationError(
                f"period must be between 1 and {self.months}", field="period", value=period,
            )
        return self._entries(period)

    def _entries(self, period: int) -> Iterator[ScheduleEntry]:
        accumulated = self._accumulated_through(period - 1)
        for n in range(period, self.months + 1):
            new_accumulated = self._accumulated_through(n)
            yield ScheduleEntry(
                period=n,
                entry_date=add_months(self.start_date, n),
                depreciation_amount=new_accumulated - accumulated,
                accumulated_depreciation=new_accumulated,
                book_value=max(self.value - new_accumulated, ZERO),
            )
            accumulated = new_accumulated


@traced_engine("depreciation_schedule", "1.0", fingerprint_fields=("asset",))
def build_monthly_schedule(asset: FixedAssetSnapshot) -> MonthlyDepreciationSchedule:
    """Monthly schedule for ``asset`` starting at its acquisition date."""
    return MonthlyDepreciationSchedule(
        value=asset.value,
        useful_life_years=asset.useful_life,
        start_date=asset.acquisition_date,
    )
