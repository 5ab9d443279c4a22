"""
geoacct_engines.cashflow -- Cash-flow activity classification and aggregation.

Responsibility:
    Partition ledger transactions into operating, investing and financing
    activities using the cash-flow category map, sign each one by its
    entry kind, and total the sections into a statement.  Also compares
    two statements period over period.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Consumed by
    geoacct_modules.reporting.

Invariants enforced:
    - Sign convention comes from EntryKind.direction: debit and revenue-like
      kinds are inflows (+), credit and cost-like kinds are outflows (-).
    - net_cash_flow == operating.total + investing.total + financing.total
      == sum of every classified signed amount.
    - In-range transactions whose account is missing from the map are
      excluded, never guessed into a category.  They are returned on the
      statement (``unmapped``) and counted, and a warning is logged.

Failure modes:
    - ValidationError for a date range whose start is after its end.
    - UnmappedAccountError only from ``CashFlowStatement.raise_if_unmapped``.

Usage:
    classifier = CashFlowClassifier()
    classification = classifier.classify(transactions, category_map, DateRange(start, end))
    statement = classifier.aggregate(classification)
    statement.net_cash_flow
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from types import MappingProxyType

from geoacct_kernel.db.types import ZERO, round_percent
from geoacct_kernel.domain.dtos import ActivityCategory, TransactionRecord
from geoacct_kernel.domain.reference import CashFlowCategoryMap
from geoacct_kernel.exceptions import UnmappedAccountError, ValidationError
from geoacct_kernel.logging_config import get_logger
from geoacct_engines.tracer import traced_engine

logger = get_logger("engines.cashflow")


@dataclass(frozen=True)
class DateRange:
    """Inclusive date range."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValidationError(
                f"date range start {self.start} is after end {self.end}",
                field="date_range",
                value=(self.start, self.end),
            )

    def contains(self, d: date) -> bool:
        return self.start <= d <= self.end


@dataclass(frozen=True)
class ClassifiedEntry:
    transaction: TransactionRecord
    activity: ActivityCategory
    subcategory: str
    signed_amount: Decimal


@dataclass(frozen=True)
class Classification:
    """Output of ``classify``: kept entries plus the unmapped exclusions."""

    date_range: DateRange
    entries: tuple[ClassifiedEntry, ...]
    excluded: tuple[TransactionRecord, ...]

    @property
    def unmapped_count(self) -> int:
        return len(self.excluded)

    @property
    def unmapped_account_codes(self) -> tuple[str, ...]:
        return tuple(sorted({t.account_code for t in self.excluded}))


@dataclass(frozen=True)
class ActivitySection:
    activity: ActivityCategory
    entries: tuple[ClassifiedEntry, ...]
    inflows: Decimal
    outflows: Decimal  # reported as a negative number
    total: Decimal
    by_subcategory: Mapping[str, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class CashFlowStatement:
    date_range: DateRange
    operating: ActivitySection
    investing: ActivitySection
    financing: ActivitySection
    net_cash_flow: Decimal
    unmapped: tuple[TransactionRecord, ...] = ()

    @property
    def unmapped_count(self) -> int:
        return len(self.unmapped)

    @property
    def sections(self) -> tuple[ActivitySection, ...]:
        return (self.operating, self.investing, self.financing)

    def section(self, activity: ActivityCategory) -> ActivitySection:
        return {
            ActivityCategory.OPERATING: self.operating,
            ActivityCategory.INVESTING: self.investing,
            ActivityCategory.FINANCING: self.financing,
        }[activity]

    def raise_if_unmapped(self) -> None:
        """For callers that require full coverage of the ledger."""
        if self.unmapped:
            codes = tuple(sorted({t.account_code for t in self.unmapped}))
            raise UnmappedAccountError(codes, len(self.unmapped))


def _section(activity: ActivityCategory, entries: Iterable[ClassifiedEntry]) -> ActivitySection:
    entries = tuple(e for e in entries if e.activity == activity)
    inflows = sum((e.signed_amount for e in entries if e.signed_amount > ZERO), ZERO)
    outflows = sum((e.signed_amount for e in entries if e.signed_amount < ZERO), ZERO)
    by_subcategory: dict[str, Decimal] = {}
    for e in entries:
        by_subcategory[e.subcategory] = by_subcategory.get(e.subcategory, ZERO) + e.signed_amount
    return ActivitySection(
        activity=activity,
        entries=entries,
        inflows=inflows,
        outflows=outflows,
        total=inflows + outflows,
        by_subcategory=MappingProxyType(dict(sorted(by_subcategory.items()))),
    )


class CashFlowClassifier:
    """
    Pure classifier/aggregator.

    Contract:
        No I/O, deterministic.  The category map is passed in; the classifier
        holds no state between calls.
    """

    @traced_engine("cashflow", "1.0", fingerprint_fields=("date_range",))
    def classify(
        self,
        transactions: Iterable[TransactionRecord],
        category_map: CashFlowCategoryMap,
        date_range: DateRange,
    ) -> Classification:
        kept: list[ClassifiedEntry] = []
        excluded: list[TransactionRecord] = []
        for txn in transactions:
            if not date_range.contains(txn.txn_date):
                continue
            mapping = category_map.lookup(txn.account_code)
            if mapping is None:
                excluded.append(txn)
                continue
            kept.append(ClassifiedEntry(
                transaction=txn,
                activity=mapping.activity_category,
                subcategory=mapping.subcategory,
                signed_amount=txn.signed_amount,
            ))

        classification = Classification(
            date_range=date_range, entries=tuple(kept), excluded=tuple(excluded),
        )
        if excluded:
            logger.warning("cash_flow_unmapped_accounts", extra={
                "excluded_count": classification.unmapped_count,
                "account_codes": list(classification.unmapped_account_codes),
            })
        return classification

    def aggregate(self, classification: Classification) -> CashFlowStatement:
        operating = _section(ActivityCategory.OPERATING, classification.entries)
        investing = _section(ActivityCategory.INVESTING, classification.entries)
        financing = _section(ActivityCategory.FINANCING, classification.entries)
        net = operating.total + investing.total + financing.total

        logger.info("cash_flow_aggregated", extra={
            "start": classification.date_range.start,
            "end": classification.date_range.end,
            "entries": len(classification.entries),
            "net_cash_flow": net,
            "unmapped_count": classification.unmapped_count,
        })
        return CashFlowStatement(
            date_range=classification.date_range,
            operating=operating,
            investing=investing,
            financing=financing,
            net_cash_flow=net,
            unmapped=classification.excluded,
        )


# ---------------------------------------------------------------------------
# Period comparison
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FigureChange:
    current: Decimal
    previous: Decimal
    change: Decimal
    percent_change: Decimal


@dataclass(frozen=True)
class CashFlowComparison:
    current: CashFlowStatement
    previous: CashFlowStatement
    operating: FigureChange
    investing: FigureChange
    financing: FigureChange
    net_cash_flow: FigureChange


def _change(current: Decimal, previous: Decimal) -> FigureChange:
    delta = current - previous
    percent = ZERO if previous == ZERO else round_percent(delta / abs(previous) * 100)
    return FigureChange(current=current, previous=previous, change=delta, percent_change=percent)


def compare_cash_flows(
    current: CashFlowStatement,
    previous: CashFlowStatement,
) -> CashFlowComparison:
    """Period-over-period change; percent change is relative to |previous|."""
    return CashFlowComparison(
        current=current,
        previous=previous,
        operating=_change(current.operating.total, previous.operating.total),
        investing=_change(current.investing.total, previous.investing.total),
        financing=_change(current.financing.total, previous.financing.total),
        net_cash_flow=_change(current.net_cash_flow, previous.net_cash_flow),
    )
