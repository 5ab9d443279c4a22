"""
Fixed-asset posting builders.

Responsibility:
    Turn an asset event (acquisition, value adjustment, depreciation
    adjustment, disposal) into the balanced set of ledger legs it produces
    and the asset state that results from it.

Architecture position:
    Modules > Assets -- pure, zero I/O.  ``FixedAssetService`` persists the
    returned ``AssetPosting`` inside one unit of work.

Invariants enforced:
    - Sum of debit legs == sum of credit legs for every posting; an
      unbalanced set raises UnbalancedPostingError before anything is
      persisted.
    - Zero-amount legs are never emitted.
    - book value == value - accumulated depreciation on ``asset_after``.

Leg dates:
    Acquisition value legs carry the acquisition date.  Initial
    depreciation and every other event carry the posting date (``as_of``).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from geoacct_kernel.db.types import ZERO, round_money
from geoacct_kernel.domain.dtos import FixedAssetSnapshot, TransactionRecord
from geoacct_kernel.domain.entry_types import EntryKind
from geoacct_kernel.exceptions import UnbalancedPostingError, ValidationError
from geoacct_kernel.logging_config import get_logger
from geoacct_engines.depreciation import compute_accumulated_depreciation
from geoacct_modules.assets.config import AssetConfig
from geoacct_modules.assets.profiles import (
    ASSET_ACQUISITION,
    ASSET_DEPRECIATION,
    ASSET_DISPOSAL,
    ASSET_VALUE_DECREASE,
    ASSET_VALUE_INCREASE,
    PROFILES,
    AccountRole,
    AmountBasis,
)

logger = get_logger("modules.assets.posting")


@dataclass(frozen=True)
class PostingLine:
    account_code: str
    kind: EntryKind
    amount: Decimal
    description: str
    role: AccountRole
    txn_date: date


@dataclass(frozen=True)
class AssetPosting:
    """
    Result of a posting builder.

    ``asset_after`` is None for a disposal (the asset is removed).
    """

    event_type: str
    asset_before: FixedAssetSnapshot
    asset_after: FixedAssetSnapshot | None
    lines: tuple[PostingLine, ...]

    @property
    def total_debits(self) -> Decimal:
        return sum((line.amount for line in self.lines if line.kind == EntryKind.DEBIT), ZERO)

    @property
    def total_credits(self) -> Decimal:
        return sum((line.amount for line in self.lines if line.kind == EntryKind.CREDIT), ZERO)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def to_transactions(self) -> list[TransactionRecord]:
        asset_id = self.asset_before.id
        notes = f"{self.event_type}:{asset_id}" if asset_id else self.event_type
        return [
            TransactionRecord(
                txn_date=line.txn_date,
                kind=line.kind,
                account_code=line.account_code,
                amount=line.amount,
                description=line.description,
                notes=notes,
                raw_type=line.kind.value,
            )
            for line in self.lines
        ]


def _build_lines(
    event_type: str,
    asset: FixedAssetSnapshot,
    config: AssetConfig,
    amounts: dict[AmountBasis, Decimal],
    dates: dict[AmountBasis, date],
) -> tuple[PostingLine, ...]:
    accounts = config.resolve_accounts(asset.category)
    lines: list[PostingLine] = []
    for leg in PROFILES[event_type]:
        amount = amounts.get(leg.basis, ZERO)
        if amount <= ZERO:
            continue
        txn_date = dates[leg.basis]
        lines.append(PostingLine(
            account_code=accounts[leg.debit_role],
            kind=EntryKind.DEBIT,
            amount=amount,
            description=leg.debit_description.format(name=asset.asset_name),
            role=leg.debit_role,
            txn_date=txn_date,
        ))
        lines.append(PostingLine(
            account_code=accounts[leg.credit_role],
            kind=EntryKind.CREDIT,
            amount=amount,
            description=leg.credit_description.format(name=asset.asset_name),
            role=leg.credit_role,
            txn_date=txn_date,
        ))
    return tuple(lines)


def _checked(posting: AssetPosting) -> AssetPosting:
    debits, credits = posting.total_debits, posting.total_credits
    if debits != credits:
        logger.error("asset_posting_unbalanced", extra={
            "event_type": posting.event_type,
            "debits": debits,
            "credits": credits,
        })
        raise UnbalancedPostingError(posting.event_type, debits, credits)
    return posting


def post_acquisition(
    asset: FixedAssetSnapshot,
    config: AssetConfig,
    as_of: date,
) -> AssetPosting:
    """
    Purchase of ``asset``; an asset acquired before ``as_of`` also books
    the depreciation accrued up to that date.
    """
    initial = compute_accumulated_depreciation(
        asset.value, asset.useful_life, asset.acquisition_date, as_of,
    )
    after = asset.with_state(accumulated_depreciation=initial)
    lines = _build_lines(
        ASSET_ACQUISITION, asset, config,
        amounts={AmountBasis.VALUE: asset.value, AmountBasis.INITIAL_DEPRECIATION: initial},
        dates={AmountBasis.VALUE: asset.acquisition_date, AmountBasis.INITIAL_DEPRECIATION: as_of},
    )
    return _checked(AssetPosting(ASSET_ACQUISITION, asset, after, lines))


def post_value_adjustment(
    asset: FixedAssetSnapshot,
    new_value: Decimal,
    config: AssetConfig,
    as_of: date,
) -> AssetPosting:
    new_value = round_money(new_value)
    if new_value <= ZERO:
        raise ValidationError("asset value must be positive", field="value", value=new_value)
    if new_value < asset.accumulated_depreciation:
        raise ValidationError(
            "new value is below the accumulated depreciation",
            field="value",
            value=new_value,
        )
    delta = new_value - asset.value
    event_type = ASSET_VALUE_INCREASE if delta >= ZERO else ASSET_VALUE_DECREASE
    after = asset.with_state(value=new_value)
    lines = _build_lines(
        event_type, asset, config,
        amounts={AmountBasis.DELTA: abs(delta)},
        dates={AmountBasis.DELTA: as_of},
    )
    return _checked(AssetPosting(event_type, asset, after, lines))


def post_depreciation_adjustment(
    asset: FixedAssetSnapshot,
    new_accumulated: Decimal,
    config: AssetConfig,
    as_of: date,
) -> AssetPosting:
    """Raise accumulated depreciation to ``new_accumulated``; never lowers it."""
    new_accumulated = round_money(new_accumulated)
    if not ZERO <= new_accumulated <= asset.value:
        raise ValidationError(
            "accumulated depreciation must lie between 0 and value",
            field="accumulated_depreciation",
            value=new_accumulated,
        )
    delta = new_accumulated - asset.accumulated_depreciation
    if delta <= ZERO:
        return AssetPosting(ASSET_DEPRECIATION, asset, asset, ())
    after = asset.with_state(accumulated_depreciation=new_accumulated)
    lines = _build_lines(
        ASSET_DEPRECIATION, asset, config,
        amounts={AmountBasis.DELTA: delta},
        dates={AmountBasis.DELTA: as_of},
    )
    return _checked(AssetPosting(ASSET_DEPRECIATION, asset, after, lines))


def post_disposal(
    asset: FixedAssetSnapshot,
    config: AssetConfig,
    as_of: date,
) -> AssetPosting:
    """Clear both sides of the asset's sub-ledger ahead of its removal."""
    lines = _build_lines(
        ASSET_DISPOSAL, asset, config,
        amounts={
            AmountBasis.BOOK_VALUE: asset.book_value,
            AmountBasis.ACCUMULATED_DEPRECIATION: asset.accumulated_depreciation,
        },
        dates={AmountBasis.BOOK_VALUE: as_of, AmountBasis.ACCUMULATED_DEPRECIATION: as_of},
    )
    return _checked(AssetPosting(ASSET_DISPOSAL, asset, None, lines))
