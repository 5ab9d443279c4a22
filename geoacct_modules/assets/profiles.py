"""
Fixed Assets posting profiles.

Each asset event is described by the legs it produces, expressed in
account ROLES rather than account codes.  The posting builders look the
profile up by event type and resolve roles to codes through
``AssetConfig``; there is no per-event branching on account codes.

Profiles:
    asset.acquisition        Dr Fixed Asset / Cr Cash                (value)
                             Dr Depreciation Exp / Cr Accum Depr     (initial depreciation)
    asset.value_increase     Dr Fixed Asset / Cr Cash                (delta)
    asset.value_decrease     Dr Cash / Cr Fixed Asset                (|delta|)
    asset.depreciation       Dr Depreciation Exp / Cr Accum Depr     (delta)
    asset.disposal           Dr Loss on Disposal / Cr Fixed Asset    (book value)
                             Dr Accum Depr / Cr Fixed Asset          (accumulated depreciation)
"""

from dataclasses import dataclass
from enum import Enum


class AccountRole(Enum):
    """Logical account roles for fixed-asset postings."""

    FIXED_ASSET = "fixed_asset"
    ACCUMULATED_DEPRECIATION = "accumulated_depreciation"
    DEPRECIATION_EXPENSE = "depreciation_expense"
    CASH = "cash"
    LOSS_ON_DISPOSAL = "loss_on_disposal"


class AmountBasis(str, Enum):
    """Which figure of the event a leg carries."""

    VALUE = "value"
    INITIAL_DEPRECIATION = "initial_depreciation"
    DELTA = "delta"
    BOOK_VALUE = "book_value"
    ACCUMULATED_DEPRECIATION = "accumulated_depreciation"


@dataclass(frozen=True)
class LegProfile:
    debit_role: AccountRole
    credit_role: AccountRole
    basis: AmountBasis
    debit_description: str
    credit_description: str


ASSET_ACQUISITION = "asset.acquisition"
ASSET_VALUE_INCREASE = "asset.value_increase"
ASSET_VALUE_DECREASE = "asset.value_decrease"
ASSET_DEPRECIATION = "asset.depreciation"
ASSET_DISPOSAL = "asset.disposal"


PROFILES: dict[str, tuple[LegProfile, ...]] = {
    ASSET_ACQUISITION: (
        LegProfile(
            AccountRole.FIXED_ASSET, AccountRole.CASH, AmountBasis.VALUE,
            "Fixed asset purchase: {name}", "Payment for fixed asset: {name}",
        ),
        LegProfile(
            AccountRole.DEPRECIATION_EXPENSE, AccountRole.ACCUMULATED_DEPRECIATION,
            AmountBasis.INITIAL_DEPRECIATION,
            "Depreciation: {name}", "Accumulated depreciation: {name}",
        ),
    ),
    ASSET_VALUE_INCREASE: (
        LegProfile(
            AccountRole.FIXED_ASSET, AccountRole.CASH, AmountBasis.DELTA,
            "Fixed asset value adjustment: {name}",
            "Payment for fixed asset adjustment: {name}",
        ),
    ),
    ASSET_VALUE_DECREASE: (
        LegProfile(
            AccountRole.CASH, AccountRole.FIXED_ASSET, AmountBasis.DELTA,
            "Refund from fixed asset adjustment: {name}",
            "Fixed asset value adjustment: {name}",
        ),
    ),
    ASSET_DEPRECIATION: (
        LegProfile(
            AccountRole.DEPRECIATION_EXPENSE, AccountRole.ACCUMULATED_DEPRECIATION,
            AmountBasis.DELTA,
            "Depreciation adjustment: {name}",
            "Accumulated depreciation adjustment: {name}",
        ),
    ),
    ASSET_DISPOSAL: (
        LegProfile(
            AccountRole.LOSS_ON_DISPOSAL, AccountRole.FIXED_ASSET, AmountBasis.BOOK_VALUE,
            "Loss on fixed asset disposal: {name}",
            "Book value written off: {name}",
        ),
        LegProfile(
            AccountRole.ACCUMULATED_DEPRECIATION, AccountRole.FIXED_ASSET,
            AmountBasis.ACCUMULATED_DEPRECIATION,
            "Accumulated depreciation cleared: {name}",
            "Depreciated cost written off: {name}",
        ),
    ),
}
