"""
Fixed Assets Module Service (``geoacct_modules.assets.service``).

Responsibility
--------------
Orchestrates fixed-asset operations -- acquisition, revaluation,
depreciation, disposal and the depreciation refresh run -- by delegating
leg construction to ``geoacct_modules.assets.posting`` and persistence to
the ``LedgerStore``.

Architecture position
---------------------
**Modules layer** -- thin glue.  ``FixedAssetService`` is the sole public
entry point for fixed-asset writes.  It composes the pure posting
builders, the depreciation engine and the store's unit of work.

Invariants enforced
-------------------
* Each public write opens exactly one unit of work; the asset row and its
  ledger legs commit together or not at all.
* The asset is re-read with ``for_update=True`` inside the unit, so
  concurrent postings against one asset serialize on the row lock.
* Posting dates come from the injected clock unless ``as_of`` is given.

Failure modes
-------------
* ValidationError / UnbalancedPostingError  -> raised before any write;
  unit rolled back.
* FixedAssetNotFoundError  -> unknown asset id.
* PersistenceError  -> the store failed to flush or commit; nothing
  written.

Usage::

    service = FixedAssetService(SqlLedgerStore(session), clock=clock)
    posting = service.acquire(asset)
    service.dispose(posting.asset_after.id)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from uuid import UUID

from geoacct_kernel.db.types import round_money
from geoacct_kernel.domain.clock import Clock, SystemClock
from geoacct_kernel.domain.dtos import FixedAssetSnapshot
from geoacct_kernel.exceptions import GeoAcctError, ValidationError
from geoacct_kernel.logging_config import LogContext, get_logger
from geoacct_kernel.services.ledger_store import LedgerStore
from geoacct_engines.depreciation import (
    DepreciationSummary,
    MonthlyDepreciationSchedule,
    build_monthly_schedule,
    compute_accumulated_depreciation,
    summarize_depreciation,
)
from geoacct_modules.assets.config import AssetConfig
from geoacct_modules.assets.posting import (
    AssetPosting,
    post_acquisition,
    post_depreciation_adjustment,
    post_disposal,
    post_value_adjustment,
)

logger = get_logger("modules.assets.service")


@dataclass(frozen=True)
class DepreciationRunDetail:
    asset_id: UUID | None
    asset_name: str
    previous_accumulated: Decimal
    new_accumulated: Decimal
    adjustment: Decimal


@dataclass(frozen=True)
class DepreciationRunError:
    asset_id: UUID | None
    asset_name: str
    error_code: str
    message: str


@dataclass(frozen=True)
class DepreciationRunResult:
    """Outcome of ``refresh_depreciation``; one asset's failure does not stop the run."""

    as_of_date: date
    processed: int
    updated: int
    errors: tuple[DepreciationRunError, ...] = ()
    details: tuple[DepreciationRunDetail, ...] = field(default_factory=tuple)

    @property
    def failed(self) -> int:
        return len(self.errors)


class FixedAssetService:
    """
    Orchestrates fixed-asset postings through the ledger store.

    Contract
    --------
    * Every write returns the ``AssetPosting`` that was persisted.
    * Read helpers (``depreciation_summary``, ``schedule``) have no side
      effects.

    Non-goals
    ---------
    * Does NOT check that the resolved account codes exist in the chart of
      accounts; reference data is seeded separately.
    """

    def __init__(
        self,
        store: LedgerStore,
        config: AssetConfig | None = None,
        clock: Clock | None = None,
    ):
        self._store = store
        self._config = config or AssetConfig.with_defaults()
        self._clock = clock or SystemClock()

    @property
    def config(self) -> AssetConfig:
        return self._config

    def _today(self, as_of: date | None) -> date:
        return as_of if as_of is not None else self._clock.today()

    def _persist(self, posting: AssetPosting) -> None:
        if posting.lines:
            self._store.append_transactions(posting.to_transactions())
        if posting.asset_after is None:
            self._store.delete_fixed_asset(posting.asset_before.id)
        elif posting.asset_after != posting.asset_before:
            self._store.save_fixed_asset(posting.asset_after)

    def _post_existing(
        self,
        operation: str,
        asset_id: UUID,
        build: Callable[[FixedAssetSnapshot], AssetPosting],
    ) -> AssetPosting:
        with LogContext.bind(asset_id=str(asset_id)):
            with self._store.unit_of_work(operation):
                asset = self._store.fixed_asset(asset_id, for_update=True)
                posting = build(asset)
                self._persist(posting)
            self._log_committed(posting)
            return posting

    def _log_committed(self, posting: AssetPosting) -> None:
        logger.info("asset_posting_committed", extra={
            "event_type": posting.event_type,
            "legs": len(posting.lines),
            "total_debits": posting.total_debits,
        })

    # =========================================================================
    # Acquisition
    # =========================================================================

    def acquire(self, asset: FixedAssetSnapshot, as_of: date | None = None) -> AssetPosting:
        """
        Record the purchase of ``asset`` and store it.

        An acquisition date before ``as_of`` books the depreciation accrued
        since then in the same unit.
        """
        as_of = self._today(as_of)
        asset = asset.with_id()
        with LogContext.bind(asset_id=str(asset.id)):
            logger.info("asset_acquisition_started", extra={
                "category": asset.category,
                "value": asset.value,
                "useful_life": asset.useful_life,
                "acquisition_date": asset.acquisition_date,
            })
            posting = post_acquisition(asset, self._config, as_of)
            with self._store.unit_of_work("asset.acquisition"):
                self._store.insert_fixed_asset(posting.asset_after)
                self._store.append_transactions(posting.to_transactions())
            self._log_committed(posting)
            return posting

    # =========================================================================
    # Revaluation
    # =========================================================================

    def revalue(
        self,
        asset_id: UUID,
        new_value: Decimal,
        as_of: date | None = None,
    ) -> AssetPosting:
        """Change the asset's recorded value; the difference is settled against cash."""
        as_of = self._today(as_of)
        logger.info("asset_revaluation_started", extra={
            "asset_id": str(asset_id),
            "new_value": new_value,
        })
        return self._post_existing(
            "asset.value_adjustment",
            asset_id,
            lambda asset: post_value_adjustment(asset, new_value, self._config, as_of),
        )

    # =========================================================================
    # Depreciation
    # =========================================================================

    def record_depreciation(
        self,
        asset_id: UUID,
        amount: Decimal,
        as_of: date | None = None,
    ) -> AssetPosting:
        """Add ``amount`` of depreciation for a period."""
        amount = round_money(amount)
        if amount <= 0:
            raise ValidationError(
                "depreciation amount must be positive", field="amount", value=amount,
            )
        as_of = self._today(as_of)
        logger.info("asset_depreciation_started", extra={
            "asset_id": str(asset_id),
            "amount": amount,
        })
        return self._post_existing(
            "asset.depreciation",
            asset_id,
            lambda asset: post_depreciation_adjustment(
                asset, asset.accumulated_depreciation + amount, self._config, as_of,
            ),
        )

    def depreciate_to(self, asset_id: UUID, as_of: date | None = None) -> AssetPosting:
        """Bring accumulated depreciation up to its straight-line amount at ``as_of``."""
        as_of = self._today(as_of)

        def build(asset: FixedAssetSnapshot) -> AssetPosting:
            target = compute_accumulated_depreciation(
                asset.value, asset.useful_life, asset.acquisition_date, as_of,
            )
            return post_depreciation_adjustment(asset, target, self._config, as_of)

        return self._post_existing("asset.depreciation", asset_id, build)

    def refresh_depreciation(self, as_of: date | None = None) -> DepreciationRunResult:
        """
        Recompute every asset's accumulated depreciation as of ``as_of``.

        Assets whose recorded figure trails the computed one by more than
        the configured tolerance get an adjustment posting, each in its own
        unit of work.  Failures are collected per asset.
        """
        as_of = self._today(as_of)
        logger.info("depreciation_refresh_started", extra={"as_of_date": as_of})

        processed = 0
        details: list[DepreciationRunDetail] = []
        errors: list[DepreciationRunError] = []
        for asset in self._store.fixed_assets():
            processed += 1
            try:
                target = compute_accumulated_depreciation(
                    asset.value, asset.useful_life, asset.acquisition_date, as_of,
                )
                if target - asset.accumulated_depreciation <= self._config.depreciation_tolerance:
                    continue
                posting = self._post_existing(
                    "asset.depreciation_refresh",
                    asset.id,
                    lambda current, target=target: post_depreciation_adjustment(
                        current, target, self._config, as_of,
                    ),
                )
            except GeoAcctError as exc:
                logger.warning("depreciation_refresh_asset_failed", extra={
                    "asset_id": str(asset.id),
                    "error_code": exc.code,
                })
                errors.append(DepreciationRunError(
                    asset_id=asset.id,
                    asset_name=asset.asset_name,
                    error_code=exc.code,
                    message=str(exc),
                ))
                continue
            if posting.lines:
                details.append(DepreciationRunDetail(
                    asset_id=asset.id,
                    asset_name=asset.asset_name,
                    previous_accumulated=posting.asset_before.accumulated_depreciation,
                    new_accumulated=posting.asset_after.accumulated_depreciation,
                    adjustment=posting.total_debits,
                ))

        result = DepreciationRunResult(
            as_of_date=as_of,
            processed=processed,
            updated=len(details),
            errors=tuple(errors),
            details=tuple(details),
        )
        logger.info("depreciation_refresh_completed", extra={
            "processed": result.processed,
            "updated": result.updated,
            "failed": result.failed,
        })
        return result

    # =========================================================================
    # Disposal
    # =========================================================================

    def dispose(self, asset_id: UUID, as_of: date | None = None) -> AssetPosting:
        """Write the asset off the books and remove it."""
        as_of = self._today(as_of)
        logger.info("asset_disposal_started", extra={"asset_id": str(asset_id)})
        return self._post_existing(
            "asset.disposal",
            asset_id,
            lambda asset: post_disposal(asset, self._config, as_of),
        )

    # =========================================================================
    # Queries
    # =========================================================================

    def depreciation_summary(
        self,
        asset_id: UUID,
        as_of: date | None = None,
    ) -> DepreciationSummary:
        asset = self._store.fixed_asset(asset_id)
        return summarize_depreciation(
            asset.value, asset.useful_life, asset.acquisition_date, self._today(as_of),
        )

    def schedule(self, asset_id: UUID) -> MonthlyDepreciationSchedule:
        return build_monthly_schedule(self._store.fixed_asset(asset_id))
