"""
Input validation -- raw caller payloads into typed snapshots.

Each ``parse_*`` function takes a mapping as delivered by the surrounding
service (camelCase or snake_case keys), checks required fields and
ranges, and returns the frozen record.  Anything wrong raises
``ValidationError`` naming the offending field; nothing is defaulted
silently.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from geoacct_kernel.db.types import HUNDRED, ZERO, to_decimal
from geoacct_kernel.domain.dtos import (
    BillingRecord,
    FixedAssetSnapshot,
    ProjectCostRecord,
    ProjectSnapshot,
    TransactionRecord,
)
from geoacct_kernel.exceptions import ValidationError

_MISSING = object()


def _field(data: Mapping[str, Any], name: str, *aliases: str, required: bool = True) -> Any:
    for key in (name, *aliases):
        if key in data and data[key] not in (None, ""):
            return data[key]
    if required:
        raise ValidationError(f"{name} is required", field=name)
    return _MISSING


def _date(value: Any, field: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError as exc:
        raise ValidationError(f"{field} must be an ISO date", field=field, value=value) from exc


def _positive(value: Any, field: str) -> Decimal:
    amount = to_decimal(value, field)
    if amount <= ZERO:
        raise ValidationError(f"{field} must be positive", field=field, value=value)
    return amount


def _useful_life(value: Any) -> int:
    try:
        years = int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(
            "usefulLife must be a whole number of years", field="useful_life", value=value,
        ) from exc
    if str(value).strip() not in (str(years), f"{years}.0") or years <= 0:
        raise ValidationError(
            "usefulLife must be a positive whole number of years",
            field="useful_life",
            value=value,
        )
    return years


def parse_fixed_asset(data: Mapping[str, Any]) -> FixedAssetSnapshot:
    """Validate a fixed-asset payload."""
    accumulated = _field(data, "accumulated_depreciation", "accumulatedDepreciation",
                         required=False)
    return FixedAssetSnapshot(
        asset_name=str(_field(data, "asset_name", "assetName")),
        category=str(_field(data, "category")).strip().lower(),
        acquisition_date=_date(
            _field(data, "acquisition_date", "acquisitionDate"), "acquisition_date",
        ),
        value=_positive(_field(data, "value"), "value"),
        useful_life=_useful_life(_field(data, "useful_life", "usefulLife")),
        accumulated_depreciation=(
            ZERO if accumulated is _MISSING
            else to_decimal(accumulated, "accumulated_depreciation")
        ),
        description=data.get("description"),
        location=data.get("location"),
    )


def parse_project_cost(data: Mapping[str, Any]) -> ProjectCostRecord:
    return ProjectCostRecord(
        category=str(_field(data, "category")),
        amount=_positive(_field(data, "amount"), "amount"),
        cost_date=_date(_field(data, "date", "cost_date"), "date"),
        status=data.get("status") or "pending",
        description=str(data.get("description") or ""),
    )


def parse_billing(data: Mapping[str, Any]) -> BillingRecord:
    percentage = to_decimal(_field(data, "percentage"), "percentage")
    if not ZERO < percentage <= HUNDRED:
        raise ValidationError(
            "percentage must be greater than 0 and at most 100",
            field="percentage",
            value=percentage,
        )
    return BillingRecord(
        billing_date=_date(_field(data, "billing_date", "billingDate"), "billing_date"),
        percentage=percentage,
        amount=_positive(_field(data, "amount"), "amount"),
        status=data.get("status") or "pending",
    )


def parse_transaction(data: Mapping[str, Any]) -> TransactionRecord:
    """
    Validate a manually entered transaction.

    Manual entries must carry a positive amount; signed legacy rows are
    read through ``TransactionRecord.from_raw`` instead.
    """
    amount = _positive(_field(data, "amount"), "amount")
    return TransactionRecord.from_raw(
        txn_date=_date(_field(data, "date", "txn_date"), "date"),
        raw_type=str(_field(data, "type")),
        account_code=str(_field(data, "account_code", "accountCode")),
        amount=amount,
        project_id=data.get("project_id") or data.get("projectId"),
        description=str(_field(data, "description")),
        notes=data.get("notes"),
    )


def parse_project(data: Mapping[str, Any]) -> ProjectSnapshot:
    progress = _field(data, "progress", required=False)
    if progress is not _MISSING:
        progress = to_decimal(progress, "progress")
        if not ZERO <= progress <= HUNDRED:
            raise ValidationError(
                "progress must be between 0 and 100", field="progress", value=progress,
            )
    return ProjectSnapshot(
        project_code=str(_field(data, "project_code", "projectCode")),
        name=str(data.get("name") or ""),
        total_value=_positive(_field(data, "total_value", "totalValue"), "total_value"),
        progress=None if progress is _MISSING else progress,
        status=data.get("status") or "planned",
    )
