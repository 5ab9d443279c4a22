"""
Reference Data Loader (``geoacct_config.loader``).

Responsibility
--------------
Loads the reference YAML fragments (chart of accounts, cash-flow category
map, fixed-asset account routing) and parses them into kernel DTOs and
``AssetConfig``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``ValidationError`` naming the key.
* Invalid enum values or duplicate codes  -> ``ValidationError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from geoacct_kernel.domain.dtos import AccountInfo, CashFlowCategoryEntry
from geoacct_kernel.exceptions import ValidationError
from geoacct_kernel.logging_config import get_logger
from geoacct_modules.assets.config import AssetConfig
from geoacct_config.schema import ReferenceSet

logger = get_logger("config.loader")

DEFAULTS_DIR = Path(__file__).parent / "defaults"

CHART_OF_ACCOUNTS_FILE = "chart_of_accounts.yaml"
CASHFLOW_CATEGORIES_FILE = "cashflow_categories.yaml"
ASSET_ACCOUNTS_FILE = "asset_accounts.yaml"


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file; an empty file yields an empty dict."""
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _require(data: dict[str, Any], key: str, source: str) -> Any:
    try:
        return data[key]
    except KeyError as exc:
        raise ValidationError(f"{source}: missing required key {key!r}", field=key) from exc


def parse_account(data: dict[str, Any]) -> AccountInfo:
    return AccountInfo(
        code=str(_require(data, "code", "account")),
        name=str(_require(data, "name", "account")),
        account_type=_require(data, "type", "account"),
        category=str(data.get("category", "")),
    )


def parse_cashflow_category(data: dict[str, Any]) -> CashFlowCategoryEntry:
    return CashFlowCategoryEntry(
        account_code=str(_require(data, "account_code", "cash-flow category")),
        activity_category=_require(data, "activity", "cash-flow category"),
        subcategory=str(data.get("subcategory", "")),
    )


def load_chart_of_accounts(path: Path | None = None) -> tuple[AccountInfo, ...]:
    path = path or DEFAULTS_DIR / CHART_OF_ACCOUNTS_FILE
    data = load_yaml_file(path)
    accounts = tuple(parse_account(row) for row in data.get("accounts", []))
    logger.info("chart_of_accounts_loaded", extra={"path": str(path), "accounts": len(accounts)})
    return accounts


def load_cashflow_categories(path: Path | None = None) -> tuple[CashFlowCategoryEntry, ...]:
    path = path or DEFAULTS_DIR / CASHFLOW_CATEGORIES_FILE
    data = load_yaml_file(path)
    entries = tuple(parse_cashflow_category(row) for row in data.get("categories", []))
    logger.info("cashflow_categories_loaded", extra={"path": str(path), "entries": len(entries)})
    return entries


def load_asset_accounts(path: Path | None = None) -> AssetConfig:
    path = path or DEFAULTS_DIR / ASSET_ACCOUNTS_FILE
    return AssetConfig.from_dict(load_yaml_file(path))


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON form of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def load_reference_set(directory: Path | None = None) -> ReferenceSet:
    """
    Load and cross-validate the three reference fragments in ``directory``
    (the bundled defaults when omitted).
    """
    directory = Path(directory) if directory is not None else DEFAULTS_DIR
    paths = {
        name: directory / name
        for name in (CHART_OF_ACCOUNTS_FILE, CASHFLOW_CATEGORIES_FILE, ASSET_ACCOUNTS_FILE)
    }
    reference = ReferenceSet(
        accounts=load_chart_of_accounts(paths[CHART_OF_ACCOUNTS_FILE]),
        cashflow_categories=load_cashflow_categories(paths[CASHFLOW_CATEGORIES_FILE]),
        asset_config=load_asset_accounts(paths[ASSET_ACCOUNTS_FILE]),
        checksum=compute_checksum({name: load_yaml_file(p) for name, p in paths.items()}),
    )
    reference.validate()
    logger.info("reference_set_loaded", extra={
        "directory": str(directory),
        "checksum": reference.checksum[:16],
    })
    return reference
