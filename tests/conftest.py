"""
Pytest fixtures for the geoacct test suite.

Provides:
- Structured logging configured once per session, log context cleared per test
- ``captured_logs`` for asserting on emitted JSON log records
- A fresh in-memory SQLite database per test (StaticPool, shared by sessions)
- Seeded reference data (bundled chart of accounts and cash-flow map)
- A deterministic clock and small factories for assets and projects
"""

import json
import logging
from collections.abc import Callable, Generator
from datetime import UTC, date, datetime
from decimal import Decimal
from io import StringIO
from uuid import UUID

import pytest
from sqlalchemy.orm import Session

from geoacct_config import ReferenceSet, load_reference_set
from geoacct_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from geoacct_kernel.domain.clock import DeterministicClock
from geoacct_kernel.domain.dtos import FixedAssetSnapshot
from geoacct_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from geoacct_kernel.models import Billing, LedgerTransaction, Project, ProjectCost
from geoacct_kernel.services import ReferenceService, ScopedCache, SqlLedgerStore
from geoacct_modules.assets import AssetConfig

# 1 March 2024, the "today" of every service test
TODAY = date(2024, 3, 1)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG, stream=StringIO())
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture geoacct logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            ...
            logs = captured_logs()
            assert any(r["message"] == "asset_posting_committed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("geoacct")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Clock and configuration
# =============================================================================


@pytest.fixture
def clock() -> DeterministicClock:
    return DeterministicClock(datetime(2024, 3, 1, 9, 0, 0, tzinfo=UTC))


@pytest.fixture
def asset_config() -> AssetConfig:
    return AssetConfig.with_defaults()


@pytest.fixture(scope="session")
def reference_set() -> ReferenceSet:
    return load_reference_set()


# =============================================================================
# Database
# =============================================================================


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database for one test."""
    eng = init_engine_from_url("sqlite://")
    create_tables()
    yield eng
    drop_tables()
    reset_engine()


@pytest.fixture
def session(engine) -> Generator[Session, None, None]:
    s = get_session()
    yield s
    s.rollback()
    s.close()


@pytest.fixture
def store(session) -> SqlLedgerStore:
    return SqlLedgerStore(session)


@pytest.fixture
def reference_service(store, clock, reference_set) -> ReferenceService:
    """ReferenceService over a store seeded with the bundled reference set."""
    service = ReferenceService(store, ScopedCache(default_ttl_seconds=60, clock=clock))
    service.reseed(reference_set.accounts, reference_set.cashflow_categories)
    return service


# =============================================================================
# Factories
# =============================================================================


@pytest.fixture
def make_asset() -> Callable[..., FixedAssetSnapshot]:
    def _make(
        asset_name: str = "Boring Machine YBM-01",
        category: str = "equipment",
        acquisition_date: date = date(2022, 3, 1),
        value: str | Decimal = "50000000",
        useful_life: int = 5,
        accumulated_depreciation: str | Decimal = "0",
        **kwargs,
    ) -> FixedAssetSnapshot:
        return FixedAssetSnapshot(
            asset_name=asset_name,
            category=category,
            acquisition_date=acquisition_date,
            value=Decimal(value),
            useful_life=useful_life,
            accumulated_depreciation=Decimal(accumulated_depreciation),
            **kwargs,
        )

    return _make


@pytest.fixture
def make_project(session) -> Callable[..., UUID]:
    """
    Insert a project with optional costs, billings and transactions.

    ``costs``: (category, amount, status) tuples.
    ``billings``: (percentage, amount) tuples.
    ``transactions``: (raw_type, account_code, amount) tuples.
    """

    def _make(
        project_code: str = "PRJ-001",
        total_value: str = "100000000",
        progress: str | None = "25",
        status: str = "ongoing",
        costs: tuple = (),
        billings: tuple = (),
        transactions: tuple = (),
    ) -> UUID:
        project = Project(
            project_code=project_code,
            name=f"Soil investigation {project_code}",
            total_value=Decimal(total_value),
            progress=Decimal(progress) if progress is not None else None,
            status=status,
        )
        for category, amount, cost_status in costs:
            project.costs.append(ProjectCost(
                category=category,
                amount=Decimal(amount),
                cost_date=date(2024, 1, 15),
                status=cost_status,
            ))
        for percentage, amount in billings:
            project.billings.append(Billing(
                billing_date=date(2024, 2, 1),
                percentage=Decimal(percentage),
                amount=Decimal(amount),
                status="pending",
            ))
        session.add(project)
        session.flush()
        for raw_type, account_code, amount in transactions:
            session.add(LedgerTransaction(
                txn_date=date(2024, 2, 10),
                type=raw_type,
                account_code=account_code,
                amount=Decimal(amount),
                project_id=project.id,
                description=f"{raw_type} {account_code}",
            ))
        session.commit()
        return project.id

    return _make
