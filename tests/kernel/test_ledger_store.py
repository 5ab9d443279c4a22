"""
Tests for SqlLedgerStore: reads, the unit of work and rollback semantics.

A posting that fails part-way must leave no trace: neither the asset row
nor any of its ledger legs.
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from geoacct_kernel.domain.dtos import AccountInfo, AccountType, TransactionRecord
from geoacct_kernel.domain.entry_types import EntryKind
from geoacct_kernel.exceptions import (
    FixedAssetNotFoundError,
    PersistenceError,
    ProjectNotFoundError,
    ValidationError,
)
from geoacct_kernel.models import LedgerTransaction
from geoacct_kernel.services import ReferenceService, ScopedCache


def _leg(kind=EntryKind.DEBIT, code="1501", amount="100", txn_date=date(2024, 2, 1)):
    return TransactionRecord(
        txn_date=txn_date, kind=kind, account_code=code, amount=Decimal(amount),
    )


class TestWritesRequireUnit:
    def test_append_outside_unit(self, store):
        with pytest.raises(RuntimeError):
            store.append_transactions([_leg()])

    def test_save_outside_unit(self, store, make_asset):
        with pytest.raises(RuntimeError):
            store.save_fixed_asset(make_asset())

    def test_nested_unit_rejected(self, store):
        with pytest.raises(RuntimeError):
            with store.unit_of_work("outer"):
                with store.unit_of_work("inner"):
                    pass


class TestCommit:
    def test_asset_and_legs_commit_together(self, store, make_asset):
        with store.unit_of_work("asset.acquisition"):
            saved = store.save_fixed_asset(make_asset())
            store.append_transactions([_leg(), _leg(EntryKind.CREDIT, "1102")])

        assert store.fixed_asset(saved.id).asset_name == "Boring Machine YBM-01"
        assert len(store.transactions()) == 2

    def test_update_existing_asset(self, store, make_asset):
        with store.unit_of_work("insert"):
            saved = store.save_fixed_asset(make_asset())
        with store.unit_of_work("update"):
            store.save_fixed_asset(saved.with_state(accumulated_depreciation=Decimal("1000")))
        assert store.fixed_asset(saved.id).accumulated_depreciation == Decimal("1000")

    def test_insert_rejects_registered_id(self, store, make_asset):
        with store.unit_of_work("insert"):
            saved = store.insert_fixed_asset(make_asset())
        with pytest.raises(ValidationError) as exc_info:
            with store.unit_of_work("insert again"):
                store.insert_fixed_asset(saved.with_state(accumulated_depreciation=Decimal("1")))
        assert exc_info.value.field == "id"
        assert store.fixed_asset(saved.id).accumulated_depreciation == 0

    def test_delete(self, store, make_asset):
        with store.unit_of_work("insert"):
            saved = store.save_fixed_asset(make_asset())
        with store.unit_of_work("delete"):
            store.delete_fixed_asset(saved.id)
        with pytest.raises(FixedAssetNotFoundError):
            store.fixed_asset(saved.id)


class TestRollback:
    def test_domain_error_rolls_back_and_propagates(self, store, make_asset):
        with pytest.raises(ValidationError):
            with store.unit_of_work("asset.acquisition"):
                store.save_fixed_asset(make_asset())
                store.append_transactions([_leg()])
                raise ValidationError("late failure")

        assert store.fixed_assets() == []
        assert store.transactions() == []

    def test_database_failure_becomes_persistence_error(self, store, make_asset, monkeypatch):
        real_flush = store.session.flush

        def flaky_flush(*args, **kwargs):
            if any(isinstance(obj, LedgerTransaction) for obj in store.session.new):
                raise OperationalError("INSERT", {}, Exception("disk I/O error"))
            return real_flush(*args, **kwargs)

        monkeypatch.setattr(store.session, "flush", flaky_flush)

        with pytest.raises(PersistenceError) as exc_info:
            with store.unit_of_work("asset.acquisition"):
                store.save_fixed_asset(make_asset())
                store.append_transactions([_leg(), _leg(EntryKind.CREDIT, "1102")])

        assert exc_info.value.operation == "asset.acquisition"
        assert isinstance(exc_info.value.__cause__, OperationalError)
        monkeypatch.undo()
        assert store.fixed_assets() == []
        assert store.transactions() == []

    def test_rollback_is_logged(self, store, captured_logs):
        with pytest.raises(ValidationError):
            with store.unit_of_work("asset.disposal"):
                raise ValidationError("nope")
        aborted = [r for r in captured_logs() if r["message"] == "unit_of_work_aborted"]
        assert aborted and aborted[0]["operation"] == "asset.disposal"

    def test_store_usable_after_failure(self, store, make_asset):
        with pytest.raises(ValidationError):
            with store.unit_of_work("first"):
                raise ValidationError("nope")
        with store.unit_of_work("second"):
            store.save_fixed_asset(make_asset())
        assert len(store.fixed_assets()) == 1


class TestReads:
    def test_transactions_date_filter_inclusive(self, store):
        with store.unit_of_work("seed"):
            store.append_transactions([
                _leg(txn_date=date(2024, 1, 31)),
                _leg(txn_date=date(2024, 2, 1)),
                _leg(txn_date=date(2024, 2, 29)),
                _leg(txn_date=date(2024, 3, 1)),
            ])
        found = store.transactions(start=date(2024, 2, 1), end=date(2024, 2, 29))
        assert [t.txn_date for t in found] == [date(2024, 2, 1), date(2024, 2, 29)]

    def test_missing_asset(self, store):
        with pytest.raises(FixedAssetNotFoundError):
            store.fixed_asset(uuid4())

    def test_missing_project(self, store):
        with pytest.raises(ProjectNotFoundError):
            store.project(uuid4())

    def test_project_snapshot(self, store, make_project):
        project_id = make_project(
            costs=(("material", "3000000", "paid"), ("labor", "2000000", "pending")),
            billings=(("30", "30000000"),),
            transactions=(("revenue", "4001", "30000000"),),
        )
        project = store.project(project_id)
        assert project.project_code == "PRJ-001"
        assert len(project.costs) == 2
        assert project.total_billed == Decimal("30000000")
        assert project.transactions[0].kind == EntryKind.REVENUE


class TestReferenceService:
    def test_directory_from_seeded_chart(self, reference_service):
        directory = reference_service.account_directory()
        assert directory.get("1501").account_type == AccountType.ASSET
        assert reference_service.cashflow_map().lookup("1102") is not None

    def test_directory_is_cached(self, reference_service):
        assert reference_service.account_directory() is reference_service.account_directory()

    def test_cache_expires(self, store, clock, reference_set):
        service = ReferenceService(store, ScopedCache(default_ttl_seconds=60, clock=clock))
        service.reseed(reference_set.accounts, reference_set.cashflow_categories)
        first = service.account_directory()
        clock.advance(61)
        assert service.account_directory() is not first

    def test_reseed_invalidates(self, reference_service, reference_set):
        before = reference_service.account_directory()
        accounts = list(reference_set.accounts) + [
            AccountInfo("1106", "Bank Mandiri", AccountType.ASSET, "Bank"),
        ]
        reference_service.reseed(accounts, reference_set.cashflow_categories)
        after = reference_service.account_directory()
        assert after is not before
        assert "1106" in after

    def test_reseed_rejects_duplicates_without_writing(self, reference_service, reference_set):
        accounts = list(reference_set.accounts)
        with pytest.raises(ValidationError):
            reference_service.reseed(accounts + [accounts[0]], reference_set.cashflow_categories)
        assert len(reference_service.account_directory()) == len(accounts)
