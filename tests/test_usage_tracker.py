"""Tests for UsageTrackingService."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from cloudbill.models.resource import (
    KubernetesCluster,
    ManagedDatabase,
    ObjectStorageBucket,
    VirtualMachine,
    Volume,
)
from cloudbill.models.usage_record import UsageRecord
from cloudbill.services.usage_tracker import UsageTrackingService, calculate_hours

ACCOUNT_ID = "acc-usage"
START = datetime(2026, 3, 1, 10, 0, tzinfo=UTC)
END = START + timedelta(hours=1)


def _add(db_session, obj):
    db_session.add(obj)
    db_session.commit()
    db_session.refresh(obj)
    return obj


@pytest.fixture
def service(db_session):
    return UsageTrackingService(db_session)


@pytest.fixture
def resources(db_session):
    """One resource of each kind in an active and an inactive state."""
    return {
        "running_vm": _add(
            db_session,
            VirtualMachine(account_id=ACCOUNT_ID, name="web-1", state="Running"),
        ),
        "stopped_vm": _add(
            db_session,
            VirtualMachine(account_id=ACCOUNT_ID, name="web-2", state="Stopped"),
        ),
        "volume": _add(
            db_session,
            Volume(account_id=ACCOUNT_ID, name="data", size_gb=100, state="Allocated"),
        ),
        "bucket": _add(
            db_session,
            ObjectStorageBucket(
                account_id=ACCOUNT_ID, name="assets", size_bytes=512 * 1024**2, object_count=3
            ),
        ),
        "active_cluster": _add(
            db_session,
            KubernetesCluster(
                account_id=ACCOUNT_ID, name="k8s", status="Active", master_nodes=1, worker_nodes=3
            ),
        ),
        "new_cluster": _add(
            db_session,
            KubernetesCluster(account_id=ACCOUNT_ID, name="k8s-new", status="Creating"),
        ),
        "active_db": _add(
            db_session,
            ManagedDatabase(account_id=ACCOUNT_ID, name="pg", engine="postgres", status="active"),
        ),
        "new_db": _add(
            db_session,
            ManagedDatabase(
                account_id=ACCOUNT_ID, name="mysql", engine="mysql", status="creating"
            ),
        ),
    }


class TestCalculateHours:
    def test_one_hour(self):
        assert calculate_hours(START, END) == Decimal("1")

    def test_fractional_hours(self):
        assert calculate_hours(START, START + timedelta(minutes=30)) == Decimal("0.5")

    def test_zero(self):
        assert calculate_hours(START, START) == Decimal("0")


class TestTrackSingleResources:
    def test_track_vm_usage(self, service, resources):
        record = service.track_vm_usage(ACCOUNT_ID, resources["running_vm"], START, END)
        assert record.resource_type == "compute"
        assert record.metric_type == "runtime"
        assert record.unit == "hours"
        assert record.quantity == Decimal("1")
        assert record.unit_price == Decimal("500")
        assert record.total_cost == Decimal("500")
        assert record.billed is False
        assert record.invoice_id is None
        assert record.usage_metadata["state"] == "Running"

    def test_track_storage_usage(self, service, resources):
        half_hour = START + timedelta(minutes=30)
        record = service.track_storage_usage(ACCOUNT_ID, resources["volume"], START, half_hour)
        assert record.resource_type == "block_storage"
        assert record.unit == "GB-hours"
        assert record.quantity == Decimal("50")
        assert record.total_cost == Decimal("50")

    def test_track_object_storage_keeps_fractional_paise(self, service, resources):
        record = service.track_object_storage_usage(ACCOUNT_ID, resources["bucket"], START, END)
        assert record.resource_type == "object_storage"
        assert record.quantity == Decimal("0.5")
        assert record.total_cost == Decimal("0.5")

    def test_track_bandwidth_usage(self, service):
        resource = SimpleNamespace(id="lb-1", name="edge")
        record = service.track_bandwidth_usage(ACCOUNT_ID, resource, Decimal("2.5"), START, END)
        assert record.resource_type == "bandwidth"
        assert record.metric_type == "data_transfer"
        assert record.unit == "GB"
        assert record.unit_price == Decimal("1200")
        assert record.total_cost == Decimal("3000")

    def test_track_kubernetes_counts_all_nodes(self, service, resources):
        record = service.track_kubernetes_usage(
            ACCOUNT_ID, resources["active_cluster"], START, END
        )
        assert record.resource_type == "kubernetes"
        assert record.unit == "node-hours"
        assert record.quantity == Decimal("4")
        assert record.total_cost == Decimal("4000")

    def test_track_database_defaults_storage(self, service, resources):
        record = service.track_database_usage(ACCOUNT_ID, resources["active_db"], START, END)
        assert record.resource_type == "database"
        assert record.quantity == Decimal("1")
        # 500 compute + 10 GB default storage * 1 paise
        assert record.total_cost == Decimal("510")
        assert record.unit_price == Decimal("510")

    def test_track_database_with_storage(self, service, db_session):
        database = _add(
            db_session,
            ManagedDatabase(
                account_id=ACCOUNT_ID,
                name="big",
                engine="postgres",
                status="active",
                storage_gb=20,
            ),
        )
        record = service.track_database_usage(
            ACCOUNT_ID, database, START, START + timedelta(hours=2)
        )
        assert record.quantity == Decimal("2")
        assert record.total_cost == Decimal("1040")
        assert record.unit_price == Decimal("520")


class TestTrackAllActiveResources:
    def test_records_only_active_resources(self, service, resources, db_session):
        report = service.track_all_active_resources(ACCOUNT_ID)

        assert report.records_created == 5
        assert report.errors == []
        assert report.period_end - report.period_start == timedelta(hours=1)

        records = db_session.query(UsageRecord).filter(UsageRecord.account_id == ACCOUNT_ID).all()
        assert sorted(r.resource_type for r in records) == [
            "block_storage",
            "compute",
            "database",
            "kubernetes",
            "object_storage",
        ]
        resource_ids = {r.resource_id for r in records}
        assert str(resources["running_vm"].id) in resource_ids
        assert str(resources["stopped_vm"].id) not in resource_ids
        assert str(resources["new_cluster"].id) not in resource_ids
        assert str(resources["new_db"].id) not in resource_ids

    def test_state_match_is_case_insensitive(self, service, db_session):
        _add(db_session, VirtualMachine(account_id=ACCOUNT_ID, name="vm", state="RUNNING"))
        report = service.track_all_active_resources(ACCOUNT_ID)
        assert report.records_created == 1

    def test_account_without_resources(self, service):
        report = service.track_all_active_resources("acc-empty")
        assert report.records_created == 0
        assert report.errors == []

    def test_category_listing_failure_does_not_stop_others(self, service, resources):
        with patch.object(
            service.resource_repo, "get_volumes", side_effect=RuntimeError("volumes down")
        ):
            report = service.track_all_active_resources(ACCOUNT_ID)

        assert report.records_created == 4
        assert len(report.errors) == 1
        assert report.errors[0].startswith("block_storage")
        assert "volumes down" in report.errors[0]

    def test_record_write_failure_is_reported(self, service, resources, db_session):
        with patch.object(service, "track_vm_usage", side_effect=RuntimeError("write failed")):
            report = service.track_all_active_resources(ACCOUNT_ID)

        assert report.records_created == 4
        assert len(report.errors) == 1
        assert report.errors[0].startswith("compute/")
        assert db_session.query(UsageRecord).count() == 4


class TestGenerateUsageSummary:
    def test_breakdown_by_category(self, service, resources):
        service.track_vm_usage(ACCOUNT_ID, resources["running_vm"], START, END)
        service.track_vm_usage(ACCOUNT_ID, resources["running_vm"], END, END + timedelta(hours=1))
        service.track_object_storage_usage(ACCOUNT_ID, resources["bucket"], START, END)

        summary = service.generate_usage_summary(
            ACCOUNT_ID, START, END + timedelta(hours=1)
        )

        assert summary.account_id == ACCOUNT_ID
        assert summary.breakdown["compute"].quantity == Decimal("2")
        assert summary.breakdown["compute"].cost_paise == Decimal("1000")
        assert summary.breakdown["compute"].unit == "hours"
        assert summary.breakdown["object_storage"].cost_paise == Decimal("0.5")
        assert summary.total_cost_paise == Decimal("1000.5")

    def test_records_outside_period_excluded(self, service, resources):
        service.track_vm_usage(ACCOUNT_ID, resources["running_vm"], START, END)

        summary = service.generate_usage_summary(
            ACCOUNT_ID, END + timedelta(hours=1), END + timedelta(hours=2)
        )

        assert summary.breakdown == {}
        assert summary.total_cost_paise == Decimal("0")

    def test_other_accounts_excluded(self, service, resources):
        service.track_vm_usage("acc-other", resources["running_vm"], START, END)
        summary = service.generate_usage_summary(ACCOUNT_ID, START, END)
        assert summary.total_cost_paise == Decimal("0")
