"""Usage metering: turn active resources into cost-bearing usage records."""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any

from sqlalchemy.orm import Session

from cloudbill.core.config import settings
from cloudbill.models.resource import (
    KubernetesCluster,
    ManagedDatabase,
    ObjectStorageBucket,
    VirtualMachine,
    Volume,
)
from cloudbill.models.shared import utc_now
from cloudbill.models.usage_record import MetricType, ResourceType, UsageRecord
from cloudbill.repositories.resource_repository import ResourceRepository
from cloudbill.repositories.usage_record_repository import UsageRecordRepository
from cloudbill.schemas.usage import UsageBreakdownItem, UsageRecordCreate, UsageSummary

logger = logging.getLogger(__name__)

# Rates in paise per unit
VM_RATE_PER_HOUR = Decimal("500")
STORAGE_RATE_PER_GB_HOUR = Decimal("1")
OBJECT_STORAGE_RATE_PER_GB_HOUR = Decimal("1")
BANDWIDTH_RATE_PER_GB = Decimal("1200")
K8S_RATE_PER_NODE_HOUR = Decimal("1000")
DATABASE_COMPUTE_RATE_PER_HOUR = Decimal("500")
DATABASE_STORAGE_RATE_PER_GB_HOUR = Decimal("1")

DEFAULT_DATABASE_STORAGE_GB = 10
BYTES_PER_GB = Decimal(1024**3)

_MICROSECONDS_PER_HOUR = Decimal(3600 * 1_000_000)


@dataclass
class UsageTrackingReport:
    """Outcome of one sampling pass for an account."""

    account_id: str
    period_start: datetime
    period_end: datetime
    records_created: int = 0
    errors: list[str] = field(default_factory=list)


def calculate_hours(start: datetime, end: datetime) -> Decimal:
    """Elapsed hours between two instants, exact to the microsecond."""
    return Decimal((end - start) // timedelta(microseconds=1)) / _MICROSECONDS_PER_HOUR


def _is_state(value: Any, expected: str) -> bool:
    return isinstance(value, str) and value.strip().lower() == expected


class UsageTrackingService:
    """Service for sampling provisioned resources into the usage ledger.

    Costs keep fractional paise: ``total_cost = quantity * unit_price`` with no
    rounding. Rounding happens once, when usage is aggregated into an invoice.
    """

    def __init__(self, db: Session):
        self.db = db
        self.usage_repo = UsageRecordRepository(db)
        self.resource_repo = ResourceRepository(db)

    def _create_record(self, data: UsageRecordCreate) -> UsageRecord:
        return self.usage_repo.create(data)

    def track_vm_usage(
        self,
        account_id: str,
        vm: VirtualMachine,
        period_start: datetime,
        period_end: datetime,
    ) -> UsageRecord:
        hours = calculate_hours(period_start, period_end)
        return self._create_record(
            UsageRecordCreate(
                account_id=account_id,
                resource_type=ResourceType.COMPUTE,
                resource_id=str(vm.id),
                resource_name=str(vm.name),
                metric_type=MetricType.RUNTIME,
                quantity=hours,
                unit="hours",
                unit_price=VM_RATE_PER_HOUR,
                total_cost=hours * VM_RATE_PER_HOUR,
                period_start=period_start,
                period_end=period_end,
                usage_metadata={
                    "vm_id": str(vm.id),
                    "service_offering_id": vm.service_offering_id,
                    "template_id": vm.template_id,
                    "state": vm.state,
                },
            )
        )

    def track_storage_usage(
        self,
        account_id: str,
        volume: Volume,
        period_start: datetime,
        period_end: datetime,
    ) -> UsageRecord:
        """Bill an allocated volume by GB-hours, attached or not."""
        hours = calculate_hours(period_start, period_end)
        gb_hours = Decimal(volume.size_gb or 0) * hours
        return self._create_record(
            UsageRecordCreate(
                account_id=account_id,
                resource_type=ResourceType.BLOCK_STORAGE,
                resource_id=str(volume.id),
                resource_name=str(volume.name),
                metric_type=MetricType.STORAGE,
                quantity=gb_hours,
                unit="GB-hours",
                unit_price=STORAGE_RATE_PER_GB_HOUR,
                total_cost=gb_hours * STORAGE_RATE_PER_GB_HOUR,
                period_start=period_start,
                period_end=period_end,
                usage_metadata={
                    "volume_id": str(volume.id),
                    "size_gb": volume.size_gb,
                    "storage_type": volume.storage_type,
                    "state": volume.state,
                },
            )
        )

    def track_object_storage_usage(
        self,
        account_id: str,
        bucket: ObjectStorageBucket,
        period_start: datetime,
        period_end: datetime,
    ) -> UsageRecord:
        hours = calculate_hours(period_start, period_end)
        size_gb = Decimal(bucket.size_bytes or 0) / BYTES_PER_GB
        gb_hours = size_gb * hours
        return self._create_record(
            UsageRecordCreate(
                account_id=account_id,
                resource_type=ResourceType.OBJECT_STORAGE,
                resource_id=str(bucket.id),
                resource_name=str(bucket.name),
                metric_type=MetricType.STORAGE,
                quantity=gb_hours,
                unit="GB-hours",
                unit_price=OBJECT_STORAGE_RATE_PER_GB_HOUR,
                total_cost=gb_hours * OBJECT_STORAGE_RATE_PER_GB_HOUR,
                period_start=period_start,
                period_end=period_end,
                usage_metadata={
                    "bucket_id": str(bucket.id),
                    "size_gb": str(size_gb),
                    "object_count": bucket.object_count,
                    "region": bucket.region,
                },
            )
        )

    def track_bandwidth_usage(
        self,
        account_id: str,
        resource: Any,
        bandwidth_gb: Decimal | int | str,
        period_start: datetime,
        period_end: datetime,
    ) -> UsageRecord:
        """Bill data transfer attributed to ``resource`` (anything with id and name)."""
        quantity = Decimal(str(bandwidth_gb))
        return self._create_record(
            UsageRecordCreate(
                account_id=account_id,
                resource_type=ResourceType.BANDWIDTH,
                resource_id=str(resource.id),
                resource_name=str(resource.name),
                metric_type=MetricType.DATA_TRANSFER,
                quantity=quantity,
                unit="GB",
                unit_price=BANDWIDTH_RATE_PER_GB,
                total_cost=quantity * BANDWIDTH_RATE_PER_GB,
                period_start=period_start,
                period_end=period_end,
                usage_metadata={"bandwidth_gb": str(quantity)},
            )
        )

    def track_kubernetes_usage(
        self,
        account_id: str,
        cluster: KubernetesCluster,
        period_start: datetime,
        period_end: datetime,
    ) -> UsageRecord:
        """Bill every master and worker node of the cluster by node-hours."""
        hours = calculate_hours(period_start, period_end)
        node_count = int(cluster.master_nodes or 0) + int(cluster.worker_nodes or 0)
        node_hours = Decimal(node_count) * hours
        return self._create_record(
            UsageRecordCreate(
                account_id=account_id,
                resource_type=ResourceType.KUBERNETES,
                resource_id=str(cluster.id),
                resource_name=str(cluster.name),
                metric_type=MetricType.RUNTIME,
                quantity=node_hours,
                unit="node-hours",
                unit_price=K8S_RATE_PER_NODE_HOUR,
                total_cost=node_hours * K8S_RATE_PER_NODE_HOUR,
                period_start=period_start,
                period_end=period_end,
                usage_metadata={
                    "cluster_id": str(cluster.id),
                    "master_nodes": cluster.master_nodes,
                    "worker_nodes": cluster.worker_nodes,
                },
            )
        )

    def track_database_usage(
        self,
        account_id: str,
        database: ManagedDatabase,
        period_start: datetime,
        period_end: datetime,
    ) -> UsageRecord:
        """Bill compute hours plus storage GB-hours as a single hourly charge."""
        hours = calculate_hours(period_start, period_end)
        storage_gb = Decimal(database.storage_gb or DEFAULT_DATABASE_STORAGE_GB)

        compute_cost = hours * DATABASE_COMPUTE_RATE_PER_HOUR
        storage_cost = storage_gb * hours * DATABASE_STORAGE_RATE_PER_GB_HOUR
        total_cost = compute_cost + storage_cost
        unit_price = total_cost / hours if hours > 0 else Decimal("0")

        return self._create_record(
            UsageRecordCreate(
                account_id=account_id,
                resource_type=ResourceType.DATABASE,
                resource_id=str(database.id),
                resource_name=str(database.name),
                metric_type=MetricType.RUNTIME,
                quantity=hours,
                unit="hours",
                unit_price=unit_price,
                total_cost=total_cost,
                period_start=period_start,
                period_end=period_end,
                usage_metadata={
                    "database_id": str(database.id),
                    "engine": database.engine,
                    "storage_gb": str(storage_gb),
                    "compute_hours": str(hours),
                },
            )
        )

    def track_all_active_resources(self, account_id: str) -> UsageTrackingReport:
        """Sample every active resource of the account over the lookback window.

        Callers must not run this more than once per account per window; the
        ledger does not deduplicate.
        """
        period_end = utc_now()
        period_start = period_end - timedelta(hours=settings.USAGE_LOOKBACK_HOURS)
        report = UsageTrackingReport(
            account_id=account_id,
            period_start=period_start,
            period_end=period_end,
        )

        categories: list[
            tuple[str, Callable[[str], Iterable[Any]], Callable[..., UsageRecord]]
        ] = [
            (
                "compute",
                lambda acc: [
                    vm
                    for vm in self.resource_repo.get_virtual_machines(acc)
                    if _is_state(vm.state, "running")
                ],
                self.track_vm_usage,
            ),
            ("block_storage", self.resource_repo.get_volumes, self.track_storage_usage),
            (
                "object_storage",
                self.resource_repo.get_object_storage_buckets,
                self.track_object_storage_usage,
            ),
            (
                "kubernetes",
                lambda acc: [
                    cluster
                    for cluster in self.resource_repo.get_kubernetes_clusters(acc)
                    if _is_state(cluster.status, "active")
                ],
                self.track_kubernetes_usage,
            ),
            (
                "database",
                lambda acc: [
                    database
                    for database in self.resource_repo.get_databases(acc)
                    if _is_state(database.status, "active")
                ],
                self.track_database_usage,
            ),
        ]

        for category, list_active, track in categories:
            try:
                resources = list(list_active(account_id))
            except Exception as exc:
                logger.exception("Failed to list %s resources for %s", category, account_id)
                self.db.rollback()
                report.errors.append(f"{category}: {exc}")
                continue

            for resource in resources:
                try:
                    track(account_id, resource, period_start, period_end)
                    report.records_created += 1
                except Exception as exc:
                    logger.exception(
                        "Failed to record %s usage for resource %s", category, resource.id
                    )
                    self.db.rollback()
                    report.errors.append(f"{category}/{resource.id}: {exc}")

        logger.info(
            "Tracked %d usage records for account %s (%d errors)",
            report.records_created,
            account_id,
            len(report.errors),
        )
        return report

    def generate_usage_summary(
        self, account_id: str, start: datetime, end: datetime
    ) -> UsageSummary:
        """Sum quantity and cost per resource category, billed or not."""
        records = self.usage_repo.get_for_period(account_id, start, end)

        breakdown: dict[str, UsageBreakdownItem] = {}
        total_cost = Decimal("0")
        for record in records:
            key = str(record.resource_type)
            if key not in breakdown:
                breakdown[key] = UsageBreakdownItem(unit=str(record.unit))
            item = breakdown[key]
            item.quantity += Decimal(str(record.quantity))
            item.cost_paise += Decimal(str(record.total_cost))
            total_cost += Decimal(str(record.total_cost))

        return UsageSummary(
            account_id=account_id,
            start=start,
            end=end,
            total_cost_paise=total_cost,
            breakdown=breakdown,
        )
