"""Read-only listing of provisioned resources for usage metering."""

from sqlalchemy import select, union
from sqlalchemy.orm import Session

from cloudbill.models.resource import (
    KubernetesCluster,
    ManagedDatabase,
    ObjectStorageBucket,
    VirtualMachine,
    Volume,
)


class ResourceRepository:
    """Account-scoped resource listings."""

    def __init__(self, db: Session):
        self.db = db

    def get_virtual_machines(self, account_id: str) -> list[VirtualMachine]:
        return (
            self.db.query(VirtualMachine)
            .filter(VirtualMachine.account_id == account_id)
            .order_by(VirtualMachine.created_at.asc())
            .all()
        )

    def get_volumes(self, account_id: str) -> list[Volume]:
        return (
            self.db.query(Volume)
            .filter(Volume.account_id == account_id)
            .order_by(Volume.created_at.asc())
            .all()
        )

    def get_object_storage_buckets(self, account_id: str) -> list[ObjectStorageBucket]:
        return (
            self.db.query(ObjectStorageBucket)
            .filter(ObjectStorageBucket.account_id == account_id)
            .order_by(ObjectStorageBucket.created_at.asc())
            .all()
        )

    def get_kubernetes_clusters(self, account_id: str) -> list[KubernetesCluster]:
        return (
            self.db.query(KubernetesCluster)
            .filter(KubernetesCluster.account_id == account_id)
            .order_by(KubernetesCluster.created_at.asc())
            .all()
        )

    def get_databases(self, account_id: str) -> list[ManagedDatabase]:
        return (
            self.db.query(ManagedDatabase)
            .filter(ManagedDatabase.account_id == account_id)
            .order_by(ManagedDatabase.created_at.asc())
            .all()
        )

    def get_account_ids(self) -> list[str]:
        """Every account owning at least one resource of any kind."""
        stmt = union(
            select(VirtualMachine.account_id),
            select(Volume.account_id),
            select(ObjectStorageBucket.account_id),
            select(KubernetesCluster.account_id),
            select(ManagedDatabase.account_id),
        )
        return sorted(row[0] for row in self.db.execute(stmt).all())
