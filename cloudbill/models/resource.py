"""Snapshots of provisioned resources, owned by the resource management APIs.

Only the columns that usage metering reads are mapped here.
"""

from sqlalchemy import BigInteger, Column, DateTime, Integer, String, func

from cloudbill.core.database import Base
from cloudbill.models.shared import UUIDType, generate_uuid


class VirtualMachine(Base):
    __tablename__ = "virtual_machines"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    account_id = Column(String(255), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    state = Column(String(50), nullable=False, default="Creating")
    service_offering_id = Column(String(255), nullable=True)
    template_id = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Volume(Base):
    __tablename__ = "volumes"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    account_id = Column(String(255), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    size_gb = Column(Integer, nullable=False, default=0)
    storage_type = Column(String(50), nullable=True)
    state = Column(String(50), nullable=False, default="Allocated")
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class ObjectStorageBucket(Base):
    __tablename__ = "object_storage_buckets"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    account_id = Column(String(255), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    size_bytes = Column(BigInteger, nullable=True, default=0)
    object_count = Column(Integer, nullable=False, default=0)
    region = Column(String(100), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class KubernetesCluster(Base):
    __tablename__ = "kubernetes_clusters"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    account_id = Column(String(255), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    status = Column(String(50), nullable=False, default="Creating")
    master_nodes = Column(Integer, nullable=False, default=1)
    worker_nodes = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class ManagedDatabase(Base):
    __tablename__ = "managed_databases"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    account_id = Column(String(255), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    engine = Column(String(50), nullable=False)
    status = Column(String(50), nullable=False, default="creating")
    storage_gb = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
