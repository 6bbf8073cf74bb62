"""UsageRecord model - append-only ledger of metered resource consumption."""

from enum import Enum

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Index, String, func

from cloudbill.core.database import Base
from cloudbill.models.shared import PreciseDecimal, UUIDType, generate_uuid


class ResourceType(str, Enum):
    """Billable resource category."""

    COMPUTE = "compute"
    BLOCK_STORAGE = "block_storage"
    OBJECT_STORAGE = "object_storage"
    BANDWIDTH = "bandwidth"
    KUBERNETES = "kubernetes"
    DATABASE = "database"


class MetricType(str, Enum):
    RUNTIME = "runtime"
    STORAGE = "storage"
    DATA_TRANSFER = "data_transfer"


class UsageRecord(Base):
    """One metered consumption event.

    ``total_cost`` keeps sub-paise precision; it is only rounded when
    aggregated into an invoice line item. ``billed`` flips together with
    ``invoice_id`` exactly once.
    """

    __tablename__ = "usage_records"
    __table_args__ = (
        Index("ix_usage_records_account_billed", "account_id", "billed"),
    )

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    account_id = Column(String(255), nullable=False, index=True)
    resource_type = Column(String(50), nullable=False, index=True)
    resource_id = Column(String(255), nullable=False)
    resource_name = Column(String(255), nullable=False)
    metric_type = Column(String(50), nullable=False)

    quantity = Column(PreciseDecimal, nullable=False, default=0)
    unit = Column(String(50), nullable=False)
    unit_price = Column(PreciseDecimal, nullable=False, default=0)
    total_cost = Column(PreciseDecimal, nullable=False, default=0)

    period_start = Column(DateTime(timezone=True), nullable=False)
    period_end = Column(DateTime(timezone=True), nullable=False, index=True)

    invoice_id = Column(
        UUIDType, ForeignKey("invoices.id", ondelete="RESTRICT"), nullable=True, index=True
    )
    billed = Column(Boolean, nullable=False, default=False)

    usage_metadata = Column("metadata", JSON, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
