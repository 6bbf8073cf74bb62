"""InvoiceLineItem model - one aggregated charge row per resource category."""

from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, Numeric, String, func

from cloudbill.core.database import Base
from cloudbill.models.shared import UUIDType, generate_uuid


class InvoiceLineItem(Base):
    __tablename__ = "invoice_line_items"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    invoice_id = Column(
        UUIDType, ForeignKey("invoices.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    resource_type = Column(String(50), nullable=False)
    # First contributing resource only, not an exhaustive list
    resource_id = Column(String(255), nullable=True)
    resource_name = Column(String(255), nullable=True)
    description = Column(String(500), nullable=False)

    quantity = Column(Numeric(16, 2), nullable=False, default=0)
    unit = Column(String(50), nullable=False)
    unit_price = Column(BigInteger, nullable=False, default=0)
    amount = Column(BigInteger, nullable=False, default=0)

    usage_start = Column(DateTime(timezone=True), nullable=False)
    usage_end = Column(DateTime(timezone=True), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
