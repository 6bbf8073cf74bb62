from enum import Enum

from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, Integer, String, func

from cloudbill.core.database import Base
from cloudbill.models.shared import UUIDType, generate_uuid


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    ISSUED = "issued"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class TaxType(str, Enum):
    INTRA_STATE = "intra_state"
    INTER_STATE = "inter_state"


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    invoice_number = Column(String(50), unique=True, index=True, nullable=False)
    account_id = Column(String(255), nullable=False, index=True)
    billing_address_id = Column(
        UUIDType, ForeignKey("billing_addresses.id", ondelete="RESTRICT"), nullable=True
    )
    status = Column(String(20), nullable=False, default=InvoiceStatus.DRAFT.value, index=True)

    # Billing period
    billing_period_start = Column(DateTime(timezone=True), nullable=False)
    billing_period_end = Column(DateTime(timezone=True), nullable=False)

    # Amounts in integer paise
    subtotal_amount = Column(BigInteger, nullable=False, default=0)
    cgst_amount = Column(BigInteger, nullable=False, default=0)
    sgst_amount = Column(BigInteger, nullable=False, default=0)
    igst_amount = Column(BigInteger, nullable=False, default=0)
    discount_amount = Column(BigInteger, nullable=False, default=0)
    total_amount = Column(BigInteger, nullable=False, default=0)

    # GST details
    tax_type = Column(String(20), nullable=False)
    gst_rate = Column(Integer, nullable=False, default=18)
    hsn_code = Column(String(20), nullable=False)
    sac_code = Column(String(20), nullable=False)
    place_of_supply = Column(String(100), nullable=False)

    currency = Column(String(3), nullable=False, default="INR")

    # Dates
    due_date = Column(DateTime(timezone=True), nullable=False)
    issued_at = Column(DateTime(timezone=True), nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
