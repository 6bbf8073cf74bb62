"""TaxCalculation model - GST audit row written once per invoice."""

from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, Integer, Numeric, String, func

from cloudbill.core.database import Base
from cloudbill.models.shared import UUIDType, generate_uuid


class TaxCalculation(Base):
    """Jurisdiction inputs and GST outputs applied to one invoice."""

    __tablename__ = "tax_calculations"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    invoice_id = Column(
        UUIDType,
        ForeignKey("invoices.id", ondelete="RESTRICT"),
        nullable=False,
        unique=True,
        index=True,
    )
    account_id = Column(String(255), nullable=False, index=True)

    supplier_state = Column(String(100), nullable=False)
    supplier_state_code = Column(String(2), nullable=False)
    customer_state = Column(String(100), nullable=False)
    customer_state_code = Column(String(2), nullable=True)

    tax_type = Column(String(20), nullable=False)
    taxable_amount = Column(BigInteger, nullable=False, default=0)

    cgst_rate = Column(Numeric(5, 2), nullable=False, default=0)
    sgst_rate = Column(Numeric(5, 2), nullable=False, default=0)
    igst_rate = Column(Numeric(5, 2), nullable=False, default=0)
    cgst_amount = Column(BigInteger, nullable=False, default=0)
    sgst_amount = Column(BigInteger, nullable=False, default=0)
    igst_amount = Column(BigInteger, nullable=False, default=0)
    total_tax_amount = Column(BigInteger, nullable=False, default=0)

    gst_rate = Column(Integer, nullable=False, default=18)
    hsn_sac_code = Column(String(20), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
