from sqlalchemy import Boolean, Column, DateTime, String, func

from cloudbill.core.database import Base
from cloudbill.models.shared import UUIDType, generate_uuid


class BillingAddress(Base):
    __tablename__ = "billing_addresses"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    account_id = Column(String(255), nullable=False, index=True)
    address_line1 = Column(String(255), nullable=False)
    address_line2 = Column(String(255), nullable=True)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    state_code = Column(String(2), nullable=True)
    postal_code = Column(String(20), nullable=False)
    country = Column(String(100), nullable=False, default="India")
    gst_number = Column(String(15), nullable=True)
    is_default = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
