"""HsnCode model - externally managed service category to HSN/SAC mapping."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, func

from cloudbill.core.database import Base
from cloudbill.models.shared import UUIDType, generate_uuid


class HsnCode(Base):
    __tablename__ = "hsn_codes"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    service_type = Column(String(100), nullable=False, index=True)
    hsn_code = Column(String(20), nullable=False)
    sac_code = Column(String(20), nullable=False)
    description = Column(Text, nullable=True)
    gst_rate = Column(Integer, nullable=False, default=18)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
