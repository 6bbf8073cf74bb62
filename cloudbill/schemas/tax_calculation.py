"""TaxCalculation audit row schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from cloudbill.models.invoice import TaxType


class TaxCalculationCreate(BaseModel):
    invoice_id: UUID
    account_id: str = Field(max_length=255)
    supplier_state: str
    supplier_state_code: str = Field(max_length=2)
    customer_state: str
    customer_state_code: str | None = Field(default=None, max_length=2)
    tax_type: TaxType
    taxable_amount: int
    cgst_rate: Decimal = Decimal("0")
    sgst_rate: Decimal = Decimal("0")
    igst_rate: Decimal = Decimal("0")
    cgst_amount: int = 0
    sgst_amount: int = 0
    igst_amount: int = 0
    total_tax_amount: int
    gst_rate: int
    hsn_sac_code: str = Field(max_length=20)


class TaxCalculationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    invoice_id: UUID
    account_id: str
    supplier_state: str
    supplier_state_code: str
    customer_state: str
    customer_state_code: str | None
    tax_type: str
    taxable_amount: int
    cgst_rate: Decimal
    sgst_rate: Decimal
    igst_rate: Decimal
    cgst_amount: int
    sgst_amount: int
    igst_amount: int
    total_tax_amount: int
    gst_rate: int
    hsn_sac_code: str
    created_at: datetime | None = None
