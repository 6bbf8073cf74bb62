from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from cloudbill.models.invoice import InvoiceStatus, TaxType
from cloudbill.models.shared import as_utc
from cloudbill.schemas.tax_calculation import TaxCalculationResponse


class InvoiceCreate(BaseModel):
    """Fully computed invoice header. Amounts are integer paise."""

    account_id: str = Field(max_length=255)
    invoice_number: str = Field(max_length=50)
    billing_address_id: UUID | None = None
    billing_period_start: datetime
    billing_period_end: datetime
    subtotal_amount: int = Field(ge=0)
    cgst_amount: int = Field(default=0, ge=0)
    sgst_amount: int = Field(default=0, ge=0)
    igst_amount: int = Field(default=0, ge=0)
    discount_amount: int = Field(default=0, ge=0)
    total_amount: int
    tax_type: TaxType
    gst_rate: int = 18
    hsn_code: str = Field(max_length=20)
    sac_code: str = Field(max_length=20)
    place_of_supply: str = Field(max_length=100)
    status: InvoiceStatus = InvoiceStatus.DRAFT
    currency: str = Field(default="INR", min_length=3, max_length=3)
    due_date: datetime

    @model_validator(mode="after")
    def check_amounts(self) -> "InvoiceCreate":
        expected = (
            self.subtotal_amount
            + self.cgst_amount
            + self.sgst_amount
            + self.igst_amount
            - self.discount_amount
        )
        if self.total_amount != expected:
            raise ValueError(
                f"total_amount {self.total_amount} does not match computed total {expected}"
            )
        if self.igst_amount and (self.cgst_amount or self.sgst_amount):
            raise ValueError("IGST cannot be combined with CGST/SGST")
        return self


class InvoiceLineItemCreate(BaseModel):
    invoice_id: UUID
    resource_type: str = Field(max_length=50)
    resource_id: str | None = None
    resource_name: str | None = None
    description: str = Field(max_length=500)
    quantity: Decimal
    unit: str = Field(max_length=50)
    unit_price: int
    amount: int
    usage_start: datetime
    usage_end: datetime


class InvoiceLineItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    invoice_id: UUID
    resource_type: str
    resource_id: str | None
    resource_name: str | None
    description: str
    quantity: Decimal
    unit: str
    unit_price: int
    amount: int
    usage_start: datetime
    usage_end: datetime


class InvoiceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    invoice_number: str
    account_id: str
    billing_address_id: UUID | None
    status: str
    billing_period_start: datetime
    billing_period_end: datetime
    subtotal_amount: int
    cgst_amount: int
    sgst_amount: int
    igst_amount: int
    discount_amount: int
    total_amount: int
    tax_type: str
    gst_rate: int
    hsn_code: str
    sac_code: str
    place_of_supply: str
    currency: str
    due_date: datetime
    issued_at: datetime | None
    paid_at: datetime | None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class InvoiceGenerateRequest(BaseModel):
    account_id: str = Field(min_length=1, max_length=255)
    period_start: datetime
    period_end: datetime
    due_date: datetime | None = None

    @field_validator("period_start", "period_end", "due_date")
    @classmethod
    def normalize_to_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value) if value is not None else None

    @model_validator(mode="after")
    def check_period(self) -> "InvoiceGenerateRequest":
        if self.period_end < self.period_start:
            raise ValueError("period_end must not be before period_start")
        return self


class InvoiceGenerationResponse(BaseModel):
    success: bool
    invoice: InvoiceResponse
    line_items: list[InvoiceLineItemResponse]
    tax_calculation: TaxCalculationResponse
