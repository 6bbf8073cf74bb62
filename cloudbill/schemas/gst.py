"""Request/response schemas for the GST calculator endpoints."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from cloudbill.services.gst import DEFAULT_GST_RATE, DEFAULT_HSN_SAC_CODE, GstTaxType


class GstCalculateRequest(BaseModel):
    taxable_amount: int = Field(ge=0, description="Taxable amount in paise")
    buyer_state: str = Field(min_length=1, max_length=100)
    seller_state: str | None = Field(
        default=None, max_length=100, description="Defaults to the registered seller state"
    )
    hsn_sac_code: str = Field(default=DEFAULT_HSN_SAC_CODE, max_length=20)
    tax_rate: Decimal = Field(default=DEFAULT_GST_RATE, ge=0, le=100)


class GstItem(BaseModel):
    amount: int = Field(ge=0)
    hsn_sac_code: str = Field(default=DEFAULT_HSN_SAC_CODE, max_length=20)
    tax_rate: Decimal | None = Field(default=None, ge=0, le=100)


class GstItemsRequest(BaseModel):
    items: list[GstItem] = Field(min_length=1)
    buyer_state: str = Field(min_length=1, max_length=100)
    seller_state: str | None = Field(default=None, max_length=100)


class GstCalculationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    taxable_amount: int
    cgst_rate: Decimal
    sgst_rate: Decimal
    igst_rate: Decimal
    cgst_amount: int
    sgst_amount: int
    igst_amount: int
    total_tax: int
    total_amount: int
    tax_type: GstTaxType
    seller_state: str
    buyer_state: str
    hsn_sac_code: str


class GstSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    items: list[GstCalculationResponse]
    total_taxable_amount: int
    total_cgst: int
    total_sgst: int
    total_igst: int
    total_tax: int
    grand_total: int


class GstinLookupResponse(BaseModel):
    gstin: str
    valid: bool
    state: str | None = None


class PanValidationResponse(BaseModel):
    pan: str
    valid: bool


class HsnSacResponse(BaseModel):
    service_category: str
    hsn_sac_code: str
