from cloudbill.schemas.billing_address import BillingAddressCreate, BillingAddressResponse
from cloudbill.schemas.gst import (
    GstCalculateRequest,
    GstCalculationResponse,
    GstinLookupResponse,
    GstItem,
    GstItemsRequest,
    GstSummaryResponse,
    HsnSacResponse,
    PanValidationResponse,
)
from cloudbill.schemas.hsn_code import HsnCodeCreate, HsnCodeResponse
from cloudbill.schemas.invoice import (
    InvoiceCreate,
    InvoiceGenerateRequest,
    InvoiceGenerationResponse,
    InvoiceLineItemCreate,
    InvoiceLineItemResponse,
    InvoiceResponse,
)
from cloudbill.schemas.tax_calculation import TaxCalculationCreate, TaxCalculationResponse
from cloudbill.schemas.usage import (
    TrackUsageRequest,
    UsageBreakdownItem,
    UsageRecordCreate,
    UsageRecordResponse,
    UsageSummary,
    UsageTrackingResponse,
)

__all__ = [
    "BillingAddressCreate",
    "BillingAddressResponse",
    "GstCalculateRequest",
    "GstCalculationResponse",
    "GstItem",
    "GstItemsRequest",
    "GstSummaryResponse",
    "GstinLookupResponse",
    "HsnCodeCreate",
    "HsnCodeResponse",
    "HsnSacResponse",
    "InvoiceCreate",
    "InvoiceGenerateRequest",
    "InvoiceGenerationResponse",
    "InvoiceLineItemCreate",
    "InvoiceLineItemResponse",
    "InvoiceResponse",
    "PanValidationResponse",
    "TaxCalculationCreate",
    "TaxCalculationResponse",
    "TrackUsageRequest",
    "UsageBreakdownItem",
    "UsageRecordCreate",
    "UsageRecordResponse",
    "UsageSummary",
    "UsageTrackingResponse",
]
