from cloudbill.repositories.billing_address_repository import BillingAddressRepository
from cloudbill.repositories.hsn_code_repository import HsnCodeRepository
from cloudbill.repositories.invoice_line_item_repository import InvoiceLineItemRepository
from cloudbill.repositories.invoice_repository import InvoiceRepository
from cloudbill.repositories.resource_repository import ResourceRepository
from cloudbill.repositories.tax_calculation_repository import TaxCalculationRepository
from cloudbill.repositories.usage_record_repository import UsageRecordRepository

__all__ = [
    "BillingAddressRepository",
    "HsnCodeRepository",
    "InvoiceLineItemRepository",
    "InvoiceRepository",
    "ResourceRepository",
    "TaxCalculationRepository",
    "UsageRecordRepository",
]
