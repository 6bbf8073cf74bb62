from cloudbill.models.billing_address import BillingAddress
from cloudbill.models.hsn_code import HsnCode
from cloudbill.models.invoice import Invoice, InvoiceStatus, TaxType
from cloudbill.models.invoice_line_item import InvoiceLineItem
from cloudbill.models.resource import (
    KubernetesCluster,
    ManagedDatabase,
    ObjectStorageBucket,
    VirtualMachine,
    Volume,
)
from cloudbill.models.tax_calculation import TaxCalculation
from cloudbill.models.usage_record import MetricType, ResourceType, UsageRecord

__all__ = [
    "BillingAddress",
    "HsnCode",
    "Invoice",
    "InvoiceLineItem",
    "InvoiceStatus",
    "KubernetesCluster",
    "ManagedDatabase",
    "MetricType",
    "ObjectStorageBucket",
    "ResourceType",
    "TaxCalculation",
    "TaxType",
    "UsageRecord",
    "VirtualMachine",
    "Volume",
]
