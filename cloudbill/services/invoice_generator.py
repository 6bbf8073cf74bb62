"""Invoice generation from unbilled usage, with Indian GST applied."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from cloudbill.core.config import settings
from cloudbill.models.billing_address import BillingAddress
from cloudbill.models.invoice import Invoice, TaxType
from cloudbill.models.invoice_line_item import InvoiceLineItem
from cloudbill.models.shared import as_utc, utc_now
from cloudbill.models.tax_calculation import TaxCalculation
from cloudbill.models.usage_record import UsageRecord
from cloudbill.repositories.billing_address_repository import BillingAddressRepository
from cloudbill.repositories.hsn_code_repository import HsnCodeRepository
from cloudbill.repositories.invoice_line_item_repository import InvoiceLineItemRepository
from cloudbill.repositories.invoice_repository import InvoiceRepository
from cloudbill.repositories.tax_calculation_repository import TaxCalculationRepository
from cloudbill.repositories.usage_record_repository import UsageRecordRepository
from cloudbill.schemas.billing_address import BillingAddressCreate
from cloudbill.schemas.invoice import InvoiceCreate, InvoiceLineItemCreate
from cloudbill.schemas.tax_calculation import TaxCalculationCreate
from cloudbill.services import gst

logger = logging.getLogger(__name__)

NO_UNBILLED_USAGE_ERROR = "No unbilled usage records found for the period"

RESOURCE_DESCRIPTIONS: dict[str, str] = {
    "compute": "Virtual Machine Usage",
    "block_storage": "Block Storage Usage",
    "object_storage": "Object Storage Usage",
    "bandwidth": "Data Transfer",
    "kubernetes": "Kubernetes Cluster Usage",
    "database": "Managed Database Usage",
    "cdn": "CDN Usage",
    "dns": "DNS Services",
    "monitoring": "Monitoring Services",
    "backup": "Backup Services",
}

# Used when an account has no default billing address
PLACEHOLDER_ADDRESS = {
    "address_line1": "Address not provided",
    "city": "Mumbai",
    "state": "Maharashtra",
    "state_code": "27",
    "postal_code": "400001",
    "country": "India",
}


@dataclass
class InvoiceGenerationResult:
    """Result of an invoice generation attempt."""

    success: bool
    invoice: Invoice | None = None
    line_items: list[InvoiceLineItem] = field(default_factory=list)
    tax_calculation: TaxCalculation | None = None
    error: str | None = None


@dataclass
class UsageAggregate:
    """Usage of one resource category, kept at full precision."""

    resource_type: str
    unit: str
    quantity: Decimal = Decimal("0")
    cost: Decimal = Decimal("0")
    resource_ids: list[str] = field(default_factory=list)

    @property
    def description(self) -> str:
        return RESOURCE_DESCRIPTIONS.get(self.resource_type, f"{self.resource_type} Usage")

    @property
    def unit_price(self) -> Decimal:
        """Weighted average price per unit across all contributing records."""
        if self.quantity == 0:
            return Decimal("0")
        return self.cost / self.quantity


def group_usage_by_resource_type(records: Sequence[UsageRecord]) -> list[UsageAggregate]:
    """Group records by category, in order of first appearance."""
    grouped: dict[str, UsageAggregate] = {}
    for record in records:
        key = str(record.resource_type)
        if key not in grouped:
            grouped[key] = UsageAggregate(resource_type=key, unit=str(record.unit))
        aggregate = grouped[key]
        aggregate.quantity += Decimal(str(record.quantity))
        aggregate.cost += Decimal(str(record.total_cost))
        aggregate.resource_ids.append(str(record.resource_id))
    return list(grouped.values())


def allocate_amounts(costs: Sequence[Decimal], total: int) -> list[int]:
    """Split an integer total across fractional costs (largest remainder).

    Each share is the floor of its cost, plus one paise for the costs with the
    largest fractional parts until the shares add up to ``total``.
    """
    floors = [int(cost.to_integral_value(rounding=ROUND_FLOOR)) for cost in costs]
    remainder = total - sum(floors)
    by_fraction = sorted(
        range(len(costs)), key=lambda i: costs[i] - floors[i], reverse=True
    )
    for i in by_fraction[:remainder]:
        floors[i] += 1
    return floors


class InvoiceGenerationService:
    """Service for turning unbilled usage into GST invoices."""

    def __init__(self, db: Session):
        self.db = db
        self.usage_repo = UsageRecordRepository(db)
        self.invoice_repo = InvoiceRepository(db)
        self.line_item_repo = InvoiceLineItemRepository(db)
        self.tax_calculation_repo = TaxCalculationRepository(db)
        self.billing_address_repo = BillingAddressRepository(db)
        self.hsn_code_repo = HsnCodeRepository(db)

    def generate_invoice(
        self,
        account_id: str,
        period_start: datetime,
        period_end: datetime,
        due_date: datetime | None = None,
    ) -> InvoiceGenerationResult:
        """Generate a draft invoice for an account's unbilled usage in a period.

        All writes happen in one transaction: on any failure nothing is kept,
        including a placeholder billing address created along the way.

        Returns:
            A result with ``success=False`` and an error message when there is
            no usage to bill or anything fails.
        """
        period_start, period_end = as_utc(period_start), as_utc(period_end)
        try:
            records = self.usage_repo.get_unbilled(account_id, period_start, period_end)
            if not records:
                return InvoiceGenerationResult(success=False, error=NO_UNBILLED_USAGE_ERROR)

            address = self._resolve_billing_address(account_id)

            aggregates = group_usage_by_resource_type(records)
            subtotal = gst.round_half_up(sum((a.cost for a in aggregates), Decimal("0")))
            amounts = allocate_amounts([a.cost for a in aggregates], subtotal)

            hsn_code, sac_code = self._resolve_hsn_sac(aggregates[0].resource_type)
            tax = gst.calculate_gst(
                subtotal,
                settings.SELLER_STATE,
                str(address.state),
                sac_code,
                settings.DEFAULT_GST_RATE,
            )
            tax_type = TaxType.INTRA_STATE if tax.is_intra_state else TaxType.INTER_STATE

            invoice = self.invoice_repo.create(
                InvoiceCreate(
                    account_id=account_id,
                    invoice_number=self.invoice_repo.next_invoice_number(),
                    billing_address_id=address.id,  # type: ignore[arg-type]
                    billing_period_start=period_start,
                    billing_period_end=period_end,
                    subtotal_amount=subtotal,
                    cgst_amount=tax.cgst_amount,
                    sgst_amount=tax.sgst_amount,
                    igst_amount=tax.igst_amount,
                    discount_amount=0,
                    total_amount=tax.total_amount,
                    tax_type=tax_type,
                    gst_rate=settings.DEFAULT_GST_RATE,
                    hsn_code=hsn_code,
                    sac_code=sac_code,
                    place_of_supply=str(address.state),
                    due_date=due_date
                    or utc_now() + timedelta(days=settings.INVOICE_NET_PAYMENT_TERM_DAYS),
                ),
                commit=False,
            )
            invoice_id = UUID(str(invoice.id))

            line_items = [
                self.line_item_repo.create(
                    InvoiceLineItemCreate(
                        invoice_id=invoice_id,
                        resource_type=aggregate.resource_type,
                        resource_id=aggregate.resource_ids[0] if aggregate.resource_ids else None,
                        resource_name=aggregate.description,
                        description=aggregate.description,
                        quantity=aggregate.quantity.quantize(
                            Decimal("0.01"), rounding=ROUND_HALF_UP
                        ),
                        unit=aggregate.unit,
                        unit_price=gst.round_half_up(aggregate.unit_price),
                        amount=amount,
                        usage_start=period_start,
                        usage_end=period_end,
                    ),
                    commit=False,
                )
                for aggregate, amount in zip(aggregates, amounts, strict=True)
            ]

            tax_calculation = self.tax_calculation_repo.create(
                TaxCalculationCreate(
                    invoice_id=invoice_id,
                    account_id=account_id,
                    supplier_state=settings.SELLER_STATE,
                    supplier_state_code=settings.SELLER_STATE_CODE,
                    customer_state=str(address.state),
                    customer_state_code=(
                        address.state_code or gst.get_state_code(str(address.state))
                    ),
                    tax_type=tax_type,
                    taxable_amount=subtotal,
                    cgst_rate=tax.cgst_rate,
                    sgst_rate=tax.sgst_rate,
                    igst_rate=tax.igst_rate,
                    cgst_amount=tax.cgst_amount,
                    sgst_amount=tax.sgst_amount,
                    igst_amount=tax.igst_amount,
                    total_tax_amount=tax.total_tax,
                    gst_rate=settings.DEFAULT_GST_RATE,
                    hsn_sac_code=sac_code,
                ),
                commit=False,
            )

            self.usage_repo.mark_as_billed(
                [UUID(str(r.id)) for r in records], invoice_id, commit=False
            )

            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.exception("Invoice generation failed for account %s", account_id)
            return InvoiceGenerationResult(success=False, error=str(e))

        self.db.refresh(invoice)
        for item in line_items:
            self.db.refresh(item)
        self.db.refresh(tax_calculation)

        logger.info(
            "Generated invoice %s for account %s from %d usage records",
            invoice.invoice_number,
            account_id,
            len(records),
        )
        return InvoiceGenerationResult(
            success=True,
            invoice=invoice,
            line_items=line_items,
            tax_calculation=tax_calculation,
        )

    def _resolve_billing_address(self, account_id: str) -> BillingAddress:
        address = self.billing_address_repo.get_default(account_id)
        if address:
            return address

        logger.warning(
            "Account %s has no default billing address, creating a placeholder", account_id
        )
        return self.billing_address_repo.create(
            BillingAddressCreate(
                account_id=account_id,
                is_default=True,
                **PLACEHOLDER_ADDRESS,
            ),
            commit=False,
        )

    def _resolve_hsn_sac(self, service_type: str) -> tuple[str, str]:
        """HSN and SAC codes for a service type, or the cloud computing default."""
        entry = self.hsn_code_repo.get_active_for_service_type(service_type)
        if entry:
            return str(entry.hsn_code), str(entry.sac_code)
        return gst.DEFAULT_HSN_SAC_CODE, gst.DEFAULT_HSN_SAC_CODE

    def finalize_invoice(self, invoice_id: UUID) -> Invoice | None:
        """Issue a draft invoice.

        Raises:
            ValueError: If the invoice is not a draft.
        """
        invoice = self.invoice_repo.finalize(invoice_id)
        if invoice:
            logger.info("Issued invoice %s", invoice.invoice_number)
        return invoice

    def mark_invoice_as_paid(self, invoice_id: UUID) -> Invoice | None:
        """Raises ValueError for paid or cancelled invoices."""
        invoice = self.invoice_repo.mark_paid(invoice_id)
        if invoice:
            logger.info("Invoice %s marked as paid", invoice.invoice_number)
        return invoice

    def mark_invoice_as_overdue(self, invoice_id: UUID) -> Invoice | None:
        """Move an unpaid invoice past its due date to overdue.

        Paid, cancelled and not-yet-due invoices are returned unchanged.
        """
        return self.invoice_repo.mark_overdue(invoice_id)

    def cancel_invoice(self, invoice_id: UUID) -> Invoice | None:
        """Cancel an unpaid invoice. Its usage records stay billed."""
        invoice = self.invoice_repo.cancel(invoice_id)
        if invoice:
            logger.info("Invoice %s cancelled", invoice.invoice_number)
        return invoice

    def mark_past_due_invoices_overdue(self) -> int:
        """Move every issued invoice past its due date to overdue."""
        now = utc_now()
        count = 0
        for invoice in self.invoice_repo.get_past_due(now):
            self.invoice_repo.mark_overdue(UUID(str(invoice.id)), now=now)
            count += 1
        return count
