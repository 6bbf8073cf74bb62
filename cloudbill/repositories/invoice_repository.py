from datetime import datetime
from uuid import UUID

from sqlalchemy import Integer, cast, func
from sqlalchemy.orm import Session

from cloudbill.core.config import settings
from cloudbill.models.invoice import Invoice, InvoiceStatus
from cloudbill.models.shared import as_utc, utc_now
from cloudbill.schemas.invoice import InvoiceCreate


class InvoiceRepository:
    def __init__(self, db: Session):
        self.db = db

    def next_invoice_number(self) -> str:
        """Allocate the next sequential invoice number (PREFIX-YYYYMMDD-NNNN)."""
        today = utc_now().strftime("%Y%m%d")
        prefix = f"{settings.INVOICE_NUMBER_PREFIX}-{today}-"

        # Compare sequence suffixes as integers so 10000 sorts after 9999
        highest = (
            self.db.query(
                func.max(cast(func.substr(Invoice.invoice_number, len(prefix) + 1), Integer))
            )
            .filter(Invoice.invoice_number.like(f"{prefix}%"))
            .scalar()
        )

        new_num = (highest or 0) + 1
        return f"{prefix}{new_num:04d}"

    def get_all(
        self,
        account_id: str | None = None,
        status: InvoiceStatus | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[Invoice]:
        query = self.db.query(Invoice)

        if account_id:
            query = query.filter(Invoice.account_id == account_id)
        if status:
            query = query.filter(Invoice.status == status.value)

        return query.order_by(Invoice.created_at.desc()).offset(skip).limit(limit).all()

    def count(self, account_id: str | None = None) -> int:
        query = self.db.query(Invoice)
        if account_id:
            query = query.filter(Invoice.account_id == account_id)
        return query.count()

    def get_by_id(self, invoice_id: UUID) -> Invoice | None:
        return self.db.query(Invoice).filter(Invoice.id == invoice_id).first()

    def get_by_invoice_number(self, invoice_number: str) -> Invoice | None:
        return self.db.query(Invoice).filter(Invoice.invoice_number == invoice_number).first()

    def get_past_due(self, now: datetime) -> list[Invoice]:
        """Get issued invoices whose due date has passed."""
        return (
            self.db.query(Invoice)
            .filter(
                Invoice.status == InvoiceStatus.ISSUED.value,
                Invoice.due_date < as_utc(now),
            )
            .order_by(Invoice.due_date.asc())
            .all()
        )

    def create(self, data: InvoiceCreate, commit: bool = True) -> Invoice:
        invoice = Invoice(
            invoice_number=data.invoice_number,
            account_id=data.account_id,
            billing_address_id=data.billing_address_id,
            status=data.status.value,
            billing_period_start=as_utc(data.billing_period_start),
            billing_period_end=as_utc(data.billing_period_end),
            subtotal_amount=data.subtotal_amount,
            cgst_amount=data.cgst_amount,
            sgst_amount=data.sgst_amount,
            igst_amount=data.igst_amount,
            discount_amount=data.discount_amount,
            total_amount=data.total_amount,
            tax_type=data.tax_type.value,
            gst_rate=data.gst_rate,
            hsn_code=data.hsn_code,
            sac_code=data.sac_code,
            place_of_supply=data.place_of_supply,
            currency=data.currency,
            due_date=as_utc(data.due_date),
        )
        self.db.add(invoice)
        if commit:
            self.db.commit()
            self.db.refresh(invoice)
        else:
            self.db.flush()
        return invoice

    def finalize(self, invoice_id: UUID) -> Invoice | None:
        """Issue a draft invoice (set status and issued_at)."""
        invoice = self.get_by_id(invoice_id)
        if not invoice:
            return None
        if invoice.status != InvoiceStatus.DRAFT.value:
            raise ValueError("Only draft invoices can be finalized")

        invoice.status = InvoiceStatus.ISSUED.value  # type: ignore[assignment]
        invoice.issued_at = utc_now()  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(invoice)
        return invoice

    def mark_paid(self, invoice_id: UUID) -> Invoice | None:
        """Mark an invoice as paid."""
        invoice = self.get_by_id(invoice_id)
        if not invoice:
            return None
        if invoice.status == InvoiceStatus.PAID.value:
            raise ValueError("Invoice is already paid")
        if invoice.status == InvoiceStatus.CANCELLED.value:
            raise ValueError("Cancelled invoices cannot be marked as paid")

        invoice.status = InvoiceStatus.PAID.value  # type: ignore[assignment]
        invoice.paid_at = utc_now()  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(invoice)
        return invoice

    def mark_overdue(self, invoice_id: UUID, now: datetime | None = None) -> Invoice | None:
        """Mark an unpaid invoice overdue once its due date has passed.

        Invoices that are not past due, or not in draft/issued status, are
        returned unchanged.
        """
        invoice = self.get_by_id(invoice_id)
        if not invoice:
            return None

        now = now or utc_now()
        if invoice.status not in (InvoiceStatus.DRAFT.value, InvoiceStatus.ISSUED.value):
            return invoice
        if as_utc(invoice.due_date) >= now:  # type: ignore[arg-type]
            return invoice

        invoice.status = InvoiceStatus.OVERDUE.value  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(invoice)
        return invoice

    def cancel(self, invoice_id: UUID) -> Invoice | None:
        """Cancel an unpaid invoice."""
        invoice = self.get_by_id(invoice_id)
        if not invoice:
            return None
        if invoice.status == InvoiceStatus.PAID.value:
            raise ValueError("Paid invoices cannot be cancelled")
        if invoice.status == InvoiceStatus.CANCELLED.value:
            return invoice

        invoice.status = InvoiceStatus.CANCELLED.value  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(invoice)
        return invoice
