from uuid import UUID

from sqlalchemy.orm import Session

from cloudbill.models.invoice_line_item import InvoiceLineItem
from cloudbill.schemas.invoice import InvoiceLineItemCreate


class InvoiceLineItemRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_invoice_id(self, invoice_id: UUID) -> list[InvoiceLineItem]:
        return (
            self.db.query(InvoiceLineItem)
            .filter(InvoiceLineItem.invoice_id == invoice_id)
            .order_by(InvoiceLineItem.created_at.asc(), InvoiceLineItem.resource_type.asc())
            .all()
        )

    def create(self, data: InvoiceLineItemCreate, commit: bool = True) -> InvoiceLineItem:
        item = InvoiceLineItem(**data.model_dump())
        self.db.add(item)
        if commit:
            self.db.commit()
            self.db.refresh(item)
        else:
            self.db.flush()
        return item
