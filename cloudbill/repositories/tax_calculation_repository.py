"""TaxCalculation repository for data access."""

from uuid import UUID

from sqlalchemy.orm import Session

from cloudbill.models.tax_calculation import TaxCalculation
from cloudbill.schemas.tax_calculation import TaxCalculationCreate


class TaxCalculationRepository:
    """Repository for TaxCalculation audit rows. Rows are never updated."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_invoice_id(self, invoice_id: UUID) -> TaxCalculation | None:
        return (
            self.db.query(TaxCalculation)
            .filter(TaxCalculation.invoice_id == invoice_id)
            .first()
        )

    def create(self, data: TaxCalculationCreate, commit: bool = True) -> TaxCalculation:
        payload = data.model_dump()
        payload["tax_type"] = data.tax_type.value
        calculation = TaxCalculation(**payload)
        self.db.add(calculation)
        if commit:
            self.db.commit()
            self.db.refresh(calculation)
        else:
            self.db.flush()
        return calculation
