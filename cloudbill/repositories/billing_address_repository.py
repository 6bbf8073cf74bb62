from uuid import UUID

from sqlalchemy.orm import Session

from cloudbill.models.billing_address import BillingAddress
from cloudbill.schemas.billing_address import BillingAddressCreate


class BillingAddressRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, address_id: UUID) -> BillingAddress | None:
        return self.db.query(BillingAddress).filter(BillingAddress.id == address_id).first()

    def get_by_account(self, account_id: str) -> list[BillingAddress]:
        return (
            self.db.query(BillingAddress)
            .filter(BillingAddress.account_id == account_id)
            .order_by(BillingAddress.created_at.asc())
            .all()
        )

    def get_default(self, account_id: str) -> BillingAddress | None:
        return (
            self.db.query(BillingAddress)
            .filter(
                BillingAddress.account_id == account_id,
                BillingAddress.is_default.is_(True),
            )
            .first()
        )

    def create(self, data: BillingAddressCreate, commit: bool = True) -> BillingAddress:
        address = BillingAddress(**data.model_dump())
        self.db.add(address)
        if commit:
            self.db.commit()
            self.db.refresh(address)
        else:
            self.db.flush()
        return address
