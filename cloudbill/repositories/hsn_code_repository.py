"""HsnCode repository for data access."""

from sqlalchemy import func
from sqlalchemy.orm import Session

from cloudbill.models.hsn_code import HsnCode
from cloudbill.schemas.hsn_code import HsnCodeCreate


class HsnCodeRepository:
    """Repository for the HSN/SAC reference table."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self, active_only: bool = False) -> list[HsnCode]:
        query = self.db.query(HsnCode)
        if active_only:
            query = query.filter(HsnCode.is_active.is_(True))
        return query.order_by(HsnCode.service_type.asc()).all()

    def get_active_for_service_type(self, service_type: str) -> HsnCode | None:
        """Case-insensitive match on the service type among active entries."""
        return (
            self.db.query(HsnCode)
            .filter(
                func.lower(HsnCode.service_type) == service_type.strip().lower(),
                HsnCode.is_active.is_(True),
            )
            .order_by(HsnCode.created_at.asc())
            .first()
        )

    def create(self, data: HsnCodeCreate) -> HsnCode:
        hsn_code = HsnCode(**data.model_dump())
        self.db.add(hsn_code)
        self.db.commit()
        self.db.refresh(hsn_code)
        return hsn_code
