"""UsageRecord repository for data access."""

from collections.abc import Sequence
from datetime import datetime
from uuid import UUID

from sqlalchemy.orm import Session

from cloudbill.models.shared import as_utc
from cloudbill.models.usage_record import ResourceType, UsageRecord
from cloudbill.schemas.usage import UsageRecordCreate


class UsageRecordRepository:
    """Repository for the append-only usage ledger."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(
        self,
        account_id: str | None = None,
        billed: bool | None = None,
        resource_type: ResourceType | None = None,
        invoice_id: UUID | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[UsageRecord]:
        query = self.db.query(UsageRecord)

        if account_id:
            query = query.filter(UsageRecord.account_id == account_id)
        if billed is not None:
            query = query.filter(UsageRecord.billed.is_(billed))
        if resource_type:
            query = query.filter(UsageRecord.resource_type == resource_type.value)
        if invoice_id:
            query = query.filter(UsageRecord.invoice_id == invoice_id)

        return query.order_by(UsageRecord.period_end.desc()).offset(skip).limit(limit).all()

    def get_by_id(self, record_id: UUID) -> UsageRecord | None:
        return self.db.query(UsageRecord).filter(UsageRecord.id == record_id).first()

    def get_for_period(
        self,
        account_id: str,
        start: datetime,
        end: datetime,
        billed: bool | None = None,
    ) -> list[UsageRecord]:
        """Get records whose sampling window closed within [start, end]."""
        query = self.db.query(UsageRecord).filter(
            UsageRecord.account_id == account_id,
            UsageRecord.period_end >= as_utc(start),
            UsageRecord.period_end <= as_utc(end),
        )
        if billed is not None:
            query = query.filter(UsageRecord.billed.is_(billed))
        return query.order_by(UsageRecord.period_end.asc(), UsageRecord.created_at.asc()).all()

    def get_unbilled(self, account_id: str, start: datetime, end: datetime) -> list[UsageRecord]:
        """Get records not yet attached to any invoice."""
        query = self.db.query(UsageRecord).filter(
            UsageRecord.account_id == account_id,
            UsageRecord.billed.is_(False),
            UsageRecord.invoice_id.is_(None),
            UsageRecord.period_end >= as_utc(start),
            UsageRecord.period_end <= as_utc(end),
        )
        return query.order_by(UsageRecord.period_end.asc(), UsageRecord.created_at.asc()).all()

    def get_account_ids_with_unbilled_usage(self, start: datetime, end: datetime) -> list[str]:
        rows = (
            self.db.query(UsageRecord.account_id)
            .filter(
                UsageRecord.billed.is_(False),
                UsageRecord.period_end >= as_utc(start),
                UsageRecord.period_end <= as_utc(end),
            )
            .distinct()
            .order_by(UsageRecord.account_id)
            .all()
        )
        return [row[0] for row in rows]

    def create(self, data: UsageRecordCreate, commit: bool = True) -> UsageRecord:
        record = UsageRecord(
            account_id=data.account_id,
            resource_type=data.resource_type.value,
            resource_id=data.resource_id,
            resource_name=data.resource_name,
            metric_type=data.metric_type.value,
            quantity=data.quantity,
            unit=data.unit,
            unit_price=data.unit_price,
            total_cost=data.total_cost,
            period_start=as_utc(data.period_start),
            period_end=as_utc(data.period_end),
            usage_metadata=data.usage_metadata,
            billed=False,
        )
        self.db.add(record)
        if commit:
            self.db.commit()
            self.db.refresh(record)
        else:
            self.db.flush()
        return record

    def mark_as_billed(
        self, record_ids: Sequence[UUID], invoice_id: UUID, commit: bool = True
    ) -> int:
        """Attach unbilled records to an invoice in one UPDATE.

        Raises ValueError if any record was already billed, which means another
        invoice consumed it since it was selected.
        """
        if not record_ids:
            return 0

        updated = (
            self.db.query(UsageRecord)
            .filter(
                UsageRecord.id.in_(list(record_ids)),
                UsageRecord.billed.is_(False),
            )
            .update(
                {UsageRecord.billed: True, UsageRecord.invoice_id: invoice_id},
                synchronize_session="fetch",
            )
        )
        if updated != len(record_ids):
            raise ValueError(
                f"Expected to bill {len(record_ids)} usage records but {updated} were unbilled"
            )

        if commit:
            self.db.commit()
        else:
            self.db.flush()
        return updated
