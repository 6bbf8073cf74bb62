"""Usage metering API endpoints."""

from dataclasses import asdict
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from cloudbill.core.database import get_db
from cloudbill.models.usage_record import ResourceType, UsageRecord
from cloudbill.repositories.usage_record_repository import UsageRecordRepository
from cloudbill.schemas.usage import (
    TrackUsageRequest,
    UsageRecordResponse,
    UsageSummary,
    UsageTrackingResponse,
)
from cloudbill.services.usage_tracker import UsageTrackingService

router = APIRouter()


@router.post(
    "/track",
    response_model=UsageTrackingResponse,
    summary="Track active resource usage",
    responses={422: {"description": "Validation error"}},
)
async def track_usage(
    data: TrackUsageRequest,
    db: Session = Depends(get_db),
) -> UsageTrackingResponse:
    """Sample the account's active resources over the last lookback window."""
    service = UsageTrackingService(db)
    report = service.track_all_active_resources(data.account_id)
    return UsageTrackingResponse(**asdict(report))


@router.get(
    "/",
    response_model=list[UsageRecordResponse],
    summary="List usage records",
)
async def list_usage_records(
    account_id: str | None = None,
    billed: bool | None = None,
    resource_type: ResourceType | None = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    db: Session = Depends(get_db),
) -> list[UsageRecord]:
    repo = UsageRecordRepository(db)
    return repo.get_all(
        account_id=account_id,
        billed=billed,
        resource_type=resource_type,
        skip=skip,
        limit=limit,
    )


@router.get(
    "/summary",
    response_model=UsageSummary,
    summary="Summarize usage cost by resource category",
    responses={400: {"description": "Invalid period"}},
)
async def get_usage_summary(
    account_id: str = Query(..., min_length=1),
    start: datetime = Query(...),
    end: datetime = Query(...),
    db: Session = Depends(get_db),
) -> UsageSummary:
    if end < start:
        raise HTTPException(status_code=400, detail="end must not be before start")
    service = UsageTrackingService(db)
    return service.generate_usage_summary(account_id, start, end)
