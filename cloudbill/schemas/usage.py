from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from cloudbill.models.usage_record import MetricType, ResourceType


class UsageRecordCreate(BaseModel):
    account_id: str = Field(max_length=255)
    resource_type: ResourceType
    resource_id: str = Field(max_length=255)
    resource_name: str = Field(max_length=255)
    metric_type: MetricType
    quantity: Decimal
    unit: str = Field(max_length=50)
    unit_price: Decimal
    total_cost: Decimal
    period_start: datetime
    period_end: datetime
    usage_metadata: dict[str, Any] = Field(default_factory=dict)


class UsageRecordResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    account_id: str
    resource_type: str
    resource_id: str
    resource_name: str
    metric_type: str
    quantity: Decimal
    unit: str
    unit_price: Decimal
    total_cost: Decimal
    period_start: datetime
    period_end: datetime
    invoice_id: UUID | None = None
    billed: bool
    usage_metadata: dict[str, Any]
    created_at: datetime | None = None


class UsageBreakdownItem(BaseModel):
    quantity: Decimal = Decimal("0")
    cost_paise: Decimal = Decimal("0")
    unit: str


class UsageSummary(BaseModel):
    """Usage cost per resource category. Costs keep fractional paise."""

    account_id: str
    start: datetime
    end: datetime
    total_cost_paise: Decimal
    breakdown: dict[str, UsageBreakdownItem]


class TrackUsageRequest(BaseModel):
    account_id: str = Field(min_length=1, max_length=255)


class UsageTrackingResponse(BaseModel):
    account_id: str
    period_start: datetime
    period_end: datetime
    records_created: int
    errors: list[str]
