from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class HsnCodeCreate(BaseModel):
    service_type: str = Field(max_length=100)
    hsn_code: str = Field(max_length=20)
    sac_code: str = Field(max_length=20)
    description: str | None = None
    gst_rate: int = Field(default=18, ge=0, le=100)
    is_active: bool = True


class HsnCodeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    service_type: str
    hsn_code: str
    sac_code: str
    description: str | None = None
    gst_rate: int
    is_active: bool
    created_at: datetime | None = None
