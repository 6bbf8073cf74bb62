from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class BillingAddressCreate(BaseModel):
    account_id: str = Field(max_length=255)
    address_line1: str = Field(max_length=255)
    address_line2: str | None = Field(default=None, max_length=255)
    city: str = Field(max_length=100)
    state: str = Field(max_length=100)
    state_code: str | None = Field(default=None, max_length=2)
    postal_code: str = Field(max_length=20)
    country: str = Field(default="India", max_length=100)
    gst_number: str | None = Field(default=None, max_length=15)
    is_default: bool = False


class BillingAddressResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    account_id: str
    address_line1: str
    address_line2: str | None
    city: str
    state: str
    state_code: str | None
    postal_code: str
    country: str
    gst_number: str | None
    is_default: bool
