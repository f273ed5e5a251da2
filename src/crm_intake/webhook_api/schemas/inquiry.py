"""Pydantic models for webhook payloads and responses."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DATE_PATTERN = r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$"


class InquiryPayload(BaseModel):
    """Product inquiry form submission."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=30)
    product: Optional[str] = Field(default=None, max_length=200)
    utm_campaign: Optional[str] = Field(default=None, max_length=500)
    source_url: Optional[str] = Field(default=None, max_length=2000)
    date: Optional[str] = Field(default=None, pattern=DATE_PATTERN)
    birthday: Optional[str] = Field(default=None, max_length=20)
    sex: Optional[str] = Field(default=None, max_length=10)
    request: Optional[str] = Field(default=None, max_length=5000)


class RecruitPayload(BaseModel):
    """Recruiting form submission."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=30)
    age: Optional[str] = Field(default=None, max_length=20)
    area: Optional[str] = Field(default=None, max_length=100)
    career: Optional[str] = Field(default=None, max_length=5000)
    request: Optional[str] = Field(default=None, max_length=5000)
    referer_page: Optional[str] = Field(default=None, max_length=2000)
    utm_campaign: Optional[str] = Field(default=None, max_length=500)
    source_url: Optional[str] = Field(default=None, max_length=2000)
    date: Optional[str] = Field(default=None, pattern=DATE_PATTERN)


class WebhookResponse(BaseModel):
    success: bool
    message: str
    id: Optional[int] = None
    duplicate: Optional[bool] = None


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    details: Optional[dict] = None


class InquiryUpdateRequest(BaseModel):
    """Partial update from the inquiry desk. Keys are camelCase on the wire."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    status: Optional[str] = None
    manager_id: Optional[str] = Field(default=None, alias="managerId")
    memo: Optional[str] = None
    email: Optional[str] = None
    admin_comment: Optional[str] = Field(default=None, alias="adminComment")


class InquiryCreateRequest(BaseModel):
    """Inquiry entered by hand on the desk, e.g. taken over the phone."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    customer_name: str = Field(alias="customerName", max_length=100)
    phone: str = Field(max_length=30)
    product_name: Optional[str] = Field(default=None, alias="productName", max_length=200)
    status: Optional[str] = None
    manager_id: Optional[str] = Field(default=None, alias="managerId")
    memo: Optional[str] = None
