from typing import Optional

from pydantic import Field, field_validator

from dealership.schemas.common import CamelModel


class OrderCreate(CamelModel):
    customer_id: int = Field(..., ge=0)
    model_id: int
    quantity: int = Field(..., gt=0)
    variant_id: Optional[int] = None
    unit_price: Optional[float] = Field(default=None, ge=0)
    status: Optional[str] = None
    is_custom: bool = False

    @field_validator("status", mode="before")
    @classmethod
    def _blank_status(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v


class OrderCreated(CamelModel):
    order_id: int
    dealer_staff_id: int
    variant_id: Optional[int] = None
    unit_price: float
    is_custom: bool


class OrderStatusUpdate(CamelModel):
    status: str = Field(..., min_length=1, max_length=32)

    @field_validator("status", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v


class ApprovalRequest(CamelModel):
    is_agree: bool
    unit_price: Optional[float] = None
    version_name: Optional[str] = None
    color: Optional[str] = None


class OrderDetailResponse(CamelModel):
    id: int
    order_id: int
    serial_id: Optional[str] = None
    quantity: Optional[str] = None
    unit_price: Optional[float] = None


class OrderResponse(CamelModel):
    id: int
    customer_id: int
    dealer_staff_id: int
    model_id: int
    order_date: str
    status: str
    is_custom: bool
    detail: Optional[OrderDetailResponse] = None


class ConfirmationResponse(CamelModel):
    id: int
    order_detail_id: int
    agreement: str
    date_time: str
    staff_admin_id: Optional[int] = None
