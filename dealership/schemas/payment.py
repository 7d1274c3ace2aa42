from typing import List, Optional

from pydantic import Field

from dealership.models.payment import InstallmentStatus
from dealership.schemas.common import CamelModel


class InstallmentPlanInput(CamelModel):
    interest_rate: float = Field(default=0.0, ge=0)
    term_month: int = 12
    monthly_pay: Optional[float] = None
    status: InstallmentStatus = InstallmentStatus.ACTIVE


class PaymentCreate(CamelModel):
    order_id: int
    method: str = Field(default="TT", min_length=1, max_length=16)
    plan: Optional[InstallmentPlanInput] = None


class InstallmentPlanResponse(CamelModel):
    id: int
    payment_id: int
    interest_rate: float
    term_month: int
    monthly_pay: float
    status: InstallmentStatus


class PaymentResponse(CamelModel):
    id: int
    order_id: int
    method: str
    amount: float
    payment_date: str
    installment_plan: Optional[InstallmentPlanResponse] = None


class InstallmentPlanUpdate(CamelModel):
    status: InstallmentStatus
    term_month: int = Field(..., gt=0)


class InstallmentCustomer(CamelModel):
    customer_id: int
    name: str
    address: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    outstanding_amount: float


class AppliedPromotionResponse(CamelModel):
    promo_id: int
    description: str
    percent: float
    total_after: float


class PaymentProcessed(PaymentResponse):
    applied_promotions: List[AppliedPromotionResponse] = []


class FullTransferCustomer(CamelModel):
    customer_id: int
    name: str
    email: Optional[str] = None
    phone_number: Optional[str] = None
    paid_amount: float
    payment_count: int
    last_payment_date: str
