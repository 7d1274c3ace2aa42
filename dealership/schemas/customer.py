from typing import Optional

from pydantic import Field

from dealership.schemas.common import CamelModel


class CustomerCreate(CamelModel):
    name: str = Field(..., min_length=1)
    address: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None


class CustomerResponse(CamelModel):
    id: int
    name: str
    address: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    dealer_id: Optional[int] = None


class CustomerDebt(CamelModel):
    customer_id: int
    total_debt: float


class CustomerDebtSummary(CamelModel):
    customer_id: int
    name: str
    email: Optional[str] = None
    phone_number: Optional[str] = None
    total_debt: float
