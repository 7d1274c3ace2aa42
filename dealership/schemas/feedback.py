from typing import List, Optional

from pydantic import Field, field_validator

from dealership.schemas.common import CamelModel
from dealership.schemas.customer import CustomerResponse


class FeedbackCreate(CamelModel):
    customer_id: int
    order_id: Optional[int] = None
    type: Optional[str] = Field(default=None, max_length=64)
    content: str = Field(..., min_length=1)
    status: Optional[str] = None

    @field_validator("content", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v


class FeedbackResponse(CamelModel):
    id: int
    customer_id: int
    order_id: Optional[int] = None
    type: Optional[str] = None
    content: str
    status: str
    created_at: str


class CustomerFeedback(CamelModel):
    customer: CustomerResponse
    feedback: List[FeedbackResponse] = []
