from typing import List, Optional

from pydantic import Field, field_validator

from dealership.schemas.common import CamelModel
from dealership.schemas.customer import CustomerResponse


class ScheduleCreate(CamelModel):
    customer_id: int
    serial_id: str = Field(..., min_length=1, max_length=16)
    date: str = Field(..., min_length=10, max_length=19)
    status: Optional[str] = None


class ScheduleStatusUpdate(CamelModel):
    status: str = Field(..., min_length=1, max_length=16)

    @field_validator("status", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v


class ScheduleResponse(CamelModel):
    id: int
    customer_id: int
    serial_id: str
    date: str
    status: str


class CustomerSchedules(CamelModel):
    customer: CustomerResponse
    schedules: List[ScheduleResponse] = []
