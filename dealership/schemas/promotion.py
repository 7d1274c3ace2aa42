from typing import List, Optional

from pydantic import Field, field_validator

from dealership.core.dates import parse_date
from dealership.schemas.common import CamelModel


class PromotionCreate(CamelModel):
    description: str = Field(..., min_length=1)
    start_date: str
    end_date: str
    discount_rate: str
    type: Optional[str] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def _check_date(cls, v: str) -> str:
        if parse_date(v) is None:
            raise ValueError("date must be YYYY-MM-DD")
        return parse_date(v).isoformat()


class PromotionResponse(CamelModel):
    id: int
    description: str
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    discount_rate: Optional[str] = None
    type: Optional[str] = None
    dealer_ids: List[int] = []


class DealerLink(CamelModel):
    dealer_id: int
