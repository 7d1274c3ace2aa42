from typing import List, Optional

from pydantic import Field

from dealership.core.permissions import RoleName
from dealership.schemas.common import CamelModel


class UserCreate(CamelModel):
    username: str = Field(..., min_length=3, max_length=64)
    password: str = Field(..., min_length=4)
    email: Optional[str] = None
    dealer_id: Optional[int] = None
    roles: List[RoleName] = Field(..., min_length=1)


class UserActiveUpdate(CamelModel):
    is_active: bool


class UserResponse(CamelModel):
    id: int
    username: str
    email: Optional[str] = None
    dealer_id: Optional[int] = None
    is_active: bool
    roles: List[str]


class DealerCreate(CamelModel):
    dealer_name: str = Field(..., min_length=1)
    address: Optional[str] = None
    phone_number: Optional[str] = None


class DealerResponse(CamelModel):
    id: int
    dealer_name: str
    address: Optional[str] = None
    phone_number: Optional[str] = None
