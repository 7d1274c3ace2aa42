from typing import List, Optional

from pydantic import BaseModel

from dealership.schemas.common import CamelModel


class UserInfo(BaseModel):
    """Caller identity decoded from the bearer token."""
    id: int
    username: str
    roles: List[str]
    dealer_id: Optional[int] = None

    def has_role(self, role: str) -> bool:
        return role in self.roles


class LoginData(CamelModel):
    access_token: str
    token_type: str = "bearer"
    user_id: int
    username: str
    roles: List[str]
    dealer_id: Optional[int] = None
