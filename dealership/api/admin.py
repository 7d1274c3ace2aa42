from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.database import get_db
from dealership.core.logging_config import get_logger
from dealership.dao import users as users_dao
from dealership.models import Dealer, UserAccount
from dealership.schemas.common import ApiResponse, ok
from dealership.schemas.user import (
    DealerCreate,
    DealerResponse,
    UserActiveUpdate,
    UserCreate,
    UserResponse,
)
from dealership.services.auth_service import hash_password

router = APIRouter(prefix="/api/admin", tags=["admin"])
logger = get_logger(__name__)


def _user_response(user: UserAccount) -> UserResponse:
    return UserResponse(
        id=user.id,
        username=user.username,
        email=user.email,
        dealer_id=user.dealer_id,
        is_active=user.is_active,
        roles=user.role_names,
    )


@router.post("/dealers", response_model=ApiResponse[DealerResponse])
async def create_dealer(data: DealerCreate, db: AsyncSession = Depends(get_db)):
    dealer = Dealer(**data.model_dump())
    db.add(dealer)
    await db.flush()
    return ok("Dealer created", DealerResponse.model_validate(dealer))


@router.get("/dealers", response_model=ApiResponse[List[DealerResponse]])
async def list_dealers(db: AsyncSession = Depends(get_db)):
    return ok("Dealers retrieved", [DealerResponse.model_validate(d) for d in await users_dao.list_dealers(db)])


@router.post("/users", response_model=ApiResponse[UserResponse])
async def create_user(data: UserCreate, db: AsyncSession = Depends(get_db)):
    if await users_dao.get_user_by_username(db, data.username):
        raise HTTPException(status_code=400, detail="Username already taken")
    if data.dealer_id is not None and await users_dao.get_dealer(db, data.dealer_id) is None:
        raise HTTPException(status_code=404, detail=f"Dealer not found: {data.dealer_id}")
    user = UserAccount(
        username=data.username.strip(),
        password_hash=hash_password(data.password),
        email=data.email,
        dealer_id=data.dealer_id,
        is_active=True,
        roles=await users_dao.get_roles(db, data.roles),
    )
    db.add(user)
    await db.flush()
    logger.info("User %s created with roles %s", user.username, user.role_names)
    return ok("User created", _user_response(user))


@router.get("/users", response_model=ApiResponse[List[UserResponse]])
async def list_users(
    dealer_id: Optional[int] = Query(None, alias="dealerId"),
    db: AsyncSession = Depends(get_db),
):
    return ok("Users retrieved", [_user_response(u) for u in await users_dao.list_users(db, dealer_id)])


@router.patch("/users/{user_id}", response_model=ApiResponse[UserResponse])
async def set_user_active(user_id: int, data: UserActiveUpdate, db: AsyncSession = Depends(get_db)):
    user = await users_dao.get_user(db, user_id)
    if user is None:
        raise HTTPException(status_code=404, detail=f"User not found: {user_id}")
    user.is_active = data.is_active
    await db.flush()
    return ok("User updated", _user_response(user))
