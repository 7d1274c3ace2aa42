"""Login: username + password → bearer token."""
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.database import get_db
from dealership.core.logging_config import get_logger
from dealership.dao import users as users_dao
from dealership.schemas.auth import LoginData
from dealership.schemas.common import ApiResponse, ok
from dealership.services.auth_service import create_access_token, verify_password

router = APIRouter(prefix="/api", tags=["auth"])
logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"


@router.post("/login", response_model=ApiResponse[LoginData])
async def login(
    form: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
):
    username = (form.username or "").strip()
    if not username:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_CREDENTIALS)
    user = await users_dao.get_user_by_username(db, username)
    if not user or not user.is_active or not verify_password(form.password, user.password_hash):
        logger.warning("Failed login for %s", username)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_CREDENTIALS)
    token = create_access_token(
        user_id=user.id,
        username=user.username,
        roles=user.role_names,
        dealer_id=user.dealer_id,
    )
    return ok("Login successful", LoginData(
        access_token=token,
        user_id=user.id,
        username=user.username,
        roles=user.role_names,
        dealer_id=user.dealer_id,
    ))
