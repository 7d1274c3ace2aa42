"""
Bearer-token check in front of every /api route.
Public prefixes pass through, everything else needs a valid token whose roles
match the prefix table in core.permissions.
"""
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from dealership.core.logging_config import get_logger
from dealership.core.permissions import has_required_role, is_protected_path, is_public_path
from dealership.schemas.auth import UserInfo
from dealership.schemas.common import error_body
from dealership.services.auth_service import (
    CLAIM_DEALER_ID,
    CLAIM_ROLES,
    CLAIM_USER_ID,
    decode_token,
)

logger = get_logger(__name__)


def _reject(status_code: int, message: str) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=status_code, content=error_body(message), headers=headers)


def install_auth_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def auth_filter(request: Request, call_next):
        path = request.url.path
        if request.method == "OPTIONS" or not is_protected_path(path) or is_public_path(path):
            return await call_next(request)

        header = request.headers.get("authorization", "")
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return _reject(status.HTTP_401_UNAUTHORIZED, "Missing or invalid Authorization header")

        payload = decode_token(token.strip())
        if payload is None:
            logger.warning("%s: token rejected (invalid or expired)", path)
            return _reject(status.HTTP_401_UNAUTHORIZED, "Invalid or expired token")

        roles = payload.get(CLAIM_ROLES) or []
        if not has_required_role(path, roles):
            logger.warning("%s: access denied for %s with roles %s", path, payload.get("sub"), roles)
            return _reject(status.HTTP_403_FORBIDDEN, "Access denied")

        request.state.user = UserInfo(
            id=payload[CLAIM_USER_ID],
            username=payload.get("sub", ""),
            roles=roles,
            dealer_id=payload.get(CLAIM_DEALER_ID),
        )
        return await call_next(request)


def get_current_user(request: Request) -> UserInfo:
    user = getattr(request.state, "user", None)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
