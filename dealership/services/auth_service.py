"""Password hashing and JWT issuing/validation for bearer authentication."""
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import bcrypt
import jwt

from dealership.config import settings

CLAIM_USER_ID = "userId"
CLAIM_ROLES = "roles"
CLAIM_DEALER_ID = "dealerId"


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


def create_access_token(
    user_id: int,
    username: str,
    roles: List[str],
    dealer_id: Optional[int] = None,
    expires_minutes: Optional[int] = None,
) -> str:
    now = datetime.now(timezone.utc)
    if expires_minutes is None:
        expires_minutes = settings.jwt_expire_minutes
    expire = now + timedelta(minutes=expires_minutes)
    payload = {
        "sub": username,
        CLAIM_USER_ID: user_id,
        CLAIM_ROLES: list(roles),
        CLAIM_DEALER_ID: dealer_id,
        "exp": expire,
        "iat": now,
    }
    return jwt.encode(
        payload,
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )


def decode_token(token: str) -> Optional[dict]:
    """Claims of a valid token; None when the signature or expiry check fails."""
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
        )
    except jwt.PyJWTError:
        return None
    if not isinstance(payload.get(CLAIM_USER_ID), int):
        return None
    return payload
