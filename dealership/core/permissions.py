"""
Path-prefix authorization: which roles may call which part of the API.
A path under /api that matches no prefix is denied.
"""
from enum import Enum
from typing import Dict, Iterable, List, Tuple


class RoleName(str, Enum):
    ADMIN = "ADMIN"
    EVM = "EVM"            # manufacturer head office
    MANAGER = "MANAGER"    # dealer manager
    STAFF = "STAFF"        # dealer sales staff


API_PREFIX = "/api"

PUBLIC_PATHS: Tuple[str, ...] = (
    "/api/login",
    "/api/public",
)

# Prefix → roles allowed to call it
ROLE_PATHS: Dict[str, List[RoleName]] = {
    "/api/manager": [RoleName.MANAGER],
    "/api/staff": [RoleName.MANAGER, RoleName.STAFF],
    "/api/admin": [RoleName.ADMIN],
    "/api/evm": [RoleName.EVM, RoleName.ADMIN],
}


def _matches(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix + "/")


def is_protected_path(path: str) -> bool:
    return _matches(path, API_PREFIX)


def is_public_path(path: str) -> bool:
    return any(_matches(path, p) for p in PUBLIC_PATHS)


def has_required_role(path: str, roles: Iterable[str]) -> bool:
    """True when at least one of the roles is allowed for a prefix matching the path."""
    held = set(roles)
    for prefix, allowed in ROLE_PATHS.items():
        if _matches(path, prefix) and any(r.value in held for r in allowed):
            return True
    return False
