from typing import List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.permissions import RoleName
from dealership.models import Dealer, Role, UserAccount, user_roles


async def get_user(db: AsyncSession, user_id: int) -> Optional[UserAccount]:
    result = await db.execute(select(UserAccount).where(UserAccount.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_username(db: AsyncSession, username: str) -> Optional[UserAccount]:
    result = await db.execute(
        select(UserAccount).where(func.lower(UserAccount.username) == username.strip().lower())
    )
    return result.scalar_one_or_none()


async def list_users(db: AsyncSession, dealer_id: Optional[int] = None) -> List[UserAccount]:
    stmt = select(UserAccount).order_by(UserAccount.id)
    if dealer_id is not None:
        stmt = stmt.where(UserAccount.dealer_id == dealer_id)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def staff_ids_for_dealer(db: AsyncSession, dealer_id: int) -> List[int]:
    """Accounts of a dealer that can sell (STAFF or MANAGER)."""
    result = await db.execute(
        select(UserAccount.id)
        .join(user_roles, user_roles.c.user_id == UserAccount.id)
        .join(Role, Role.id == user_roles.c.role_id)
        .where(
            UserAccount.dealer_id == dealer_id,
            Role.role_name.in_([RoleName.STAFF, RoleName.MANAGER]),
        )
        .distinct()
        .order_by(UserAccount.id)
    )
    return list(result.scalars().all())


async def get_roles(db: AsyncSession, names: Sequence[RoleName]) -> List[Role]:
    result = await db.execute(select(Role).where(Role.role_name.in_(list(names))).order_by(Role.id))
    return list(result.scalars().all())


async def ensure_roles(db: AsyncSession) -> None:
    existing = {r.role_name for r in await get_roles(db, list(RoleName))}
    for name in RoleName:
        if name not in existing:
            db.add(Role(role_name=name))
    await db.flush()


async def get_dealer(db: AsyncSession, dealer_id: int) -> Optional[Dealer]:
    result = await db.execute(select(Dealer).where(Dealer.id == dealer_id))
    return result.scalar_one_or_none()


async def list_dealers(db: AsyncSession) -> List[Dealer]:
    result = await db.execute(select(Dealer).order_by(Dealer.id))
    return list(result.scalars().all())
