from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.models import InstallmentPlan, InstallmentStatus, Payment


async def payments_for_order(db: AsyncSession, order_id: int) -> List[Payment]:
    result = await db.execute(select(Payment).where(Payment.order_id == order_id).order_by(Payment.id))
    return list(result.scalars().all())


async def payment_exists(db: AsyncSession, order_id: int) -> bool:
    result = await db.execute(select(Payment.id).where(Payment.order_id == order_id).limit(1))
    return result.scalar_one_or_none() is not None


async def get_payment(db: AsyncSession, payment_id: int) -> Optional[Payment]:
    result = await db.execute(select(Payment).where(Payment.id == payment_id))
    return result.scalar_one_or_none()


async def plan_for_payment(db: AsyncSession, payment_id: int) -> Optional[InstallmentPlan]:
    result = await db.execute(
        select(InstallmentPlan).where(InstallmentPlan.payment_id == payment_id).order_by(InstallmentPlan.id).limit(1)
    )
    return result.scalar_one_or_none()


async def get_plan(db: AsyncSession, plan_id: int) -> Optional[InstallmentPlan]:
    result = await db.execute(select(InstallmentPlan).where(InstallmentPlan.id == plan_id))
    return result.scalar_one_or_none()


async def plans_with_status(db: AsyncSession, statuses: Sequence[InstallmentStatus]) -> List[InstallmentPlan]:
    result = await db.execute(
        select(InstallmentPlan).where(InstallmentPlan.status.in_(list(statuses))).order_by(InstallmentPlan.id)
    )
    return list(result.scalars().all())


async def payments_for_orders(db: AsyncSession, order_ids: Sequence[int]) -> List[Payment]:
    if not order_ids:
        return []
    result = await db.execute(
        select(Payment).where(Payment.order_id.in_(list(order_ids))).order_by(Payment.id)
    )
    return list(result.scalars().all())
