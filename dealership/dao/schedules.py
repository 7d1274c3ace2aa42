from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.models import TestDriveSchedule


async def get_schedule(db: AsyncSession, schedule_id: int) -> Optional[TestDriveSchedule]:
    result = await db.execute(select(TestDriveSchedule).where(TestDriveSchedule.id == schedule_id))
    return result.scalar_one_or_none()


async def slot_taken(db: AsyncSession, serial_id: str, date: str) -> bool:
    result = await db.execute(
        select(func.count(TestDriveSchedule.id)).where(
            TestDriveSchedule.serial_id == serial_id, TestDriveSchedule.date == date
        )
    )
    return (result.scalar_one() or 0) > 0


async def schedules_for_customers(db: AsyncSession, customer_ids: List[int]) -> List[TestDriveSchedule]:
    if not customer_ids:
        return []
    result = await db.execute(
        select(TestDriveSchedule)
        .where(TestDriveSchedule.customer_id.in_(customer_ids))
        .order_by(TestDriveSchedule.date, TestDriveSchedule.id)
    )
    return list(result.scalars().all())
