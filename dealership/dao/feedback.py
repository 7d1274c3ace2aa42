from typing import List

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.models import Feedback


async def feedback_for_customer(db: AsyncSession, customer_id: int) -> List[Feedback]:
    result = await db.execute(
        select(Feedback).where(Feedback.customer_id == customer_id).order_by(Feedback.created_at, Feedback.id)
    )
    return list(result.scalars().all())


async def delete_feedback(db: AsyncSession, feedback_id: int) -> bool:
    result = await db.execute(delete(Feedback).where(Feedback.id == feedback_id))
    return result.rowcount > 0
