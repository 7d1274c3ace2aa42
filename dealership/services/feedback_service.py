"""Customer feedback on orders and service."""
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.dates import now_timestamp
from dealership.core.logging_config import get_logger
from dealership.dao import feedback as feedback_dao
from dealership.models import Feedback
from dealership.models.feedback import FEEDBACK_PENDING, FEEDBACK_RESOLVED

logger = get_logger(__name__)


def initial_status(requested: Optional[str]) -> str:
    """Only RESOLVED is kept as given; anything else starts PENDING."""
    if requested and requested.strip().upper() == FEEDBACK_RESOLVED:
        return FEEDBACK_RESOLVED
    return FEEDBACK_PENDING


async def create_feedback(
    db: AsyncSession,
    customer_id: int,
    content: str,
    order_id: Optional[int] = None,
    feedback_type: Optional[str] = None,
    status: Optional[str] = None,
) -> Optional[Feedback]:
    try:
        feedback = Feedback(
            customer_id=customer_id,
            order_id=order_id,
            type=feedback_type,
            content=content,
            status=initial_status(status),
            created_at=now_timestamp(),
        )
        db.add(feedback)
        await db.flush()
        await db.commit()
    except SQLAlchemyError as e:
        logger.exception("Feedback for customer %s could not be saved: %s", customer_id, e)
        await db.rollback()
        return None
    return feedback


async def delete_feedback(db: AsyncSession, feedback_id: int) -> bool:
    try:
        deleted = await feedback_dao.delete_feedback(db, feedback_id)
        await db.commit()
    except SQLAlchemyError as e:
        logger.exception("Feedback %s could not be deleted: %s", feedback_id, e)
        await db.rollback()
        return False
    return deleted
