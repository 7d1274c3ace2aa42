"""Test-drive bookings."""
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.logging_config import get_logger
from dealership.dao import customers as customers_dao
from dealership.dao import schedules as schedules_dao
from dealership.dao.customers import CustomerFilter
from dealership.models import TestDriveSchedule
from dealership.models.schedule import SCHEDULE_APPROVED, SCHEDULE_PENDING

logger = get_logger(__name__)


class SlotTakenError(Exception):
    pass


def initial_status(requested: Optional[str]) -> str:
    if requested and requested.strip().upper() == SCHEDULE_APPROVED:
        return SCHEDULE_APPROVED
    return SCHEDULE_PENDING


async def create_schedule(
    db: AsyncSession, customer_id: int, serial_id: str, date: str, status: Optional[str] = None
) -> Optional[TestDriveSchedule]:
    """
    Book a serial for a date. Raises SlotTakenError when the serial is already
    booked that day; the check and the insert are not atomic.
    """
    if await schedules_dao.slot_taken(db, serial_id, date):
        raise SlotTakenError(f"Serial {serial_id} is already booked on {date}")
    try:
        schedule = TestDriveSchedule(
            customer_id=customer_id,
            serial_id=serial_id,
            date=date,
            status=initial_status(status),
        )
        db.add(schedule)
        await db.flush()
        await db.commit()
    except SQLAlchemyError as e:
        logger.exception("Test drive booking for customer %s failed: %s", customer_id, e)
        await db.rollback()
        return None
    return schedule


async def update_schedule_status(db: AsyncSession, schedule_id: int, status: str) -> Optional[TestDriveSchedule]:
    try:
        schedule = await schedules_dao.get_schedule(db, schedule_id)
        if schedule is None:
            return None
        schedule.status = status.strip().upper()
        await db.flush()
        await db.commit()
    except SQLAlchemyError as e:
        logger.exception("Test drive %s status update failed: %s", schedule_id, e)
        await db.rollback()
        return None
    return schedule


async def schedules_by_customer_name(db: AsyncSession, name: str, dealer_id: Optional[int] = None) -> List[dict]:
    customers = await customers_dao.list_customers(db, CustomerFilter(dealer_id=dealer_id, name_contains=name))
    schedules = await schedules_dao.schedules_for_customers(db, [c.id for c in customers])
    out = []
    for c in customers:
        out.append({
            "customer": c,
            "schedules": [s for s in schedules if s.customer_id == c.id],
        })
    return out


async def schedules_for_dealer(db: AsyncSession, dealer_id: int) -> List[dict]:
    """Customers of the dealer that have at least one booking, with their bookings."""
    groups = await schedules_by_customer_name(db, "", dealer_id)
    return [g for g in groups if g["schedules"]]
