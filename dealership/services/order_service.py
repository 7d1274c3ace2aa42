"""
Order creation and custom-order approval.
Each workflow runs in one transaction on the given session: commit on success,
rollback and a failure sentinel on any persistence error.
"""
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.dates import now_timestamp
from dealership.core.logging_config import get_logger
from dealership.dao import orders as orders_dao
from dealership.dao import vehicles as vehicles_dao
from dealership.dao.vehicles import SerialAllocationError
from dealership.models import Confirmation, Order, OrderDetail, VehicleVariant
from dealership.models.order import AGREEMENT_AGREE, AGREEMENT_DISAGREE, AGREEMENT_PENDING, STATUS_PENDING

logger = get_logger(__name__)

CUSTOM_VERSION_NAME = "Custom Version"
CUSTOM_COLOR = "Custom Color"


async def create_order(
    db: AsyncSession,
    customer_id: int,
    dealer_staff_id: int,
    model_id: int,
    status: Optional[str],
    variant_id: Optional[int],
    quantity: int,
    unit_price: float,
    is_custom: bool,
) -> Optional[int]:
    """
    Insert the order with its single detail line.

    Stock orders get a freshly registered serial of ``variant_id``; custom
    orders get a detail without serial plus a pending confirmation.
    Returns the new order id, or None when nothing was written.
    """
    timestamp = now_timestamp()
    try:
        order = Order(
            customer_id=customer_id,
            dealer_staff_id=dealer_staff_id,
            model_id=model_id,
            order_date=timestamp,
            status=status or STATUS_PENDING,
            is_custom=is_custom,
        )
        db.add(order)
        await db.flush()

        if not is_custom:
            serial = await vehicles_dao.create_serial(db, variant_id)
            db.add(OrderDetail(
                order_id=order.id,
                serial_id=serial.serial_id,
                quantity=str(quantity),
                unit_price=unit_price,
            ))
            await db.flush()
        else:
            detail = OrderDetail(
                order_id=order.id,
                serial_id=None,
                quantity=str(quantity),
                unit_price=unit_price,
            )
            db.add(detail)
            await db.flush()
            db.add(Confirmation(
                order_detail_id=detail.id,
                agreement=AGREEMENT_PENDING,
                date_time=timestamp,
            ))
            await db.flush()

        await db.commit()
    except (SQLAlchemyError, SerialAllocationError) as e:
        logger.exception("Order creation rolled back (staff=%s, model=%s): %s", dealer_staff_id, model_id, e)
        await db.rollback()
        return None
    logger.info("Order %s created by staff %s (custom=%s)", order.id, dealer_staff_id, is_custom)
    return order.id


async def approve_custom_order(
    db: AsyncSession,
    order_id: int,
    is_agree: bool,
    unit_price: Optional[float],
    version_name: Optional[str] = None,
    color: Optional[str] = None,
    staff_admin_id: Optional[int] = None,
) -> bool:
    """Resolve a pending custom order into a concrete variant and serial, or refuse it."""
    try:
        order = await orders_dao.get_order(db, order_id)
        if order is None:
            logger.warning("Approval of order %s: order not found", order_id)
            return False
        detail = await orders_dao.unfulfilled_detail(db, order_id)
        if detail is None:
            logger.warning("Approval of order %s: no detail awaiting a serial", order_id)
            return False
        confirmation = await orders_dao.get_confirmation_for_detail(db, detail.id)
        if confirmation is None:
            logger.warning("Approval of order %s: no confirmation for detail %s", order_id, detail.id)
            return False
        if confirmation.agreement != AGREEMENT_PENDING:
            logger.warning("Approval of order %s: already decided (%s)", order_id, confirmation.agreement)
            return False

        if is_agree:
            variant = VehicleVariant(
                model_id=order.model_id,
                version_name=version_name or CUSTOM_VERSION_NAME,
                color=color or CUSTOM_COLOR,
                price=unit_price,
                is_active=True,
            )
            db.add(variant)
            await db.flush()
            serial = await vehicles_dao.create_serial(db, variant.id)
            await orders_dao.set_detail_serial(db, detail.id, serial.serial_id)
            confirmation.agreement = AGREEMENT_AGREE
        else:
            confirmation.agreement = AGREEMENT_DISAGREE
        confirmation.date_time = now_timestamp()
        confirmation.staff_admin_id = staff_admin_id
        await db.flush()
        await db.commit()
    except (SQLAlchemyError, SerialAllocationError) as e:
        logger.exception("Approval of order %s rolled back: %s", order_id, e)
        await db.rollback()
        return False
    logger.info("Custom order %s: %s", order_id, AGREEMENT_AGREE if is_agree else AGREEMENT_DISAGREE)
    return True


async def update_order_status(db: AsyncSession, order_id: int, status: str) -> bool:
    status = (status or "").strip()
    if not status:
        return False
    try:
        updated = await orders_dao.set_order_status(db, order_id, status)
        await db.commit()
    except SQLAlchemyError as e:
        logger.exception("Status update of order %s failed: %s", order_id, e)
        await db.rollback()
        return False
    return updated
