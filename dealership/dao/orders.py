"""Orders, order details and custom-order confirmations."""
from dataclasses import dataclass
from typing import List, Optional, Sequence

from sqlalchemy import ColumnElement, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.models import Confirmation, Order, OrderDetail


@dataclass(frozen=True)
class OrderFilter:
    customer_id: Optional[int] = None
    staff_ids: Optional[Sequence[int]] = None
    status: Optional[str] = None
    is_custom: Optional[bool] = None

    def clauses(self) -> List[ColumnElement[bool]]:
        out: List[ColumnElement[bool]] = []
        if self.customer_id is not None:
            out.append(Order.customer_id == self.customer_id)
        if self.staff_ids is not None:
            out.append(Order.dealer_staff_id.in_(list(self.staff_ids)))
        if self.status is not None:
            out.append(Order.status == self.status)
        if self.is_custom is not None:
            out.append(Order.is_custom.is_(self.is_custom))
        return out


@dataclass(frozen=True)
class ConfirmationFilter:
    agreement: Optional[str] = None
    order_detail_id: Optional[int] = None

    def clauses(self) -> List[ColumnElement[bool]]:
        out: List[ColumnElement[bool]] = []
        if self.agreement is not None:
            out.append(Confirmation.agreement == self.agreement)
        if self.order_detail_id is not None:
            out.append(Confirmation.order_detail_id == self.order_detail_id)
        return out


async def get_order(db: AsyncSession, order_id: int) -> Optional[Order]:
    result = await db.execute(select(Order).where(Order.id == order_id))
    return result.scalar_one_or_none()


async def list_orders(db: AsyncSession, flt: OrderFilter = OrderFilter()) -> List[Order]:
    stmt = select(Order).where(*flt.clauses()).order_by(Order.id)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def list_details(db: AsyncSession, order_id: int) -> List[OrderDetail]:
    result = await db.execute(
        select(OrderDetail).where(OrderDetail.order_id == order_id).order_by(OrderDetail.id)
    )
    return list(result.scalars().all())


async def first_detail(db: AsyncSession, order_id: int) -> Optional[OrderDetail]:
    result = await db.execute(
        select(OrderDetail).where(OrderDetail.order_id == order_id).order_by(OrderDetail.id).limit(1)
    )
    return result.scalar_one_or_none()


async def unfulfilled_detail(db: AsyncSession, order_id: int) -> Optional[OrderDetail]:
    """Detail still waiting for a serial (custom order not yet approved)."""
    result = await db.execute(
        select(OrderDetail)
        .where(OrderDetail.order_id == order_id, OrderDetail.serial_id.is_(None))
        .order_by(OrderDetail.id)
        .limit(1)
    )
    return result.scalar_one_or_none()


async def set_detail_serial(db: AsyncSession, detail_id: int, serial_id: str) -> None:
    await db.execute(
        update(OrderDetail).where(OrderDetail.id == detail_id).values(serial_id=serial_id)
    )


async def set_order_status(db: AsyncSession, order_id: int, status: str) -> bool:
    result = await db.execute(update(Order).where(Order.id == order_id).values(status=status))
    return result.rowcount > 0


async def get_confirmation_for_detail(db: AsyncSession, detail_id: int) -> Optional[Confirmation]:
    result = await db.execute(
        select(Confirmation).where(*ConfirmationFilter(order_detail_id=detail_id).clauses()).limit(1)
    )
    return result.scalar_one_or_none()


async def list_confirmations(db: AsyncSession, flt: ConfirmationFilter = ConfirmationFilter()) -> List[Confirmation]:
    result = await db.execute(select(Confirmation).where(*flt.clauses()).order_by(Confirmation.id))
    return list(result.scalars().all())
