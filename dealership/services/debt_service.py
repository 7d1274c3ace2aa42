"""Outstanding balance of a customer across all of their orders."""
from typing import Iterable, List, Optional, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.logging_config import get_logger
from dealership.dao import customers as customers_dao
from dealership.dao import orders as orders_dao
from dealership.dao import payments as payments_dao
from dealership.dao.customers import CustomerFilter
from dealership.dao.orders import OrderFilter
from dealership.models.order import STATUS_CANCELLED
from dealership.services.pricing import line_amount

logger = get_logger(__name__)


class DetailLike(Protocol):
    id: int
    quantity: Optional[str]
    unit_price: Optional[float]


class PaymentLike(Protocol):
    amount: Optional[float]


def is_cancelled(status: Optional[str]) -> bool:
    return (status or "").strip().lower() == STATUS_CANCELLED.lower()


def order_debt(details: Iterable[DetailLike], payments: Iterable[PaymentLike]) -> float:
    """Unpaid part of one order, never below zero."""
    total = 0.0
    for d in details:
        line = line_amount(d.quantity, d.unit_price)
        if not line.ok:
            logger.warning("Order detail %s skipped: %s", d.id, line.skip_reason)
            continue
        total += line.amount
    paid = sum(p.amount for p in payments if p.amount is not None and p.amount > 0)
    return max(0.0, total - paid)


async def customer_debt(db: AsyncSession, customer_id: int) -> float:
    # Each order is floored on its own, so an overpaid order never hides another's debt.
    try:
        total_debt = 0.0
        for order in await orders_dao.list_orders(db, OrderFilter(customer_id=customer_id)):
            if is_cancelled(order.status):
                continue
            details = await orders_dao.list_details(db, order.id)
            payments = await payments_dao.payments_for_order(db, order.id)
            total_debt += order_debt(details, payments)
        return total_debt
    except Exception as e:
        logger.exception("Debt of customer %s could not be computed: %s", customer_id, e)
        return 0.0


async def dealer_debt_summary(db: AsyncSession, dealer_id: int) -> List[dict]:
    """Customers of a dealer who still owe something, largest debt first."""
    rows = []
    for customer in await customers_dao.list_customers(db, CustomerFilter(dealer_id=dealer_id)):
        debt = await customer_debt(db, customer.id)
        if debt <= 0:
            continue
        rows.append({
            "customer_id": customer.id,
            "name": customer.name,
            "email": customer.email,
            "phone_number": customer.phone_number,
            "total_debt": debt,
        })
    rows.sort(key=lambda r: (-r["total_debt"], r["customer_id"]))
    return rows
