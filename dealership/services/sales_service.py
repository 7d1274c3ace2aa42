"""
Sales records: orders of one staff member (or every seller of a dealer) in a
date range, summarised per customer.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.logging_config import get_logger
from dealership.dao import orders as orders_dao
from dealership.dao import users as users_dao
from dealership.dao.orders import OrderFilter
from dealership.models import Order, OrderDetail
from dealership.services.debt_service import is_cancelled
from dealership.services.pricing import SKIP_QUANTITY_MISSING, line_amount, parse_quantity

logger = get_logger(__name__)

UNKNOWN_STAFF = "Unknown"


@dataclass
class SaleRecord:
    customer_id: int
    dealer_staff_id: int
    staff_name: str
    sale_date: str
    sale_amount: float
    order_count: int


def in_date_range(order_date: Optional[str], start_date: str, end_date: str) -> bool:
    """Inclusive, compared as strings: '2025-01-31 10:00:00' is after '2025-01-31'."""
    return order_date is not None and start_date <= order_date <= end_date


def summarize_sales(
    rows: Iterable[Tuple[Order, Optional[OrderDetail]]],
    staff_names: Dict[int, str],
) -> List[SaleRecord]:
    """Fold (order, first detail) pairs into one record per customer."""
    by_customer: Dict[int, SaleRecord] = {}
    for order, detail in rows:
        if detail is None:
            continue
        line = line_amount(detail.quantity, detail.unit_price)
        if not line.ok:
            if line.skip_reason != SKIP_QUANTITY_MISSING:
                logger.warning("Order %s left out of sales: %s", order.id, line.skip_reason)
            continue
        record = by_customer.get(order.customer_id)
        if record is None:
            by_customer[order.customer_id] = SaleRecord(
                customer_id=order.customer_id,
                dealer_staff_id=order.dealer_staff_id,
                staff_name=staff_names.get(order.dealer_staff_id, UNKNOWN_STAFF),
                sale_date=order.order_date,
                sale_amount=line.amount,
                order_count=1,
            )
            continue
        record.sale_amount += line.amount
        record.order_count += 1
        if order.order_date > record.sale_date:
            record.sale_date = order.order_date
            record.dealer_staff_id = order.dealer_staff_id
            record.staff_name = staff_names.get(order.dealer_staff_id, UNKNOWN_STAFF)
    return list(by_customer.values())


async def _orders_with_detail(
    db: AsyncSession, staff_ids: Sequence[int], start_date: Optional[str], end_date: Optional[str]
) -> List[Tuple[Order, Optional[OrderDetail]]]:
    rows = []
    for order in await orders_dao.list_orders(db, OrderFilter(staff_ids=staff_ids)):
        if start_date is not None and end_date is not None:
            if not in_date_range(order.order_date, start_date, end_date):
                continue
        rows.append((order, await orders_dao.first_detail(db, order.id)))
    return rows


async def _staff_names(db: AsyncSession, staff_ids: Sequence[int]) -> Dict[int, str]:
    names = {}
    for staff_id in staff_ids:
        user = await users_dao.get_user(db, staff_id)
        if user is not None:
            names[staff_id] = user.username
    return names


async def staff_sales_records(
    db: AsyncSession, staff_id: int, start_date: str, end_date: str
) -> List[SaleRecord]:
    rows = await _orders_with_detail(db, [staff_id], start_date, end_date)
    logger.debug("Staff %s: %s orders in %s..%s", staff_id, len(rows), start_date, end_date)
    return summarize_sales(rows, await _staff_names(db, [staff_id]))


async def dealer_sales_records(
    db: AsyncSession, dealer_id: int, start_date: str, end_date: str
) -> List[SaleRecord]:
    staff_ids = await users_dao.staff_ids_for_dealer(db, dealer_id)
    if not staff_ids:
        return []
    rows = await _orders_with_detail(db, staff_ids, start_date, end_date)
    return summarize_sales(rows, await _staff_names(db, staff_ids))


async def dealer_sales_summary(
    db: AsyncSession, start_date: Optional[str] = None, end_date: Optional[str] = None
) -> List[dict]:
    """Totals per dealer; the date range applies only when both ends are given."""
    summary = []
    for dealer in await users_dao.list_dealers(db):
        total_sales = 0.0
        total_orders = 0
        staff_ids = await users_dao.staff_ids_for_dealer(db, dealer.id)
        if staff_ids:
            for order, detail in await _orders_with_detail(db, staff_ids, start_date, end_date):
                if detail is None:
                    continue
                line = line_amount(detail.quantity, detail.unit_price)
                if not line.ok:
                    continue
                total_sales += line.amount
                total_orders += 1
        summary.append({
            "dealer_id": dealer.id,
            "dealer_name": dealer.dealer_name,
            "address": dealer.address,
            "phone_number": dealer.phone_number,
            "total_sales": total_sales,
            "total_orders": total_orders,
        })
    return summary


def monthly_breakdown(rows: Iterable[Tuple[Order, Optional[OrderDetail]]], year: int) -> List[dict]:
    """Sales, orders and cars per calendar month of ``year``; all twelve months are present."""
    months = [
        {"month": m, "total_sales": 0.0, "total_orders": 0, "total_cars": 0}
        for m in range(1, 13)
    ]
    prefix = f"{year:04d}-"
    for order, detail in rows:
        if detail is None or is_cancelled(order.status):
            continue
        if not order.order_date or not order.order_date.startswith(prefix):
            continue
        line = line_amount(detail.quantity, detail.unit_price)
        if not line.ok:
            continue
        month = months[int(order.order_date[5:7]) - 1]
        month["total_sales"] += line.amount
        month["total_orders"] += 1
        month["total_cars"] += parse_quantity(detail.quantity)
    return months


async def company_monthly_breakdown(db: AsyncSession, year: int) -> List[dict]:
    rows = [(order, await orders_dao.first_detail(db, order.id)) for order in await orders_dao.list_orders(db)]
    return monthly_breakdown(rows, year)


async def company_sales_target(db: AsyncSession, year: int) -> dict:
    months = await company_monthly_breakdown(db, year)
    total_sales = sum(m["total_sales"] for m in months)
    return {
        "year": year,
        "total_cars": sum(m["total_cars"] for m in months),
        "total_orders": sum(m["total_orders"] for m in months),
        "total_sales": total_sales,
        "average_monthly_sales": total_sales / 12,
    }
