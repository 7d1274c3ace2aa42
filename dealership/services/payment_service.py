"""
Payment for an order: line totals, dealer promotions, optional installment plan.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.dates import now_timestamp
from dealership.core.logging_config import get_logger
from dealership.dao import customers as customers_dao
from dealership.dao import orders as orders_dao
from dealership.dao import payments as payments_dao
from dealership.dao import promotions as promotions_dao
from dealership.dao import users as users_dao
from dealership.dao.orders import OrderFilter
from dealership.models import InstallmentPlan, InstallmentStatus, Payment
from dealership.models.payment import METHOD_FULL_TRANSFER
from dealership.schemas.payment import InstallmentPlanInput
from dealership.services.pricing import AppliedPromotion, apply_promotions, monthly_payment, strict_total

logger = get_logger(__name__)

ERR_ORDER_NOT_FOUND = "Order not found"
ERR_INVALID_CUSTOMER = "Order has no valid customer"
ERR_PAYMENT_EXISTS = "Payment already exists"
ERR_NO_DETAILS = "Order has no detail lines"
ERR_INVALID_QUANTITY = "Order detail has a non-numeric quantity"
ERR_PERSISTENCE = "Payment could not be saved"


@dataclass
class PaymentOutcome:
    payment: Optional[Payment] = None
    plan: Optional[InstallmentPlan] = None
    applied: List[AppliedPromotion] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.payment is not None


def is_financed(method: Optional[str]) -> bool:
    return (method or METHOD_FULL_TRANSFER).upper() != METHOD_FULL_TRANSFER


async def _dealer_promotions(db: AsyncSession, staff_id: int):
    staff = await users_dao.get_user(db, staff_id)
    if staff is None or staff.dealer_id is None:
        return []
    return await promotions_dao.promotions_for_dealer(db, staff.dealer_id)


async def process_payment(
    db: AsyncSession,
    order_id: int,
    method: Optional[str],
    plan: Optional[InstallmentPlanInput] = None,
    today: Optional[date] = None,
) -> PaymentOutcome:
    """
    Create the single payment of an order.

    The duplicate check is a plain read before the insert; two concurrent
    calls for one order can both pass it.
    """
    method = method or METHOD_FULL_TRANSFER
    today = today or date.today()
    try:
        order = await orders_dao.get_order(db, order_id)
        if order is None:
            return PaymentOutcome(error=ERR_ORDER_NOT_FOUND)
        if order.customer_id <= 0:
            return PaymentOutcome(error=ERR_INVALID_CUSTOMER)
        if await payments_dao.payment_exists(db, order_id):
            logger.warning("Payment for order %s refused: one already exists", order_id)
            return PaymentOutcome(error=ERR_PAYMENT_EXISTS)

        details = await orders_dao.list_details(db, order_id)
        if not details:
            return PaymentOutcome(error=ERR_NO_DETAILS)
        total = strict_total((d.quantity, d.unit_price) for d in details)
        if total is None:
            logger.warning("Payment for order %s refused: non-numeric quantity", order_id)
            return PaymentOutcome(error=ERR_INVALID_QUANTITY)

        promotions = await _dealer_promotions(db, order.dealer_staff_id)
        total, applied = apply_promotions(total, promotions, today)
        for a in applied:
            logger.info(
                "Order %s: promotion %s (%s%%) applied, total now %.2f",
                order_id, a.promo_id, a.percent, a.total_after,
            )

        payment = Payment(
            order_id=order_id,
            method=method,
            amount=total,
            payment_date=now_timestamp(),
        )
        db.add(payment)
        await db.flush()

        created_plan = None
        if is_financed(method):
            plan = plan or InstallmentPlanInput()
            monthly = plan.monthly_pay
            if not monthly:
                monthly = monthly_payment(total, plan.term_month)
            created_plan = InstallmentPlan(
                payment_id=payment.id,
                interest_rate=plan.interest_rate,
                term_month=plan.term_month,
                monthly_pay=monthly,
                status=plan.status,
            )
            db.add(created_plan)
            await db.flush()

        await db.commit()
    except SQLAlchemyError as e:
        logger.exception("Payment for order %s rolled back: %s", order_id, e)
        await db.rollback()
        return PaymentOutcome(error=ERR_PERSISTENCE)
    return PaymentOutcome(payment=payment, plan=created_plan, applied=applied)


async def get_payment_by_order(db: AsyncSession, order_id: int):
    """(payment, plan) of an order, or (None, None)."""
    found = await payments_dao.payments_for_order(db, order_id)
    if not found:
        return None, None
    payment = found[0]
    return payment, await payments_dao.plan_for_payment(db, payment.id)


async def update_installment_plan(
    db: AsyncSession, plan_id: int, status: InstallmentStatus, term_month: int
) -> Optional[InstallmentPlan]:
    try:
        plan = await payments_dao.get_plan(db, plan_id)
        if plan is None:
            return None
        plan.status = status
        plan.term_month = term_month
        await db.flush()
        await db.commit()
    except SQLAlchemyError as e:
        logger.exception("Update of installment plan %s failed: %s", plan_id, e)
        await db.rollback()
        return None
    return plan


async def customers_with_active_installments(db: AsyncSession, dealer_id: Optional[int] = None) -> List[dict]:
    """
    One row per customer holding an ACTIVE or OVERDUE plan.
    Outstanding is monthly_pay * term_month of the first such plan found.
    """
    plans = await payments_dao.plans_with_status(db, [InstallmentStatus.ACTIVE, InstallmentStatus.OVERDUE])
    staff_ids = None
    if dealer_id is not None:
        staff_ids = set(await users_dao.staff_ids_for_dealer(db, dealer_id))

    rows: List[dict] = []
    seen = set()
    for plan in plans:
        payment = await payments_dao.get_payment(db, plan.payment_id)
        if payment is None:
            logger.warning("Installment plan %s: payment %s not found", plan.id, plan.payment_id)
            continue
        order = await orders_dao.get_order(db, payment.order_id)
        if order is None:
            logger.warning("Payment %s: order %s not found", payment.id, payment.order_id)
            continue
        if staff_ids is not None and order.dealer_staff_id not in staff_ids:
            continue
        if order.customer_id <= 0 or order.customer_id in seen:
            continue
        customer = await customers_dao.get_customer(db, order.customer_id)
        if customer is None:
            logger.warning("Order %s: customer %s not found", order.id, order.customer_id)
            continue
        outstanding = max(0.0, (plan.monthly_pay or 0.0) * (plan.term_month or 0))
        rows.append({
            "customer_id": customer.id,
            "name": customer.name,
            "address": customer.address,
            "email": customer.email,
            "phone_number": customer.phone_number,
            "outstanding_amount": outstanding,
        })
        seen.add(customer.id)
    return rows


async def customers_paid_in_full(db: AsyncSession, dealer_id: int) -> List[dict]:
    """
    Customers of the dealer's sellers with at least one full-transfer (TT)
    payment, with the total paid that way.
    """
    staff_ids = await users_dao.staff_ids_for_dealer(db, dealer_id)
    if not staff_ids:
        return []
    orders = await orders_dao.list_orders(db, OrderFilter(staff_ids=staff_ids))
    customer_of = {o.id: o.customer_id for o in orders if o.customer_id > 0}

    by_customer: Dict[int, dict] = {}
    for payment in await payments_dao.payments_for_orders(db, list(customer_of)):
        if is_financed(payment.method):
            continue
        customer_id = customer_of[payment.order_id]
        row = by_customer.get(customer_id)
        if row is None:
            customer = await customers_dao.get_customer(db, customer_id)
            if customer is None:
                logger.warning("Payment %s: customer %s not found", payment.id, customer_id)
                continue
            row = by_customer[customer_id] = {
                "customer_id": customer.id,
                "name": customer.name,
                "email": customer.email,
                "phone_number": customer.phone_number,
                "paid_amount": 0.0,
                "payment_count": 0,
                "last_payment_date": payment.payment_date,
            }
        row["paid_amount"] += payment.amount or 0.0
        row["payment_count"] += 1
        row["last_payment_date"] = max(row["last_payment_date"], payment.payment_date)
    return sorted(by_customer.values(), key=lambda r: r["customer_id"])
