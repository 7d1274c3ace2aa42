from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.auth_filter import get_current_user
from dealership.core.database import get_db
from dealership.schemas.auth import UserInfo
from dealership.schemas.common import ApiResponse, ok
from dealership.schemas.payment import (
    AppliedPromotionResponse,
    FullTransferCustomer,
    InstallmentCustomer,
    InstallmentPlanResponse,
    InstallmentPlanUpdate,
    PaymentCreate,
    PaymentProcessed,
    PaymentResponse,
)
from dealership.services.payment_service import (
    ERR_ORDER_NOT_FOUND,
    customers_with_active_installments,
    customers_paid_in_full,
    get_payment_by_order,
    process_payment,
    update_installment_plan,
)

router = APIRouter(prefix="/api", tags=["payments"])


def _payment_response(payment, plan) -> PaymentResponse:
    resp = PaymentResponse.model_validate(payment)
    if plan is not None:
        resp.installment_plan = InstallmentPlanResponse.model_validate(plan)
    return resp


@router.post("/staff/payments", response_model=ApiResponse[PaymentProcessed])
async def create_payment(data: PaymentCreate, db: AsyncSession = Depends(get_db)):
    outcome = await process_payment(db, data.order_id, data.method, data.plan)
    if not outcome.ok:
        code = 404 if outcome.error == ERR_ORDER_NOT_FOUND else 400
        raise HTTPException(status_code=code, detail=outcome.error)
    resp = PaymentProcessed(
        **_payment_response(outcome.payment, outcome.plan).model_dump(),
        applied_promotions=[
            AppliedPromotionResponse(
                promo_id=a.promo_id, description=a.description, percent=a.percent, total_after=a.total_after,
            )
            for a in outcome.applied
        ],
    )
    return ok("Payment processed successfully", resp)


@router.get("/staff/payments/by-order/{order_id}", response_model=ApiResponse[PaymentResponse])
async def payment_of_order(order_id: int, db: AsyncSession = Depends(get_db)):
    payment, plan = await get_payment_by_order(db, order_id)
    if payment is None:
        raise HTTPException(status_code=404, detail=f"No payment for order {order_id}")
    return ok("Payment retrieved", _payment_response(payment, plan))


@router.patch("/staff/installment-plans/{plan_id}", response_model=ApiResponse[InstallmentPlanResponse])
async def change_installment_plan(
    plan_id: int,
    data: InstallmentPlanUpdate,
    db: AsyncSession = Depends(get_db),
):
    plan = await update_installment_plan(db, plan_id, data.status, data.term_month)
    if plan is None:
        raise HTTPException(status_code=404, detail=f"Installment plan not found: {plan_id}")
    return ok("Installment plan updated", InstallmentPlanResponse.model_validate(plan))


@router.get("/staff/installment-customers", response_model=ApiResponse[List[InstallmentCustomer]])
async def installment_customers(
    db: AsyncSession = Depends(get_db),
    current_user: UserInfo = Depends(get_current_user),
):
    rows = await customers_with_active_installments(db, dealer_id=current_user.dealer_id)
    return ok("Customers with active installments", [InstallmentCustomer(**r) for r in rows])


@router.get("/evm/installment-customers", response_model=ApiResponse[List[InstallmentCustomer]])
async def all_installment_customers(
    dealer_id: Optional[int] = Query(None, alias="dealerId"),
    db: AsyncSession = Depends(get_db),
):
    rows = await customers_with_active_installments(db, dealer_id=dealer_id)
    return ok("Customers with active installments", [InstallmentCustomer(**r) for r in rows])


@router.get("/staff/tt-customers", response_model=ApiResponse[List[FullTransferCustomer]])
async def full_transfer_customers(
    db: AsyncSession = Depends(get_db),
    current_user: UserInfo = Depends(get_current_user),
):
    if current_user.dealer_id is None:
        raise HTTPException(status_code=400, detail="User is not assigned to a dealer")
    rows = await customers_paid_in_full(db, current_user.dealer_id)
    total = sum(r["paid_amount"] for r in rows)
    return ok(
        f"Customers who paid by full transfer, total paid: {total:.2f}",
        [FullTransferCustomer(**r) for r in rows],
    )
