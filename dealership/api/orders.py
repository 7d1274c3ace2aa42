from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.auth_filter import get_current_user
from dealership.core.database import get_db
from dealership.dao import orders as orders_dao
from dealership.dao import users as users_dao
from dealership.dao import vehicles as vehicles_dao
from dealership.dao.orders import ConfirmationFilter, OrderFilter
from dealership.models import Order
from dealership.models.order import STATUS_PENDING
from dealership.schemas.auth import UserInfo
from dealership.schemas.common import ApiResponse, ok
from dealership.schemas.order import (
    ApprovalRequest,
    ConfirmationResponse,
    OrderCreate,
    OrderCreated,
    OrderDetailResponse,
    OrderResponse,
    OrderStatusUpdate,
)
from dealership.services.order_service import approve_custom_order, create_order, update_order_status

router = APIRouter(prefix="/api", tags=["orders"])


async def _order_response(db: AsyncSession, order: Order) -> OrderResponse:
    detail = await orders_dao.first_detail(db, order.id)
    resp = OrderResponse.model_validate(order)
    if detail is not None:
        resp.detail = OrderDetailResponse.model_validate(detail)
    return resp


async def _orders_response(db: AsyncSession, orders: List[Order]) -> List[OrderResponse]:
    return [await _order_response(db, o) for o in orders]


@router.post("/staff/orders", response_model=ApiResponse[OrderCreated])
async def create_order_endpoint(
    data: OrderCreate,
    db: AsyncSession = Depends(get_db),
    current_user: UserInfo = Depends(get_current_user),
):
    model = await vehicles_dao.get_model(db, data.model_id)
    if model is None or not model.is_active:
        raise HTTPException(status_code=400, detail=f"Vehicle model not found: {data.model_id}")

    unit_price = data.unit_price
    variant_id = data.variant_id if data.variant_id and data.variant_id > 0 else None
    if variant_id is not None:
        variant = await vehicles_dao.get_variant(db, variant_id)
        if variant is None or not variant.is_active or variant.model_id != model.id:
            raise HTTPException(status_code=400, detail=f"Variant not found with ID: {variant_id}")
        if unit_price is None:
            unit_price = variant.price
    elif not data.is_custom:
        raise HTTPException(status_code=400, detail="variantId is required for a stock order")
    if unit_price is None:
        unit_price = await vehicles_dao.model_list_price(db, model.id) or 0.0

    order_id = await create_order(
        db,
        customer_id=data.customer_id,
        dealer_staff_id=current_user.id,
        model_id=model.id,
        status=(data.status or "").strip() or STATUS_PENDING,
        variant_id=variant_id,
        quantity=data.quantity,
        unit_price=unit_price,
        is_custom=data.is_custom,
    )
    if order_id is None:
        raise HTTPException(status_code=400, detail="Failed to create order")
    return ok("Order created successfully", OrderCreated(
        order_id=order_id,
        dealer_staff_id=current_user.id,
        variant_id=variant_id,
        unit_price=unit_price,
        is_custom=data.is_custom,
    ))


@router.get("/staff/orders", response_model=ApiResponse[List[OrderResponse]])
async def my_orders(
    db: AsyncSession = Depends(get_db),
    current_user: UserInfo = Depends(get_current_user),
):
    orders = await orders_dao.list_orders(db, OrderFilter(staff_ids=[current_user.id]))
    return ok("Orders retrieved", await _orders_response(db, orders))


@router.get("/staff/orders/by-customer/{customer_id}", response_model=ApiResponse[List[OrderResponse]])
async def orders_by_customer(customer_id: int, db: AsyncSession = Depends(get_db)):
    orders = await orders_dao.list_orders(db, OrderFilter(customer_id=customer_id))
    return ok("Orders retrieved", await _orders_response(db, orders))


@router.get("/manager/orders", response_model=ApiResponse[List[OrderResponse]])
async def dealer_orders(
    db: AsyncSession = Depends(get_db),
    current_user: UserInfo = Depends(get_current_user),
):
    if current_user.dealer_id is None:
        raise HTTPException(status_code=400, detail="Account is not attached to a dealer")
    staff_ids = await users_dao.staff_ids_for_dealer(db, current_user.dealer_id)
    orders = await orders_dao.list_orders(db, OrderFilter(staff_ids=staff_ids)) if staff_ids else []
    return ok("Orders retrieved", await _orders_response(db, orders))


@router.post("/staff/orders/{order_id}/status", response_model=ApiResponse[None])
async def change_order_status(
    order_id: int,
    data: OrderStatusUpdate,
    db: AsyncSession = Depends(get_db),
):
    if not await update_order_status(db, order_id, data.status):
        raise HTTPException(status_code=400, detail="Order status was not updated")
    return ok("Order status updated")


@router.get("/evm/orders", response_model=ApiResponse[List[OrderResponse]])
async def all_orders(
    status: Optional[str] = Query(None),
    custom: Optional[bool] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    orders = await orders_dao.list_orders(db, OrderFilter(status=status, is_custom=custom))
    return ok("Orders retrieved", await _orders_response(db, orders))


@router.get("/evm/confirmations", response_model=ApiResponse[List[ConfirmationResponse]])
async def confirmations(
    agreement: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    rows = await orders_dao.list_confirmations(db, ConfirmationFilter(agreement=agreement))
    return ok("Confirmations retrieved", [ConfirmationResponse.model_validate(c) for c in rows])


@router.post("/evm/orders/{order_id}/approve", response_model=ApiResponse[OrderResponse])
async def approve_order(
    order_id: int,
    data: ApprovalRequest,
    db: AsyncSession = Depends(get_db),
    current_user: UserInfo = Depends(get_current_user),
):
    if data.is_agree and (data.unit_price is None or data.unit_price <= 0):
        raise HTTPException(
            status_code=400,
            detail="Unit price is required for custom order approval and must be greater than 0",
        )
    done = await approve_custom_order(
        db,
        order_id,
        is_agree=data.is_agree,
        unit_price=data.unit_price,
        version_name=data.version_name,
        color=data.color,
        staff_admin_id=current_user.id,
    )
    if not done:
        raise HTTPException(status_code=400, detail="Failed to process custom order")
    order = await orders_dao.get_order(db, order_id)
    return ok("Custom order processed successfully", await _order_response(db, order))
