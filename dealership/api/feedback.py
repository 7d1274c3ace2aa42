from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.database import get_db
from dealership.dao import customers as customers_dao
from dealership.dao import feedback as feedback_dao
from dealership.dao import orders as orders_dao
from dealership.schemas.common import ApiResponse, ok
from dealership.schemas.customer import CustomerResponse
from dealership.schemas.feedback import CustomerFeedback, FeedbackCreate, FeedbackResponse
from dealership.services.feedback_service import create_feedback, delete_feedback

router = APIRouter(prefix="/api/staff/feedback", tags=["feedback"])


@router.post("", response_model=ApiResponse[FeedbackResponse])
async def add_feedback(data: FeedbackCreate, db: AsyncSession = Depends(get_db)):
    if await customers_dao.get_customer(db, data.customer_id) is None:
        raise HTTPException(status_code=404, detail=f"Customer not found: {data.customer_id}")
    order_id = data.order_id if data.order_id else None
    if order_id is not None:
        order = await orders_dao.get_order(db, order_id)
        if order is None or order.customer_id != data.customer_id:
            raise HTTPException(status_code=400, detail=f"Order {order_id} does not belong to the customer")
    feedback = await create_feedback(
        db,
        customer_id=data.customer_id,
        content=data.content,
        order_id=order_id,
        feedback_type=data.type,
        status=data.status,
    )
    if feedback is None:
        raise HTTPException(status_code=400, detail="Feedback could not be saved")
    return ok("Feedback created", FeedbackResponse.model_validate(feedback))


@router.delete("/{feedback_id}", response_model=ApiResponse[None])
async def remove_feedback(feedback_id: int, db: AsyncSession = Depends(get_db)):
    if not await delete_feedback(db, feedback_id):
        raise HTTPException(status_code=404, detail=f"Feedback not found: {feedback_id}")
    return ok("Feedback deleted")


@router.get("/by-customer/{customer_id}", response_model=ApiResponse[CustomerFeedback])
async def feedback_of_customer(customer_id: int, db: AsyncSession = Depends(get_db)):
    customer = await customers_dao.get_customer(db, customer_id)
    if customer is None:
        raise HTTPException(status_code=404, detail=f"Customer not found: {customer_id}")
    rows = await feedback_dao.feedback_for_customer(db, customer_id)
    return ok("Feedback retrieved", CustomerFeedback(
        customer=CustomerResponse.model_validate(customer),
        feedback=[FeedbackResponse.model_validate(f) for f in rows],
    ))
