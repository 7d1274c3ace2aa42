from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.auth_filter import get_current_user
from dealership.core.database import get_db
from dealership.dao import customers as customers_dao
from dealership.dao.customers import CustomerFilter
from dealership.models import Customer
from dealership.schemas.auth import UserInfo
from dealership.schemas.common import ApiResponse, ok
from dealership.schemas.customer import CustomerCreate, CustomerDebt, CustomerDebtSummary, CustomerResponse
from dealership.services.debt_service import customer_debt, dealer_debt_summary

router = APIRouter(prefix="/api", tags=["customers"])


@router.post("/staff/customers", response_model=ApiResponse[CustomerResponse])
async def create_customer(
    data: CustomerCreate,
    db: AsyncSession = Depends(get_db),
    current_user: UserInfo = Depends(get_current_user),
):
    customer = Customer(**data.model_dump(), dealer_id=current_user.dealer_id)
    db.add(customer)
    await db.flush()
    return ok("Customer created", CustomerResponse.model_validate(customer))


@router.get("/staff/customers", response_model=ApiResponse[List[CustomerResponse]])
async def list_customers(
    name: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: UserInfo = Depends(get_current_user),
):
    """Customers of the caller's dealer, optionally filtered by name."""
    rows = await customers_dao.list_customers(
        db, CustomerFilter(dealer_id=current_user.dealer_id, name_contains=name)
    )
    return ok("Customers retrieved", [CustomerResponse.model_validate(c) for c in rows])


@router.get("/staff/customers/{customer_id}", response_model=ApiResponse[CustomerResponse])
async def get_customer(customer_id: int, db: AsyncSession = Depends(get_db)):
    customer = await customers_dao.get_customer(db, customer_id)
    if customer is None:
        raise HTTPException(status_code=404, detail=f"Customer not found: {customer_id}")
    return ok("Customer retrieved", CustomerResponse.model_validate(customer))


@router.get("/staff/debt", response_model=ApiResponse[CustomerDebt])
async def debt_of_customer(
    customer_id: int = Query(..., alias="customerId"),
    db: AsyncSession = Depends(get_db),
):
    total = await customer_debt(db, customer_id)
    return ok("Customer debt computed", CustomerDebt(customer_id=customer_id, total_debt=total))


@router.get("/staff/customer-debts", response_model=ApiResponse[List[CustomerDebtSummary]])
async def dealer_customer_debts(
    db: AsyncSession = Depends(get_db),
    current_user: UserInfo = Depends(get_current_user),
):
    """Customers of the caller's dealer with an outstanding balance, largest first."""
    if current_user.dealer_id is None:
        raise HTTPException(status_code=400, detail="User is not assigned to a dealer")
    rows = await dealer_debt_summary(db, current_user.dealer_id)
    return ok("Customer debts retrieved", [CustomerDebtSummary(**r) for r in rows])
