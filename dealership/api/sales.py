from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.auth_filter import get_current_user
from dealership.core.database import get_db
from dealership.core.dates import parse_date
from dealership.schemas.auth import UserInfo
from dealership.schemas.common import ApiResponse, ok
from dealership.schemas.sales import DealerSalesSummary, MonthlySales, SaleRecordResponse, SalesTarget
from dealership.services.sales_service import (
    company_monthly_breakdown,
    company_sales_target,
    dealer_sales_records,
    dealer_sales_summary,
    staff_sales_records,
)

router = APIRouter(prefix="/api", tags=["sales"])


def _date_range(start_date: Optional[str], end_date: Optional[str]):
    """Validated (start, end) strings; end is widened to cover the whole day."""
    start = parse_date(start_date)
    end = parse_date(end_date)
    if start is None or end is None:
        raise HTTPException(status_code=400, detail="startDate and endDate must be YYYY-MM-DD")
    if start > end:
        raise HTTPException(status_code=400, detail="startDate must not be after endDate")
    return start.isoformat(), end.isoformat() + " 23:59:59"


def _records(records) -> List[SaleRecordResponse]:
    return [SaleRecordResponse.model_validate(r) for r in records]


@router.get("/staff/sales-records", response_model=ApiResponse[List[SaleRecordResponse]])
async def my_sales_records(
    start_date: str = Query(..., alias="startDate"),
    end_date: str = Query(..., alias="endDate"),
    db: AsyncSession = Depends(get_db),
    current_user: UserInfo = Depends(get_current_user),
):
    start, end = _date_range(start_date, end_date)
    records = await staff_sales_records(db, current_user.id, start, end)
    return ok("Sales records retrieved", _records(records))


@router.get("/manager/sales-records", response_model=ApiResponse[List[SaleRecordResponse]])
async def dealer_records(
    start_date: str = Query(..., alias="startDate"),
    end_date: str = Query(..., alias="endDate"),
    dealer_id: Optional[int] = Query(None, alias="dealerId"),
    db: AsyncSession = Depends(get_db),
    current_user: UserInfo = Depends(get_current_user),
):
    dealer_id = dealer_id if dealer_id is not None else current_user.dealer_id
    if dealer_id is None:
        raise HTTPException(status_code=400, detail="dealerId is required")
    if current_user.dealer_id is not None and dealer_id != current_user.dealer_id:
        raise HTTPException(status_code=403, detail="Access denied")
    start, end = _date_range(start_date, end_date)
    records = await dealer_sales_records(db, dealer_id, start, end)
    return ok("Sales records retrieved", _records(records))


@router.get("/evm/dealers/sales-summary", response_model=ApiResponse[List[DealerSalesSummary]])
async def sales_summary(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    db: AsyncSession = Depends(get_db),
):
    start = end = None
    if start_date is not None or end_date is not None:
        start, end = _date_range(start_date, end_date)
    rows = await dealer_sales_summary(db, start, end)
    return ok("Dealer sales summary", [DealerSalesSummary(**r) for r in rows])


def _year(year: Optional[int]) -> int:
    return year if year is not None else date.today().year


@router.get("/evm/sales/monthly", response_model=ApiResponse[List[MonthlySales]])
async def monthly_sales(
    year: Optional[int] = Query(None, ge=1900, le=9999),
    db: AsyncSession = Depends(get_db),
):
    year = _year(year)
    months = await company_monthly_breakdown(db, year)
    if not any(m["total_orders"] for m in months):
        return ok(f"No sales in {year}", [MonthlySales(**m) for m in months])
    return ok(f"Monthly sales for {year}", [MonthlySales(**m) for m in months])


@router.get("/evm/sales/target", response_model=ApiResponse[SalesTarget])
async def sales_target(
    year: Optional[int] = Query(None, ge=1900, le=9999),
    db: AsyncSession = Depends(get_db),
):
    year = _year(year)
    target = await company_sales_target(db, year)
    if target["total_orders"] == 0:
        return ok(f"No sales in {year}", SalesTarget(**target))
    return ok(f"Sales target for {year}", SalesTarget(**target))
