from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.auth_filter import get_current_user
from dealership.core.database import get_db
from dealership.dao import customers as customers_dao
from dealership.dao import vehicles as vehicles_dao
from dealership.schemas.auth import UserInfo
from dealership.schemas.common import ApiResponse, ok
from dealership.schemas.customer import CustomerResponse
from dealership.schemas.schedule import (
    CustomerSchedules,
    ScheduleCreate,
    ScheduleResponse,
    ScheduleStatusUpdate,
)
from dealership.services.schedule_service import (
    SlotTakenError,
    create_schedule,
    schedules_by_customer_name,
    schedules_for_dealer,
    update_schedule_status,
)

router = APIRouter(prefix="/api/staff/test-drives", tags=["test-drives"])


def _grouped(groups) -> List[CustomerSchedules]:
    return [
        CustomerSchedules(
            customer=CustomerResponse.model_validate(g["customer"]),
            schedules=[ScheduleResponse.model_validate(s) for s in g["schedules"]],
        )
        for g in groups
    ]


@router.post("", response_model=ApiResponse[ScheduleResponse])
async def book_test_drive(data: ScheduleCreate, db: AsyncSession = Depends(get_db)):
    if await customers_dao.get_customer(db, data.customer_id) is None:
        raise HTTPException(status_code=404, detail=f"Customer not found: {data.customer_id}")
    if await vehicles_dao.get_serial(db, data.serial_id) is None:
        raise HTTPException(status_code=404, detail=f"Serial not found: {data.serial_id}")
    try:
        schedule = await create_schedule(db, data.customer_id, data.serial_id, data.date.strip(), data.status)
    except SlotTakenError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if schedule is None:
        raise HTTPException(status_code=400, detail="Test drive could not be booked")
    return ok("Test drive booked", ScheduleResponse.model_validate(schedule))


@router.patch("/{schedule_id}", response_model=ApiResponse[ScheduleResponse])
async def change_test_drive_status(
    schedule_id: int,
    data: ScheduleStatusUpdate,
    db: AsyncSession = Depends(get_db),
):
    schedule = await update_schedule_status(db, schedule_id, data.status)
    if schedule is None:
        raise HTTPException(status_code=404, detail=f"Test drive not found: {schedule_id}")
    return ok("Test drive updated", ScheduleResponse.model_validate(schedule))


@router.get("", response_model=ApiResponse[List[CustomerSchedules]])
async def test_drives_by_customer(
    customer_name: str = Query(..., alias="customerName", min_length=1),
    db: AsyncSession = Depends(get_db),
    current_user: UserInfo = Depends(get_current_user),
):
    groups = await schedules_by_customer_name(db, customer_name, current_user.dealer_id)
    return ok("Test drives retrieved", _grouped(groups))


@router.get("/dealer", response_model=ApiResponse[List[CustomerSchedules]])
async def test_drives_of_dealer(
    db: AsyncSession = Depends(get_db),
    current_user: UserInfo = Depends(get_current_user),
):
    if current_user.dealer_id is None:
        raise HTTPException(status_code=400, detail="User is not assigned to a dealer")
    groups = await schedules_for_dealer(db, current_user.dealer_id)
    return ok("Test drives retrieved", _grouped(groups))
