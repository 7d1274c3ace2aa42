from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.auth_filter import get_current_user
from dealership.core.database import get_db
from dealership.core.dates import parse_date
from dealership.dao import promotions as promotions_dao
from dealership.dao import users as users_dao
from dealership.models import DealerPromotion, Promotion
from dealership.schemas.auth import UserInfo
from dealership.schemas.common import ApiResponse, ok
from dealership.schemas.promotion import DealerLink, PromotionCreate, PromotionResponse
from dealership.services.pricing import discount_percent

router = APIRouter(prefix="/api", tags=["promotions"])


async def _promotion_response(db: AsyncSession, promo: Promotion) -> PromotionResponse:
    resp = PromotionResponse.model_validate(promo)
    resp.dealer_ids = await promotions_dao.dealer_ids_for_promotion(db, promo.id)
    return resp


@router.post("/evm/promotions", response_model=ApiResponse[PromotionResponse])
async def create_promotion(data: PromotionCreate, db: AsyncSession = Depends(get_db)):
    if discount_percent(data.discount_rate) is None:
        raise HTTPException(status_code=400, detail="discountRate must be a number, optionally with %")
    if parse_date(data.start_date) > parse_date(data.end_date):
        raise HTTPException(status_code=400, detail="startDate must not be after endDate")
    promo = Promotion(**data.model_dump())
    db.add(promo)
    await db.flush()
    return ok("Promotion created", await _promotion_response(db, promo))


@router.get("/evm/promotions", response_model=ApiResponse[List[PromotionResponse]])
async def list_promotions(db: AsyncSession = Depends(get_db)):
    return ok("Promotions retrieved", [await _promotion_response(db, p) for p in await promotions_dao.list_promotions(db)])


@router.delete("/evm/promotions/{promo_id}", response_model=ApiResponse[None])
async def delete_promotion(promo_id: int, db: AsyncSession = Depends(get_db)):
    if not await promotions_dao.delete_promotion(db, promo_id):
        raise HTTPException(status_code=404, detail=f"Promotion not found: {promo_id}")
    return ok("Promotion deleted")


@router.post("/evm/promotions/{promo_id}/dealers", response_model=ApiResponse[PromotionResponse])
async def link_promotion(promo_id: int, data: DealerLink, db: AsyncSession = Depends(get_db)):
    promo = await promotions_dao.get_promotion(db, promo_id)
    if promo is None:
        raise HTTPException(status_code=404, detail=f"Promotion not found: {promo_id}")
    if await users_dao.get_dealer(db, data.dealer_id) is None:
        raise HTTPException(status_code=404, detail=f"Dealer not found: {data.dealer_id}")
    if not await promotions_dao.link_exists(db, promo_id, data.dealer_id):
        db.add(DealerPromotion(promo_id=promo_id, dealer_id=data.dealer_id))
        await db.flush()
    return ok("Promotion linked to dealer", await _promotion_response(db, promo))


@router.get("/staff/promotions", response_model=ApiResponse[List[PromotionResponse]])
async def dealer_promotions(
    db: AsyncSession = Depends(get_db),
    current_user: UserInfo = Depends(get_current_user),
):
    if current_user.dealer_id is None:
        return ok("Promotions retrieved", [])
    promos = await promotions_dao.promotions_for_dealer(db, current_user.dealer_id)
    return ok("Promotions retrieved", [await _promotion_response(db, p) for p in promos])
