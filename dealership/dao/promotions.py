from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.models import DealerPromotion, Promotion


async def get_promotion(db: AsyncSession, promo_id: int) -> Optional[Promotion]:
    result = await db.execute(select(Promotion).where(Promotion.id == promo_id))
    return result.scalar_one_or_none()


async def list_promotions(db: AsyncSession) -> List[Promotion]:
    result = await db.execute(select(Promotion).order_by(Promotion.id))
    return list(result.scalars().all())


async def promotions_for_dealer(db: AsyncSession, dealer_id: int) -> List[Promotion]:
    result = await db.execute(
        select(Promotion)
        .join(DealerPromotion, DealerPromotion.promo_id == Promotion.id)
        .where(DealerPromotion.dealer_id == dealer_id)
        .order_by(Promotion.id)
    )
    return list(result.scalars().all())


async def dealer_ids_for_promotion(db: AsyncSession, promo_id: int) -> List[int]:
    result = await db.execute(
        select(DealerPromotion.dealer_id).where(DealerPromotion.promo_id == promo_id).order_by(DealerPromotion.dealer_id)
    )
    return list(result.scalars().all())


async def link_exists(db: AsyncSession, promo_id: int, dealer_id: int) -> bool:
    result = await db.execute(
        select(DealerPromotion.promo_id).where(
            DealerPromotion.promo_id == promo_id, DealerPromotion.dealer_id == dealer_id
        )
    )
    return result.scalar_one_or_none() is not None


async def delete_promotion(db: AsyncSession, promo_id: int) -> bool:
    await db.execute(delete(DealerPromotion).where(DealerPromotion.promo_id == promo_id))
    result = await db.execute(delete(Promotion).where(Promotion.id == promo_id))
    return result.rowcount > 0
