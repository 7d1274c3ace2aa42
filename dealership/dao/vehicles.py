import uuid
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.models import OrderDetail, VehicleModel, VehicleSerial, VehicleVariant

SERIAL_LENGTH = 8
_MAX_SERIAL_ATTEMPTS = 10


class SerialAllocationError(Exception):
    pass


async def get_model(db: AsyncSession, model_id: int) -> Optional[VehicleModel]:
    result = await db.execute(select(VehicleModel).where(VehicleModel.id == model_id))
    return result.scalar_one_or_none()


async def list_models(
    db: AsyncSession, active_only: bool = False, name_contains: Optional[str] = None
) -> List[VehicleModel]:
    stmt = select(VehicleModel).order_by(VehicleModel.id)
    if active_only:
        stmt = stmt.where(VehicleModel.is_active.is_(True))
    if name_contains:
        stmt = stmt.where(
            func.lower(VehicleModel.model_name).contains(name_contains.strip().lower(), autoescape=True)
        )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_variant(db: AsyncSession, variant_id: int) -> Optional[VehicleVariant]:
    result = await db.execute(select(VehicleVariant).where(VehicleVariant.id == variant_id))
    return result.scalar_one_or_none()


async def list_variants(
    db: AsyncSession, model_id: Optional[int] = None, active_only: bool = False
) -> List[VehicleVariant]:
    stmt = select(VehicleVariant).order_by(VehicleVariant.id)
    if model_id is not None:
        stmt = stmt.where(VehicleVariant.model_id == model_id)
    if active_only:
        stmt = stmt.where(VehicleVariant.is_active.is_(True))
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def model_list_price(db: AsyncSession, model_id: int) -> Optional[float]:
    """Cheapest active variant of the model."""
    result = await db.execute(
        select(func.min(VehicleVariant.price)).where(
            VehicleVariant.model_id == model_id, VehicleVariant.is_active.is_(True)
        )
    )
    return result.scalar_one_or_none()


async def get_serial(db: AsyncSession, serial_id: str) -> Optional[VehicleSerial]:
    result = await db.execute(select(VehicleSerial).where(VehicleSerial.serial_id == serial_id))
    return result.scalar_one_or_none()


async def generate_serial_id(db: AsyncSession) -> str:
    for _ in range(_MAX_SERIAL_ATTEMPTS):
        candidate = uuid.uuid4().hex[:SERIAL_LENGTH].upper()
        if await get_serial(db, candidate) is None:
            return candidate
    raise SerialAllocationError("Could not generate a free serial id")


async def create_serial(db: AsyncSession, variant_id: int) -> VehicleSerial:
    serial = VehicleSerial(serial_id=await generate_serial_id(db), variant_id=variant_id)
    db.add(serial)
    await db.flush()
    return serial


async def available_serials(db: AsyncSession, model_id: Optional[int] = None) -> List[tuple]:
    """(serial, variant) pairs not referenced by any order detail."""
    used = select(OrderDetail.serial_id).where(OrderDetail.serial_id.is_not(None))
    stmt = (
        select(VehicleSerial, VehicleVariant)
        .join(VehicleVariant, VehicleVariant.id == VehicleSerial.variant_id)
        .where(VehicleSerial.serial_id.not_in(used))
        .order_by(VehicleVariant.id, VehicleSerial.serial_id)
    )
    if model_id is not None:
        stmt = stmt.where(VehicleVariant.model_id == model_id)
    result = await db.execute(stmt)
    return [tuple(row) for row in result.all()]
