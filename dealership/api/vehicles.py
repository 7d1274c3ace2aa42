from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.database import get_db
from dealership.core.logging_config import get_logger
from dealership.dao import vehicles as vehicles_dao
from dealership.models import VehicleModel, VehicleVariant
from dealership.schemas.common import ApiResponse, ok
from dealership.schemas.vehicle import (
    InventoryItem,
    VehicleModelCreate,
    VehicleModelResponse,
    VehicleModelUpdate,
    VehicleVariantCreate,
    VehicleVariantResponse,
)

router = APIRouter(prefix="/api", tags=["vehicles"])
logger = get_logger(__name__)


async def _model_response(db: AsyncSession, model: VehicleModel) -> VehicleModelResponse:
    variants = await vehicles_dao.list_variants(db, model_id=model.id)
    return VehicleModelResponse(
        id=model.id,
        model_name=model.model_name,
        description=model.description,
        is_active=model.is_active,
        variants=[VehicleVariantResponse.model_validate(v) for v in variants],
    )


async def _get_model_or_404(db: AsyncSession, model_id: int) -> VehicleModel:
    model = await vehicles_dao.get_model(db, model_id)
    if model is None:
        raise HTTPException(status_code=404, detail=f"Vehicle model not found: {model_id}")
    return model


@router.get("/evm/models", response_model=ApiResponse[List[VehicleModelResponse]])
async def list_models(db: AsyncSession = Depends(get_db)):
    return ok("Vehicle models retrieved", [await _model_response(db, m) for m in await vehicles_dao.list_models(db)])


@router.post("/evm/models", response_model=ApiResponse[VehicleModelResponse])
async def create_model(data: VehicleModelCreate, db: AsyncSession = Depends(get_db)):
    model = VehicleModel(model_name=data.model_name.strip(), description=data.description, is_active=True)
    db.add(model)
    await db.flush()
    logger.info("Vehicle model %s created: %s", model.id, model.model_name)
    return ok("Vehicle model created", await _model_response(db, model))


@router.patch("/evm/models/{model_id}", response_model=ApiResponse[VehicleModelResponse])
async def update_model(model_id: int, data: VehicleModelUpdate, db: AsyncSession = Depends(get_db)):
    model = await _get_model_or_404(db, model_id)
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(model, key, value)
    await db.flush()
    return ok("Vehicle model updated", await _model_response(db, model))


@router.post("/evm/models/{model_id}/active", response_model=ApiResponse[VehicleModelResponse])
async def set_model_active(
    model_id: int,
    active: bool = Query(...),
    db: AsyncSession = Depends(get_db),
):
    """Enable or disable a model; disabled models cannot be ordered."""
    model = await _get_model_or_404(db, model_id)
    model.is_active = active
    await db.flush()
    return ok("Vehicle model updated", await _model_response(db, model))


@router.get("/evm/models/{model_id}/variants", response_model=ApiResponse[List[VehicleVariantResponse]])
async def model_variants(
    model_id: int,
    active: Optional[bool] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    await _get_model_or_404(db, model_id)
    variants = await vehicles_dao.list_variants(db, model_id=model_id, active_only=bool(active))
    if active is False:
        variants = [v for v in variants if not v.is_active]
    return ok("Vehicle variants retrieved", [VehicleVariantResponse.model_validate(v) for v in variants])


@router.post("/evm/variants", response_model=ApiResponse[VehicleVariantResponse])
async def create_variant(data: VehicleVariantCreate, db: AsyncSession = Depends(get_db)):
    await _get_model_or_404(db, data.model_id)
    variant = VehicleVariant(
        model_id=data.model_id,
        version_name=data.version_name.strip(),
        color=data.color,
        price=data.price,
        is_active=True,
    )
    db.add(variant)
    await db.flush()
    for _ in range(data.stock):
        await vehicles_dao.create_serial(db, variant.id)
    logger.info("Variant %s of model %s created with %s units", variant.id, data.model_id, data.stock)
    return ok("Vehicle variant created", VehicleVariantResponse.model_validate(variant))


@router.post("/evm/variants/{variant_id}/active", response_model=ApiResponse[VehicleVariantResponse])
async def set_variant_active(
    variant_id: int,
    active: bool = Query(...),
    db: AsyncSession = Depends(get_db),
):
    variant = await vehicles_dao.get_variant(db, variant_id)
    if variant is None:
        raise HTTPException(status_code=404, detail=f"Variant not found with ID: {variant_id}")
    variant.is_active = active
    await db.flush()
    return ok("Vehicle variant updated", VehicleVariantResponse.model_validate(variant))


@router.get("/staff/inventory", response_model=ApiResponse[List[InventoryItem]])
async def inventory(
    model_id: Optional[int] = Query(None, alias="modelId"),
    db: AsyncSession = Depends(get_db),
):
    """Registered units not yet attached to any order."""
    items = [
        InventoryItem(
            serial_id=serial.serial_id,
            variant_id=variant.id,
            model_id=variant.model_id,
            version_name=variant.version_name,
            color=variant.color,
            price=variant.price,
        )
        for serial, variant in await vehicles_dao.available_serials(db, model_id)
    ]
    return ok("Inventory retrieved", items)
