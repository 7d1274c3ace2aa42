from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.database import get_db
from dealership.dao import vehicles as vehicles_dao
from dealership.schemas.common import ApiResponse, ok
from dealership.schemas.vehicle import VehicleModelResponse, VehicleVariantResponse

router = APIRouter(prefix="/api/public", tags=["public"])


async def _active_catalogue(db: AsyncSession, name_contains=None) -> List[VehicleModelResponse]:
    out = []
    for m in await vehicles_dao.list_models(db, active_only=True, name_contains=name_contains):
        variants = await vehicles_dao.list_variants(db, model_id=m.id, active_only=True)
        out.append(VehicleModelResponse(
            id=m.id,
            model_name=m.model_name,
            description=m.description,
            is_active=m.is_active,
            variants=[VehicleVariantResponse.model_validate(v) for v in variants],
        ))
    return out


@router.get("/models", response_model=ApiResponse[List[VehicleModelResponse]])
async def public_models(db: AsyncSession = Depends(get_db)):
    """Active models with their active variants."""
    return ok("Vehicle models retrieved", await _active_catalogue(db))


@router.get("/compare", response_model=ApiResponse[List[VehicleModelResponse]])
async def compare_models(
    vehicle_name: str = Query(..., alias="vehicleName", min_length=1),
    db: AsyncSession = Depends(get_db),
):
    """Active models whose name contains ``vehicleName``, side by side with their active variants."""
    if not vehicle_name.strip():
        raise HTTPException(status_code=400, detail="vehicleName must not be blank")
    models = await _active_catalogue(db, name_contains=vehicle_name)
    if not models:
        raise HTTPException(status_code=404, detail=f"No vehicle matches: {vehicle_name}")
    return ok("Vehicles to compare", models)
