from typing import List, Optional

from pydantic import Field

from dealership.schemas.common import CamelModel


class VehicleModelCreate(CamelModel):
    model_name: str = Field(..., min_length=1)
    description: Optional[str] = None


class VehicleModelUpdate(CamelModel):
    model_name: Optional[str] = None
    description: Optional[str] = None


class VehicleVariantCreate(CamelModel):
    model_id: int
    version_name: str = Field(..., min_length=1)
    color: Optional[str] = None
    price: float = Field(..., gt=0)
    # number of physical units to register right away
    stock: int = Field(default=0, ge=0, le=500)


class VehicleVariantResponse(CamelModel):
    id: int
    model_id: int
    version_name: str
    color: Optional[str] = None
    price: float
    is_active: bool


class VehicleModelResponse(CamelModel):
    id: int
    model_name: str
    description: Optional[str] = None
    is_active: bool
    variants: List[VehicleVariantResponse] = []


class InventoryItem(CamelModel):
    serial_id: str
    variant_id: int
    model_id: int
    version_name: str
    color: Optional[str] = None
    price: float
