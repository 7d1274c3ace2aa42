from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")

STATUS_SUCCESS = "success"
STATUS_ERROR = "error"


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ApiResponse(BaseModel, Generic[T]):
    status: str
    message: str
    data: Optional[T] = None


def ok(message: str, data=None) -> ApiResponse:
    return ApiResponse(status=STATUS_SUCCESS, message=message, data=data)


def error_body(message: str) -> dict:
    return {"status": STATUS_ERROR, "message": message, "data": None}
