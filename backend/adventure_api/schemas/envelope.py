"""
Uniform response envelopes.

Success: {"statusCode", "data", "message", "success"}
Error:   {"success": false, "message", "errors"?}
"""

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    status_code: int = Field(200, alias="statusCode")
    data: Optional[T] = None
    message: str = "Success"

    model_config = ConfigDict(populate_by_name=True)

    @computed_field
    @property
    def success(self) -> bool:
        return self.status_code < 400


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    errors: Optional[list[dict[str, Any]]] = None


def respond(data: Any = None, message: str = "Success", status_code: int = 200) -> ApiResponse:
    return ApiResponse(status_code=status_code, data=data, message=message)
