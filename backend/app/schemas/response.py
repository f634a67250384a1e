"""
Success envelope shared by every endpoint.
"""
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field, model_validator

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """
    Uniform JSON envelope:
        {"status_code": 200, "data": {...}, "message": "Success", "success": true}
    """
    status_code: int = Field(..., description="HTTP status code")
    data: T = Field(..., description="Response payload")
    message: str = Field(default="Success", description="Human readable message")
    success: bool = Field(default=True, description="True when status_code < 400")

    @model_validator(mode="before")
    @classmethod
    def _derive_success(cls, values: Any) -> Any:
        if isinstance(values, dict) and "status_code" in values:
            values = {**values, "success": values["status_code"] < 400}
        return values
