from datetime import datetime, timezone
from typing import Any, Generic, Optional, TypeVar

from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

T = TypeVar("T")


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class ApiResponse(BaseModel, Generic[T]):
    """
    Uniform wrapper for every API response
    """
    success: bool = Field(..., description="Whether the request succeeded")
    data: Optional[T] = Field(None, description="Response payload")
    error: Optional[str] = Field(None, description="Error message", examples=["User not found"])
    message: Optional[str] = Field(None, description="Human readable outcome", examples=["User created successfully"])
    count: Optional[int] = Field(None, description="Number of items in data, for list responses")
    timestamp: str = Field(default_factory=utc_timestamp, description="ISO-8601 response time")


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, list):
        return [_to_jsonable(item) for item in value]
    return value


def envelope(status_code: int = 200, **fields) -> JSONResponse:
    """Render an ApiResponse, omitting the fields that were not set."""
    if "data" in fields:
        fields["data"] = _to_jsonable(fields["data"])
    body = ApiResponse(**fields)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
    )
