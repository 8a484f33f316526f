"""Uniform response envelope shared by every endpoint."""

from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


def iso_timestamp() -> str:
    """Current UTC time as an ISO 8601 string with millisecond precision."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ApiError(BaseModel):
    """Machine-readable error payload."""

    code: str = Field(..., description="Stable error code, e.g. PAYOUT_NOT_FOUND")
    message: str = Field(..., description="Human readable message")
    details: dict[str, Any] | None = None


class ApiResponse(BaseModel, Generic[T]):
    """Response envelope: ``{success, data?, error?, timestamp}``."""

    success: bool
    data: T | None = None
    error: ApiError | None = None
    timestamp: str = Field(default_factory=iso_timestamp)


def success_response(data: T) -> ApiResponse[T]:
    return ApiResponse[T](success=True, data=data)


def error_response(
    code: str, message: str, details: dict[str, Any] | None = None
) -> ApiResponse[Any]:
    return ApiResponse[Any](
        success=False,
        error=ApiError(code=code, message=message, details=details or None),
    )
