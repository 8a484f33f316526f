"""Schemas package for request/response models."""

from payout_console.schemas.decision import DecisionRequest
from payout_console.schemas.envelope import (
    ApiError,
    ApiResponse,
    error_response,
    iso_timestamp,
    success_response,
)

__all__ = [
    # Envelope
    "ApiError",
    "ApiResponse",
    "error_response",
    "iso_timestamp",
    "success_response",
    # Decisions
    "DecisionRequest",
]
