"""Health check routes."""

from fastapi import APIRouter
from pydantic import BaseModel

from payout_console import __version__
from payout_console.core.dependencies import Store
from payout_console.schemas.envelope import iso_timestamp

router = APIRouter(prefix="/health", tags=["Health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str


class ReadyResponse(BaseModel):
    """Readiness check response."""

    status: str
    store: str
    records: dict[str, int]


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service is running.",
)
async def health_check() -> HealthResponse:
    """Return service health status."""
    return HealthResponse(
        status="ok",
        version=__version__,
        timestamp=iso_timestamp(),
    )


@router.get(
    "/ready",
    response_model=ReadyResponse,
    summary="Readiness check",
    description="Check if the record store is loaded and ready to serve traffic.",
)
async def readiness_check(store: Store) -> ReadyResponse:
    """Return service readiness status."""
    counts = store.counts()
    return ReadyResponse(
        status="ready" if counts.get("payouts", 0) > 0 else "empty",
        store="in-memory",
        records=counts,
    )


@router.get(
    "/live",
    summary="Liveness check",
    description="Liveness probe endpoint.",
)
async def liveness_check() -> dict:
    """Return liveness status."""
    return {"status": "alive"}
