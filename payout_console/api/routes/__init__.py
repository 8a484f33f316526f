"""API routes package."""

from fastapi import APIRouter

from payout_console.api.routes.decisions import router as decisions_router
from payout_console.api.routes.health import router as health_router
from payout_console.api.routes.payouts import router as payouts_router

# Create API router with all sub-routers
api_router = APIRouter()

# Register all route modules
api_router.include_router(health_router)
api_router.include_router(payouts_router)
api_router.include_router(decisions_router)


__all__ = [
    "api_router",
    "decisions_router",
    "health_router",
    "payouts_router",
]
