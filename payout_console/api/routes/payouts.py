"""API routes for payout lists, snapshot and details."""

from fastapi import APIRouter, Depends, Query

from payout_console.core.dependencies import Store
from payout_console.domain.models.payout import FundsSnapshot, Payout, PayoutWithDetails
from payout_console.schemas.envelope import ApiResponse, success_response
from payout_console.services.payout_service import PayoutQueryService

router = APIRouter(prefix="/payouts", tags=["payouts"])


def get_payout_service(store: Store) -> PayoutQueryService:
    """Get payout query service instance."""
    return PayoutQueryService(store)


@router.get(
    "",
    response_model=ApiResponse[list[Payout]],
    response_model_exclude_none=True,
)
async def list_payouts(
    status: str | None = Query(
        None,
        description="all, pending, flagged, paid, approved, rejected or held",
    ),
    payout_service: PayoutQueryService = Depends(get_payout_service),
) -> ApiResponse[list[Payout]]:
    """List payouts ordered by scheduled date, newest first."""
    return success_response(payout_service.list_payouts(status))


@router.get(
    "/snapshot",
    response_model=ApiResponse[FundsSnapshot],
    response_model_exclude_none=True,
)
async def get_funds_snapshot(
    payout_service: PayoutQueryService = Depends(get_payout_service),
) -> ApiResponse[FundsSnapshot]:
    """Totals for payouts scheduled today, overall and for held/flagged payouts."""
    return success_response(payout_service.get_snapshot())


@router.get(
    "/{payout_id}",
    response_model=ApiResponse[PayoutWithDetails],
    response_model_exclude_none=True,
)
async def get_payout(
    payout_id: str,
    payout_service: PayoutQueryService = Depends(get_payout_service),
) -> ApiResponse[PayoutWithDetails]:
    """Get a payout with its creator, invoices, fraud signals and latest payment attempt."""
    return success_response(payout_service.get_payout_detail(payout_id))
