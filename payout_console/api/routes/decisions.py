"""API routes for payout decisions."""

from fastapi import APIRouter, Depends

from payout_console.core.dependencies import Store
from payout_console.domain.models.payout import PayoutDecision
from payout_console.schemas.decision import DecisionRequest
from payout_console.schemas.envelope import ApiResponse, success_response
from payout_console.services.decision_service import DecisionService

router = APIRouter(prefix="/decisions", tags=["decisions"])


def get_decision_service(store: Store) -> DecisionService:
    """Get decision service instance."""
    return DecisionService(store)


@router.post(
    "/{payout_id}",
    response_model=ApiResponse[PayoutDecision],
    response_model_exclude_none=True,
    status_code=201,
)
async def create_decision(
    payout_id: str,
    request: DecisionRequest,
    decision_service: DecisionService = Depends(get_decision_service),
) -> ApiResponse[PayoutDecision]:
    """Record an approve, reject or hold decision for a payout.

    Error codes:
    - PAYOUT_NOT_FOUND (404)
    - PAYOUT_ALREADY_PAID (400)
    - INVALID_DECISION (400): unknown decision, or rejection without a reason
    - MISSING_DECIDED_BY (400)
    """
    decision = decision_service.create_decision(
        payout_id=payout_id,
        decision=request.decision,
        reason=request.reason,
        decided_by=request.decided_by,
    )
    return success_response(decision)


@router.get(
    "/{payout_id}",
    response_model=ApiResponse[list[PayoutDecision]],
    response_model_exclude_none=True,
)
async def list_decisions(
    payout_id: str,
    decision_service: DecisionService = Depends(get_decision_service),
) -> ApiResponse[list[PayoutDecision]]:
    """Decision audit trail for a payout, oldest first."""
    return success_response(decision_service.list_decisions(payout_id))
