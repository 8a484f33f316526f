"""Decision request schemas."""

from pydantic import Field

from payout_console.domain.models.payout import DomainModel


class DecisionRequest(DomainModel):
    """Body of ``POST /decisions/{payoutId}``.

    Every field is optional at the schema level so that missing values reach
    the decision rules and come back with their specific error codes
    (INVALID_DECISION, MISSING_DECIDED_BY) instead of a generic 422.
    """

    decision: str | None = Field(None, description="approved, rejected or held")
    reason: str | None = Field(None, description="Required when rejecting")
    decided_by: str | None = Field(None, description="Operator recording the decision")
