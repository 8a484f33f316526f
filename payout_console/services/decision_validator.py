"""Validation rules for operator decisions."""

from dataclasses import dataclass

from payout_console.core.errors import InvalidDecisionError
from payout_console.domain.models.payout import DecisionType

VALID_DECISIONS = tuple(d.value for d in DecisionType)

# Decisions that cannot be recorded without a reason
REASON_REQUIRED = frozenset({DecisionType.REJECTED.value})


@dataclass(frozen=True)
class DecisionValidation:
    valid: bool
    error: str | None = None
    code: str | None = None


def validate_decision(decision: str | None, reason: str | None = None) -> DecisionValidation:
    """Check a decision type and its reason against the decision rules.

    Pure and total: never raises, whatever strings it is given.
    """
    if decision not in VALID_DECISIONS:
        return DecisionValidation(
            valid=False,
            error=f"Invalid decision. Must be one of: {', '.join(VALID_DECISIONS)}",
            code=InvalidDecisionError.code,
        )

    if decision in REASON_REQUIRED and not (reason or "").strip():
        return DecisionValidation(
            valid=False,
            error="A reason is required when rejecting a payout",
            code=InvalidDecisionError.code,
        )

    return DecisionValidation(valid=True)
