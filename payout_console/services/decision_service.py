"""Decision service: records operator decisions against payouts."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from payout_console.core.errors import (
    InvalidDecisionError,
    MissingDecidedByError,
    PayoutAlreadyPaidError,
    PayoutNotFoundError,
)
from payout_console.domain.models.payout import (
    TERMINAL_PAYOUT_STATUSES,
    DecisionType,
    PayoutDecision,
    PayoutStatus,
)
from payout_console.persistence.base import RecordStore
from payout_console.services.decision_validator import validate_decision

logger = logging.getLogger(__name__)

# Status a payout takes once a decision is recorded
DECISION_STATUS_MAP = {
    DecisionType.APPROVED: PayoutStatus.APPROVED,
    DecisionType.REJECTED: PayoutStatus.REJECTED,
    DecisionType.HELD: PayoutStatus.HELD,
}


def utc_now() -> datetime:
    return datetime.now(UTC)


def _clean_reason(reason: str | None) -> str | None:
    if reason is None:
        return None
    return reason.strip() or None


class DecisionService:
    """Service for applying operator decisions.

    The only writer of payout status and of the decision audit log.
    """

    def __init__(self, store: RecordStore, clock: Callable[[], datetime] = utc_now):
        self.store = store
        self.clock = clock

    def create_decision(
        self,
        payout_id: str,
        decision: str | None,
        reason: str | None = None,
        decided_by: str | None = None,
    ) -> PayoutDecision:
        """Validate and apply a decision.

        Checks run in a fixed order: payout exists, payout not already paid,
        decision content valid, decider named. The status update and the audit
        append happen under the store's write lock, so they are observed
        together or not at all. Repeated calls append repeated records.
        """
        with self.store.write_lock():
            payout = self.store.get_payout(payout_id)
            if payout is None:
                raise PayoutNotFoundError(
                    f"Payout with ID {payout_id} not found",
                    details={"payout_id": payout_id},
                )

            if payout.status in TERMINAL_PAYOUT_STATUSES:
                raise PayoutAlreadyPaidError(
                    "Cannot modify a payout that has already been paid",
                    details={"payout_id": payout_id, "status": payout.status.value},
                )

            validation = validate_decision(decision, reason)
            if not validation.valid:
                raise InvalidDecisionError(
                    validation.error or "Invalid decision",
                    details={"decision": decision},
                )

            if not decided_by or not decided_by.strip():
                raise MissingDecidedByError("decidedBy field is required")

            decision_type = DecisionType(decision)
            new_status = DECISION_STATUS_MAP[decision_type]
            now = self.clock()

            record = PayoutDecision(
                id=self.store.generate_id("decision"),
                payout_id=payout_id,
                decision=decision_type,
                reason=_clean_reason(reason),
                decided_by=decided_by.strip(),
                created_at=now,
            )

            self.store.update_payout_status(payout_id, new_status, now)
            self.store.append_decision(record)

        logger.info(
            "Decision created",
            extra={
                "payout_id": payout_id,
                "decision": decision_type.value,
                "decided_by": record.decided_by,
                "previous_status": payout.status.value,
                "new_status": new_status.value,
            },
        )
        return record

    def list_decisions(self, payout_id: str) -> list[PayoutDecision]:
        """Audit trail for a payout, oldest first."""
        if self.store.get_payout(payout_id) is None:
            raise PayoutNotFoundError(
                f"Payout with ID {payout_id} not found",
                details={"payout_id": payout_id},
            )
        return self.store.list_decisions(payout_id)
