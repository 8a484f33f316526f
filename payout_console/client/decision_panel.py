"""Decision panel for a single payout.

States::

    NO_DECISION -> DECISION_SELECTED -> SUBMITTING -> SUCCESS
                          ^                 |
                          +---- failure ----+
"""

import asyncio
from collections.abc import Callable
from enum import Enum

from payout_console.client.announcer import Announcer, Politeness
from payout_console.client.api import ApiRequestError, PayoutApiClient
from payout_console.client.mutations import DecisionMutation
from payout_console.client.query_cache import PAYOUT_DETAIL_OPTIONS, QueryCache, payout_keys
from payout_console.core.logging import LoggerMixin
from payout_console.domain.models.payout import (
    DecisionType,
    Payout,
    PayoutDecision,
    PayoutStatus,
    PayoutWithDetails,
)
from payout_console.services.decision_validator import REASON_REQUIRED

NO_ACTION_STATUSES = frozenset({PayoutStatus.PAID, PayoutStatus.REJECTED})

SELECT_DECISION_MESSAGE = "Please select a decision"
REASON_REQUIRED_MESSAGE = "A reason is required when rejecting a payout"


class PanelState(str, Enum):
    NO_DECISION = "no_decision"
    DECISION_SELECTED = "decision_selected"
    SUBMITTING = "submitting"
    SUCCESS = "success"


class DecisionPanel(LoggerMixin):
    def __init__(
        self,
        payout: Payout,
        api: PayoutApiClient,
        cache: QueryCache,
        mutation: DecisionMutation,
        announcer: Announcer,
        decided_by: str,
        close_delay: float = 1.5,
        on_close: Callable[[], None] | None = None,
    ):
        self.payout = payout
        self.api = api
        self.cache = cache
        self.mutation = mutation
        self.announcer = announcer
        self.decided_by = decided_by
        self.close_delay = close_delay
        self.on_close = on_close

        self.state = PanelState.NO_DECISION
        self.decision: DecisionType | None = None
        self.reason = ""
        self.error: str | None = None
        self.details: PayoutWithDetails | None = None
        self.load_error: str | None = None
        self.closed = False
        self._close_handle: asyncio.TimerHandle | None = None

        self.announcer.announce(f"Payout details panel opened for {payout.id}")

    @property
    def can_take_action(self) -> bool:
        return self.payout.status not in NO_ACTION_STATUSES

    @property
    def reason_required(self) -> bool:
        return self.decision is not None and self.decision.value in REASON_REQUIRED

    @property
    def can_submit(self) -> bool:
        if self.state == PanelState.SUBMITTING or self.decision is None:
            return False
        return not (self.reason_required and not self.reason.strip())

    async def load_details(self) -> PayoutWithDetails | None:
        """Fetch the payout's details; ignored if the panel closed meanwhile."""
        try:
            details = await self.cache.fetch_query(
                payout_keys.detail(self.payout.id),
                lambda: self.api.get_payout(self.payout.id),
                PAYOUT_DETAIL_OPTIONS,
            )
        except ApiRequestError as exc:
            if not self.closed:
                self.load_error = exc.message
            return None

        if self.closed:
            return None
        self.details = details
        self.load_error = None
        return details

    def select_decision(self, decision: DecisionType | str) -> None:
        if self.state == PanelState.SUBMITTING:
            return
        self.decision = DecisionType(decision)
        self.error = None
        self.mutation.reset()
        self.state = PanelState.DECISION_SELECTED

    def set_reason(self, text: str) -> None:
        self.reason = text

    async def submit(self) -> PayoutDecision | None:
        if self.state == PanelState.SUBMITTING:
            return None
        if self.decision is None:
            self.error = SELECT_DECISION_MESSAGE
            return None
        if self.reason_required and not self.reason.strip():
            self.error = REASON_REQUIRED_MESSAGE
            return None

        decision = self.decision
        self.state = PanelState.SUBMITTING
        self.error = None
        try:
            result = await self.mutation.mutate(
                self.payout.id,
                decision,
                self.decided_by,
                self.reason.strip() or None,
            )
        except ApiRequestError as exc:
            self.error = exc.message or "Failed to submit decision"
            self.state = PanelState.DECISION_SELECTED
            self.announcer.announce("Decision failed. Please try again.", Politeness.ASSERTIVE)
            return None

        self.state = PanelState.SUCCESS
        self.announcer.announce(f"Payout {decision.value} successfully")
        self._schedule_close()
        return result

    def _schedule_close(self) -> None:
        loop = asyncio.get_running_loop()
        self._close_handle = loop.call_later(self.close_delay, self.close)

    def close(self) -> None:
        if self._close_handle is not None:
            self._close_handle.cancel()
            self._close_handle = None
        if self.closed:
            return
        self.closed = True
        self.logger.debug("Decision panel closed", payout_id=self.payout.id)
        if self.on_close is not None:
            self.on_close()
