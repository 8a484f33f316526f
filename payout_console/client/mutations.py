"""Optimistic decision mutations.

A decision is shown in the cache before the server confirms it. The cached
payout lists and the payout's detail entry are snapshotted first, so that a
failed request can put back exactly what was there.

    IDLE -> APPLIED -> COMMITTED
                    -> ROLLED_BACK
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from payout_console.client.announcer import Announcer, Politeness
from payout_console.client.api import PayoutApiClient
from payout_console.client.query_cache import QueryCache, QueryKey, payout_keys
from payout_console.core.logging import LoggerMixin
from payout_console.domain.models.payout import (
    DecisionType,
    Payout,
    PayoutDecision,
    PayoutStatus,
)


class MutationState(str, Enum):
    IDLE = "idle"
    APPLIED = "applied"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class InvalidTransition(Exception):
    pass


@dataclass(frozen=True)
class CacheSnapshot:
    lists: list[tuple[QueryKey, Any]]
    detail: Any


class OptimisticDecision:
    def __init__(
        self,
        cache: QueryCache,
        payout_id: str,
        decision: DecisionType,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ):
        self.cache = cache
        self.payout_id = payout_id
        self.decision = decision
        self.state = MutationState.IDLE
        self.snapshot: CacheSnapshot | None = None
        self._clock = clock

    def _require(self, expected: MutationState) -> None:
        if self.state != expected:
            raise InvalidTransition(f"Expected state {expected.value}, got {self.state.value}")

    def _patch(self, payout: Payout) -> Payout:
        if payout.id != self.payout_id:
            return payout
        return payout.model_copy(
            update={"status": PayoutStatus(self.decision.value), "updated_at": self._clock()}
        )

    def apply(self) -> None:
        self._require(MutationState.IDLE)
        self.cache.cancel_queries(payout_keys.all)

        detail_key = payout_keys.detail(self.payout_id)
        self.snapshot = CacheSnapshot(
            lists=self.cache.get_queries_data(payout_keys.lists()),
            detail=self.cache.get_query_data(detail_key),
        )

        self.cache.set_queries_data(
            payout_keys.lists(), lambda payouts: [self._patch(p) for p in payouts]
        )
        if self.snapshot.detail is not None:
            self.cache.set_query_data(detail_key, self._patch(self.snapshot.detail))

        self.state = MutationState.APPLIED

    def commit(self) -> None:
        self._require(MutationState.APPLIED)
        self.state = MutationState.COMMITTED

    def rollback(self) -> None:
        self._require(MutationState.APPLIED)
        assert self.snapshot is not None
        for key, payouts in self.snapshot.lists:
            self.cache.set_query_data(key, payouts)
        if self.snapshot.detail is not None:
            self.cache.set_query_data(payout_keys.detail(self.payout_id), self.snapshot.detail)
        self.state = MutationState.ROLLED_BACK


class DecisionMutation(LoggerMixin):
    """Submit decisions with optimistic cache updates and announcements.

    Whatever the outcome, every payout query is invalidated afterwards so the
    cache converges on what the server holds.
    """

    def __init__(self, api: PayoutApiClient, cache: QueryCache, announcer: Announcer):
        self.api = api
        self.cache = cache
        self.announcer = announcer
        self.current: OptimisticDecision | None = None

    @property
    def is_pending(self) -> bool:
        return self.current is not None and self.current.state == MutationState.APPLIED

    def reset(self) -> None:
        self.current = None

    async def mutate(
        self,
        payout_id: str,
        decision: DecisionType,
        decided_by: str,
        reason: str | None = None,
    ) -> PayoutDecision:
        optimistic = OptimisticDecision(self.cache, payout_id, decision)
        self.current = optimistic
        optimistic.apply()
        self.announcer.announce(f"Payout {decision.value}")

        try:
            result = await self.api.create_decision(payout_id, decision, decided_by, reason)
        except BaseException:
            # includes cancellation
            optimistic.rollback()
            self.logger.warning("Decision rolled back", payout_id=payout_id, decision=decision.value)
            self.announcer.announce("Action failed. Please try again.", Politeness.ASSERTIVE)
            raise
        else:
            optimistic.commit()
            self.announcer.announce(f"Payout successfully {decision.value}")
            return result
        finally:
            await self.cache.invalidate_queries(payout_keys.all)
