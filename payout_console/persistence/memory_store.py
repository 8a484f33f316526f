"""In-process record store.

All collections live in process memory and reset whenever a new store is
built. Writers are serialized through a single re-entrant lock; records are
replaced on update rather than mutated, so objects already handed to readers
never change underneath them.
"""

import logging
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from datetime import datetime
from uuid import uuid4

from payout_console.domain.models.payout import (
    Creator,
    FraudSignal,
    Payment,
    PaymentAttempt,
    Payout,
    PayoutDecision,
    PayoutInvoice,
    PayoutStatus,
)

logger = logging.getLogger(__name__)


class InMemoryRecordStore:
    """RecordStore backed by plain Python lists."""

    def __init__(
        self,
        creators: Iterable[Creator] = (),
        payouts: Iterable[Payout] = (),
        invoices: Iterable[PayoutInvoice] = (),
        payments: Iterable[Payment] = (),
        payment_attempts: Iterable[PaymentAttempt] = (),
        fraud_signals: Iterable[FraudSignal] = (),
        decisions: Iterable[PayoutDecision] = (),
    ):
        self._creators = list(creators)
        self._payouts = list(payouts)
        self._invoices = list(invoices)
        self._payments = list(payments)
        self._payment_attempts = list(payment_attempts)
        self._fraud_signals = list(fraud_signals)
        self._decisions = list(decisions)
        self._lock = threading.RLock()

    def generate_id(self, prefix: str) -> str:
        """Generate a new unique record id."""
        return f"{prefix}-{uuid4().hex[:12]}"

    @contextmanager
    def write_lock(self) -> Iterator[None]:
        """Hold the single-writer lock for a read-then-write sequence."""
        with self._lock:
            yield

    def list_payouts(self) -> list[Payout]:
        with self._lock:
            return list(self._payouts)

    def get_payout(self, payout_id: str) -> Payout | None:
        with self._lock:
            return next((p for p in self._payouts if p.id == payout_id), None)

    def update_payout_status(
        self, payout_id: str, status: PayoutStatus, updated_at: datetime
    ) -> Payout:
        """Replace a payout's status and updated_at, keeping every other field."""
        with self._lock:
            for index, payout in enumerate(self._payouts):
                if payout.id == payout_id:
                    updated = payout.model_copy(update={"status": status, "updated_at": updated_at})
                    self._payouts[index] = updated
                    return updated
        raise KeyError(payout_id)

    def get_creator(self, creator_id: str) -> Creator | None:
        return next((c for c in self._creators if c.id == creator_id), None)

    def list_invoices(self, payout_id: str) -> list[PayoutInvoice]:
        return [i for i in self._invoices if i.payout_id == payout_id]

    def list_fraud_signals(self, payout_id: str) -> list[FraudSignal]:
        return [s for s in self._fraud_signals if s.payout_id == payout_id]

    def list_payments_by_creator(self, creator_id: str) -> list[Payment]:
        return [p for p in self._payments if p.creator_id == creator_id]

    def list_payment_attempts(self, payment_ids: Iterable[str]) -> list[PaymentAttempt]:
        wanted = set(payment_ids)
        return [a for a in self._payment_attempts if a.payment_id in wanted]

    def append_decision(self, decision: PayoutDecision) -> PayoutDecision:
        with self._lock:
            self._decisions.append(decision)
        return decision

    def list_decisions(self, payout_id: str | None = None) -> list[PayoutDecision]:
        with self._lock:
            if payout_id is None:
                return list(self._decisions)
            return [d for d in self._decisions if d.payout_id == payout_id]

    def counts(self) -> dict[str, int]:
        """Number of records per collection."""
        return {
            "creators": len(self._creators),
            "payouts": len(self._payouts),
            "invoices": len(self._invoices),
            "payments": len(self._payments),
            "payment_attempts": len(self._payment_attempts),
            "fraud_signals": len(self._fraud_signals),
            "decisions": len(self._decisions),
        }
