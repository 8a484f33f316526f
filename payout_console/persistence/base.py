"""Base contract for the record store layer."""

from collections.abc import Iterable
from contextlib import AbstractContextManager
from datetime import datetime
from typing import Protocol

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


class RecordStore(Protocol):
    """Query contract every record store implementation must satisfy.

    Readers get copies or immutable views; only ``update_payout_status`` and
    ``append_decision`` mutate state, and callers that need a read-then-write
    sequence to be atomic must hold ``write_lock()`` around it.
    """

    def generate_id(self, prefix: str) -> str: ...

    def write_lock(self) -> AbstractContextManager[None]: ...

    # Payouts
    def list_payouts(self) -> list[Payout]: ...

    def get_payout(self, payout_id: str) -> Payout | None: ...

    def update_payout_status(
        self, payout_id: str, status: PayoutStatus, updated_at: datetime
    ) -> Payout: ...

    # Read-only reference data
    def get_creator(self, creator_id: str) -> Creator | None: ...

    def list_invoices(self, payout_id: str) -> list[PayoutInvoice]: ...

    def list_fraud_signals(self, payout_id: str) -> list[FraudSignal]: ...

    def list_payments_by_creator(self, creator_id: str) -> list[Payment]: ...

    def list_payment_attempts(self, payment_ids: Iterable[str]) -> list[PaymentAttempt]: ...

    # Decision audit log
    def append_decision(self, decision: PayoutDecision) -> PayoutDecision: ...

    def list_decisions(self, payout_id: str | None = None) -> list[PayoutDecision]: ...

    def counts(self) -> dict[str, int]: ...
