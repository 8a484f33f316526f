"""Read-side service for the payout console: lists, snapshot and detail views."""

import logging
from collections.abc import Callable
from datetime import datetime

from payout_console.core.errors import PayoutConsoleError, PayoutNotFoundError
from payout_console.domain.models.payout import (
    FundsSnapshot,
    Payout,
    PayoutStatus,
    PayoutWithDetails,
)
from payout_console.persistence.base import RecordStore

logger = logging.getLogger(__name__)

ALL_STATUSES = "all"

# Aggregates are not converted between currencies
SNAPSHOT_CURRENCY = "USD"


def local_now() -> datetime:
    return datetime.now().astimezone()


def day_bounds(now: datetime) -> tuple[datetime, datetime]:
    """Start and end of the local day containing ``now``, both inclusive."""
    local = now.astimezone()
    start = local.replace(hour=0, minute=0, second=0, microsecond=0)
    end = local.replace(hour=23, minute=59, second=59, microsecond=999999)
    return start, end


def sum_amounts(payouts: list[Payout]) -> float:
    return sum((p.amount for p in payouts), 0.0)


class PayoutQueryService:
    """Service for payout list, snapshot and detail queries."""

    def __init__(self, store: RecordStore, clock: Callable[[], datetime] = local_now):
        self.store = store
        self.clock = clock

    def list_payouts(self, status_filter: str | None = None) -> list[Payout]:
        """List payouts, newest scheduled date first.

        A missing filter or ``"all"`` returns every payout; any other value is
        matched exactly against the payout status.
        """
        payouts = self.store.list_payouts()
        if status_filter and status_filter != ALL_STATUSES:
            payouts = [p for p in payouts if p.status.value == status_filter]

        result = sorted(payouts, key=lambda p: p.scheduled_for, reverse=True)

        logger.info(
            "Listed payouts",
            extra={"filter": status_filter or ALL_STATUSES, "count": len(result)},
        )
        return result

    def get_snapshot(self) -> FundsSnapshot:
        """Aggregate today's scheduled amounts, in total and for held/flagged payouts."""
        start, end = day_bounds(self.clock())
        today = [p for p in self.store.list_payouts() if start <= p.scheduled_for <= end]

        snapshot = FundsSnapshot(
            total_scheduled_today=sum_amounts(today),
            held_amount=sum_amounts([p for p in today if p.status == PayoutStatus.HELD]),
            flagged_amount=sum_amounts([p for p in today if p.status == PayoutStatus.FLAGGED]),
            currency=SNAPSHOT_CURRENCY,
        )

        logger.info("Computed funds snapshot", extra=snapshot.model_dump())
        return snapshot

    def get_payout_detail(self, payout_id: str) -> PayoutWithDetails:
        """Get a payout joined with its creator, invoices and fraud signals.

        The latest payment attempt is taken across every payment of the
        payout's creator, not only those linked to this payout.
        """
        payout = self.store.get_payout(payout_id)
        if payout is None:
            raise PayoutNotFoundError(
                f"Payout with ID {payout_id} not found",
                details={"payout_id": payout_id},
            )

        creator = self.store.get_creator(payout.creator_id)
        if creator is None:
            raise PayoutConsoleError(
                "Payout references an unknown creator",
                details={"payout_id": payout_id, "creator_id": payout.creator_id},
            )

        invoices = self.store.list_invoices(payout_id)
        fraud_signals = self.store.list_fraud_signals(payout_id)

        payment_ids = [p.id for p in self.store.list_payments_by_creator(payout.creator_id)]
        attempts = sorted(
            self.store.list_payment_attempts(payment_ids),
            key=lambda a: a.created_at,
            reverse=True,
        )

        details = PayoutWithDetails(
            **payout.model_dump(),
            creator=creator,
            invoices=invoices,
            latest_payment_attempt=attempts[0] if attempts else None,
            fraud_signals=fraud_signals,
            fraud_notes=[signal.to_note() for signal in fraud_signals],
        )

        logger.info(
            "Assembled payout details",
            extra={
                "payout_id": payout_id,
                "creator": creator.display_name,
                "invoices_count": len(invoices),
                "fraud_signals_count": len(fraud_signals),
            },
        )
        return details
