"""Unit tests for the payout query service."""

from datetime import timedelta

import pytest

from payout_console.core.errors import PayoutConsoleError, PayoutNotFoundError
from payout_console.domain.models.payout import PayoutStatus
from payout_console.persistence.memory_store import InMemoryRecordStore
from payout_console.services.payout_service import PayoutQueryService, day_bounds


@pytest.fixture
def service(store, fixed_now):
    return PayoutQueryService(store, clock=lambda: fixed_now)


class TestListPayouts:
    def test_all_payouts_newest_scheduled_first(self, service):
        payouts = service.list_payouts()
        assert [p.id for p in payouts] == [
            "payout-010",
            "payout-006",
            "payout-005",
            "payout-009",
            "payout-007",
            "payout-004",
            "payout-002",
            "payout-001",
            "payout-003",
            "payout-008",
        ]

    def test_all_filter_same_as_none(self, service):
        assert service.list_payouts("all") == service.list_payouts(None)

    def test_status_filter(self, service):
        payouts = service.list_payouts("pending")
        assert [p.id for p in payouts] == ["payout-006", "payout-009", "payout-001"]
        assert all(p.status == PayoutStatus.PENDING for p in payouts)

    def test_unknown_filter_matches_nothing(self, service):
        assert service.list_payouts("bogus") == []

    def test_filter_is_case_sensitive(self, service):
        assert service.list_payouts("PENDING") == []

    def test_empty_store(self, fixed_now):
        assert PayoutQueryService(InMemoryRecordStore()).list_payouts() == []


class TestSnapshot:
    def test_today_totals(self, service):
        snapshot = service.get_snapshot()
        assert snapshot.total_scheduled_today == pytest.approx(29626.65)
        assert snapshot.held_amount == pytest.approx(5600.75)
        assert snapshot.flagged_amount == pytest.approx(20900.50)
        assert snapshot.currency == "USD"

    def test_held_payout_on_another_day_excluded(self, service):
        # payout-010 is held but scheduled three days out
        assert service.get_snapshot().held_amount == pytest.approx(5600.75)

    def test_snapshot_follows_status_changes(self, store, service, fixed_now):
        store.update_payout_status("payout-001", PayoutStatus.HELD, fixed_now)
        snapshot = service.get_snapshot()
        assert snapshot.held_amount == pytest.approx(5600.75 + 1250.00)
        assert snapshot.total_scheduled_today == pytest.approx(29626.65)

    def test_empty_day(self, store, fixed_now):
        service = PayoutQueryService(store, clock=lambda: fixed_now + timedelta(days=30))
        snapshot = service.get_snapshot()
        assert snapshot.total_scheduled_today == 0
        assert snapshot.held_amount == 0
        assert snapshot.flagged_amount == 0

    def test_day_bounds_inclusive(self, fixed_now):
        start, end = day_bounds(fixed_now)
        assert start <= fixed_now <= end
        assert (end - start) < timedelta(days=1)
        assert start.hour == 0 and start.minute == 0


class TestPayoutDetail:
    def test_detail_joins_related_records(self, service):
        details = service.get_payout_detail("payout-002")
        assert details.creator.id == "creator-002"
        assert [i.id for i in details.invoices] == ["invoice-003"]
        assert [s.id for s in details.fraud_signals] == ["signal-001", "signal-002"]
        assert details.fraud_notes == [
            "[HIGH] velocity: 14 payout requests in the last 24 hours",
            "[MEDIUM] geo_mismatch: Login country differs from bank account country",
        ]

    def test_latest_attempt_is_newest_across_creator_payments(self, service):
        details = service.get_payout_detail("payout-001")
        assert details.latest_payment_attempt is not None
        assert details.latest_payment_attempt.id == "attempt-003"
        assert details.latest_payment_attempt.error_code == "insufficient_funds"

    def test_no_fraud_signals(self, service):
        details = service.get_payout_detail("payout-001")
        assert details.fraud_signals == []
        assert details.fraud_notes == []

    def test_no_payments_means_no_attempt(self, service):
        # creator-005 has no payments
        assert service.get_payout_detail("payout-006").latest_payment_attempt is None

    def test_payout_fields_preserved(self, store, service):
        payout = store.get_payout("payout-004")
        details = service.get_payout_detail("payout-004")
        assert details.amount == payout.amount
        assert details.status == payout.status
        assert details.scheduled_for == payout.scheduled_for

    def test_unknown_payout(self, service):
        with pytest.raises(PayoutNotFoundError) as exc_info:
            service.get_payout_detail("payout-999")
        assert exc_info.value.message == "Payout with ID payout-999 not found"

    def test_missing_creator_is_internal_error(self, store):
        orphan = store.get_payout("payout-001").model_copy(update={"creator_id": "creator-404"})
        service = PayoutQueryService(InMemoryRecordStore(payouts=[orphan]))
        with pytest.raises(PayoutConsoleError) as exc_info:
            service.get_payout_detail("payout-001")
        assert exc_info.value.code == "INTERNAL_ERROR"
