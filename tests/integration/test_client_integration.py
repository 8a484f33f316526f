"""Integration tests for the console client against the in-process API."""

import asyncio

import httpx
import pytest

from payout_console.client.announcer import Politeness
from payout_console.client.api import ApiRequestError, PayoutApiClient
from payout_console.client.console import FundsConsole
from payout_console.client.decision_panel import PanelState
from payout_console.client.preferences import FILTER_STORAGE_KEY, PreferenceStore
from payout_console.client.query_cache import payout_keys
from payout_console.domain.models.payout import DecisionType, PayoutStatus

BASE_URL = "http://test/api"


@pytest.fixture
def transport(app):
    return httpx.ASGITransport(app=app)


@pytest.fixture
async def api(transport):
    async with PayoutApiClient(BASE_URL, transport=transport) as client:
        yield client


@pytest.fixture
def preferences(tmp_path):
    return PreferenceStore(tmp_path / "preferences.json")


@pytest.fixture
async def console(api, preferences):
    console = FundsConsole(api, preferences, decided_by="ops-user-001", close_delay=0.01)
    yield console
    await console.stop_polling()
    console.close_panel()


def failing_transport(status_code=500, body=None):
    """Transport that answers every request with the same response."""

    def handler(request: httpx.Request) -> httpx.Response:
        if body is None:
            return httpx.Response(status_code, content=b"upstream unavailable")
        return httpx.Response(status_code, json=body)

    return httpx.MockTransport(handler)


class OutageTransport(httpx.AsyncBaseTransport):
    """Fails every request while ``down`` is set, then serves the app."""

    def __init__(self, app):
        self.inner = httpx.ASGITransport(app=app)
        self.down = True

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        if self.down:
            return httpx.Response(500, content=b"upstream unavailable")
        return await self.inner.handle_async_request(request)


class MalformedDecisionTransport(httpx.AsyncBaseTransport):
    """Serves the app for reads but answers every POST with ``body`` and a 201."""

    def __init__(self, app, body):
        self.inner = httpx.ASGITransport(app=app)
        self.body = body

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            return httpx.Response(201, json=self.body)
        return await self.inner.handle_async_request(request)


@pytest.mark.asyncio
class TestPayoutApiClient:
    async def test_get_payouts(self, api):
        payouts = await api.get_payouts()
        assert len(payouts) == 10
        assert payouts[0].id == "payout-010"

    async def test_get_payouts_filtered(self, api):
        payouts = await api.get_payouts("pending")
        assert {p.status for p in payouts} == {PayoutStatus.PENDING}

    async def test_get_snapshot(self, api):
        snapshot = await api.get_snapshot()
        assert snapshot.held_amount == pytest.approx(5600.75)

    async def test_get_payout(self, api):
        details = await api.get_payout("payout-001")
        assert details.creator.display_name == "Maya Chen"
        assert details.latest_payment_attempt.id == "attempt-003"

    async def test_not_found_uses_server_message(self, api):
        with pytest.raises(ApiRequestError) as exc_info:
            await api.get_payout("payout-999")
        assert exc_info.value.code == "PAYOUT_NOT_FOUND"
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Payout with ID payout-999 not found"

    async def test_create_decision(self, api):
        decision = await api.create_decision(
            "payout-002", DecisionType.REJECTED, "ops-user-001", "Velocity"
        )
        assert decision.reason == "Velocity"
        assert decision.decision == DecisionType.REJECTED

    async def test_decision_error_code(self, api):
        with pytest.raises(ApiRequestError) as exc_info:
            await api.create_decision("payout-003", DecisionType.APPROVED, "ops-user-001")
        assert exc_info.value.code == "PAYOUT_ALREADY_PAID"

    async def test_non_json_error_uses_fallback_message(self):
        async with PayoutApiClient(BASE_URL, transport=failing_transport()) as client:
            with pytest.raises(ApiRequestError) as exc_info:
                await client.get_payouts()
        assert exc_info.value.message == "Failed to fetch payouts"
        assert exc_info.value.status_code == 500

    async def test_error_without_message_uses_fallback(self):
        transport = failing_transport(503, {"success": False})
        async with PayoutApiClient(BASE_URL, transport=transport) as client:
            with pytest.raises(ApiRequestError) as exc_info:
                await client.get_snapshot()
        assert exc_info.value.message == "Failed to fetch snapshot"

    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with PayoutApiClient(BASE_URL, transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(ApiRequestError) as exc_info:
                await client.get_payout("payout-001")
        assert exc_info.value.code == "NETWORK_ERROR"
        assert exc_info.value.message == "Failed to fetch payout details"

    async def test_non_object_body_is_invalid_response(self):
        transport = failing_transport(200, ["payout-001"])
        async with PayoutApiClient(BASE_URL, transport=transport) as client:
            with pytest.raises(ApiRequestError) as exc_info:
                await client.get_payouts()
        assert exc_info.value.code == "INVALID_RESPONSE"
        assert exc_info.value.message == "Failed to fetch payouts"

    async def test_malformed_data_is_invalid_response(self):
        transport = failing_transport(201, {"success": True, "data": {"id": 1}})
        async with PayoutApiClient(BASE_URL, transport=transport) as client:
            with pytest.raises(ApiRequestError) as exc_info:
                await client.create_decision("payout-001", DecisionType.APPROVED, "ops")
        assert exc_info.value.code == "INVALID_RESPONSE"
        assert exc_info.value.status_code == 201
        assert exc_info.value.message == "Failed to create decision"


@pytest.mark.asyncio
class TestFundsConsole:
    async def test_load(self, console):
        assert await console.load() is True
        assert console.filter == "all"
        assert len(console.payouts) == 10
        assert console.snapshot.total_scheduled_today == pytest.approx(29626.65)
        assert console.error is None

    async def test_filter_persisted(self, console, preferences, api):
        await console.set_filter("flagged")
        assert [p.id for p in console.payouts] == ["payout-007", "payout-002"]
        assert preferences.get(FILTER_STORAGE_KEY, "all") == "flagged"

        reopened = FundsConsole(api, preferences, decided_by="ops-user-001")
        assert reopened.filter == "flagged"

    async def test_unknown_saved_filter_ignored(self, api, preferences):
        preferences.set(FILTER_STORAGE_KEY, "approved")
        assert FundsConsole(api, preferences, decided_by="ops").filter == "all"

    async def test_rejects_unknown_filter(self, console):
        with pytest.raises(ValueError):
            await console.set_filter("approved")

    async def test_page_error_and_retry(self, app, preferences):
        transport = OutageTransport(app)
        console = FundsConsole(
            PayoutApiClient(BASE_URL, transport=transport), preferences, decided_by="ops"
        )

        assert await console.load() is False
        assert console.error in {"Failed to fetch payouts", "Failed to fetch snapshot"}
        assert console.announcer.latest.politeness == Politeness.ASSERTIVE

        transport.down = False
        assert await console.retry() is True
        assert console.error is None
        await console.aclose()

    async def test_decide_through_panel(self, console):
        await console.load()
        panel = await console.open_panel("payout-002")
        assert panel.details.fraud_notes

        panel.select_decision("rejected")
        panel.set_reason("Velocity spike")
        decision = await panel.submit()

        assert decision.decision == DecisionType.REJECTED
        assert panel.state == PanelState.SUCCESS
        status = next(p.status for p in console.payouts if p.id == "payout-002")
        assert status == PayoutStatus.REJECTED
        assert "Payout rejected successfully" in console.announcer.messages()

        await asyncio.sleep(0.05)
        assert console.panel is None

    async def test_failed_decision_rolls_back(self, console):
        await console.load()
        panel = await console.open_panel("payout-003")
        assert panel.can_take_action is False

        # submit anyway; the server enforces the paid rule
        panel.select_decision("approved")
        assert await panel.submit() is None

        assert panel.error == "Cannot modify a payout that has already been paid"
        assert panel.state == PanelState.DECISION_SELECTED
        status = next(p.status for p in console.payouts if p.id == "payout-003")
        assert status == PayoutStatus.PAID
        assert "Action failed. Please try again." in console.announcer.messages()

    async def test_open_panel_outside_filter(self, console):
        await console.set_filter("paid")
        panel = await console.open_panel("payout-001")
        assert panel.payout.id == "payout-001"
        assert panel.details.creator.id == "creator-001"

    async def test_open_unknown_panel(self, console):
        await console.load()
        with pytest.raises(ApiRequestError):
            await console.open_panel("payout-999")

    async def test_reopening_replaces_panel(self, console):
        await console.load()
        first = await console.open_panel("payout-001")
        second = await console.open_panel("payout-002")
        assert first.closed is True
        assert console.panel is second

    async def test_window_focus_refetches_stale_lists(self, console, api):
        await console.load()
        entry = console.cache.get_entry(payout_keys.list("all"))
        entry.updated_at -= 120

        await api.create_decision("payout-001", DecisionType.HELD, "other-operator")
        await console.on_window_focus()

        status = next(p.status for p in console.payouts if p.id == "payout-001")
        assert status == PayoutStatus.HELD

    async def test_snapshot_polling(self, console, api):
        console.snapshot_refetch_interval = 0.01
        await console.load()
        await api.create_decision("payout-007", DecisionType.HELD, "other-operator")

        console.start_polling()
        await asyncio.sleep(0.1)
        await console.stop_polling()

        assert console.snapshot.held_amount == pytest.approx(5600.75 + 12500.00)


@pytest.mark.asyncio
class TestMalformedResponses:
    @pytest.mark.parametrize(
        "body", [{"success": True, "data": {"id": 1}}, "Bad gateway"], ids=["bad-data", "string"]
    )
    async def test_malformed_decision_response_allows_retry(self, app, preferences, body):
        api = PayoutApiClient(BASE_URL, transport=MalformedDecisionTransport(app, body))
        console = FundsConsole(api, preferences, decided_by="ops-user-001", close_delay=60)
        await console.load()
        panel = await console.open_panel("payout-001")
        panel.select_decision("approved")

        assert await panel.submit() is None

        assert panel.state == PanelState.DECISION_SELECTED
        assert panel.error == "Failed to create decision"
        assert panel.can_submit is True
        status = next(p.status for p in console.payouts if p.id == "payout-001")
        assert status == PayoutStatus.PENDING
        console.close_panel()
        await console.aclose()

    async def test_non_envelope_list_is_page_error(self, preferences):
        api = PayoutApiClient(BASE_URL, transport=failing_transport(200, ["payout-001"]))
        console = FundsConsole(api, preferences, decided_by="ops")

        assert await console.load() is False

        assert console.error in {"Failed to fetch payouts", "Failed to fetch snapshot"}
        assert console.announcer.latest.politeness == Politeness.ASSERTIVE
        await console.aclose()
