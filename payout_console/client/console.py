"""Funds console controller.

Ties together the payout list, the daily funds snapshot, the persisted list
filter and the decision panel. All data is read through the query cache, so
optimistic decisions and refetches show up without extra bookkeeping.
"""

import asyncio
import contextlib
from pathlib import Path

import httpx

from payout_console.client.announcer import Announcer, Politeness
from payout_console.client.api import ApiRequestError, PayoutApiClient
from payout_console.client.decision_panel import DecisionPanel
from payout_console.client.mutations import DecisionMutation
from payout_console.client.preferences import FILTER_STORAGE_KEY, PreferenceStore
from payout_console.client.query_cache import (
    PAYOUT_DETAIL_OPTIONS,
    PAYOUT_LIST_OPTIONS,
    SNAPSHOT_OPTIONS,
    QueryCache,
    payout_keys,
    snapshot_keys,
)
from payout_console.core.config import Settings
from payout_console.core.logging import LoggerMixin
from payout_console.domain.models.payout import FundsSnapshot, Payout

FILTER_OPTIONS = ("all", "pending", "flagged", "paid")
DEFAULT_FILTER = "all"


class FundsConsole(LoggerMixin):
    def __init__(
        self,
        api: PayoutApiClient,
        preferences: PreferenceStore,
        decided_by: str,
        cache: QueryCache | None = None,
        announcer: Announcer | None = None,
        close_delay: float = 1.5,
        snapshot_refetch_interval: float | None = None,
    ):
        self.api = api
        self.preferences = preferences
        self.decided_by = decided_by
        self.cache = cache or QueryCache()
        self.announcer = announcer or Announcer()
        self.close_delay = close_delay
        self.snapshot_refetch_interval = (
            snapshot_refetch_interval or SNAPSHOT_OPTIONS.refetch_interval
        )
        self.mutation = DecisionMutation(self.api, self.cache, self.announcer)

        self.filter = self._load_filter()
        self.error: str | None = None
        self.panel: DecisionPanel | None = None
        self._poll_task: asyncio.Task[None] | None = None

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None
    ) -> "FundsConsole":
        return cls(
            api=PayoutApiClient.from_settings(settings, transport=transport),
            preferences=PreferenceStore(Path(settings.client.preferences_path)),
            decided_by=settings.client.decided_by,
            close_delay=settings.client.success_close_delay,
            snapshot_refetch_interval=settings.client.snapshot_refetch_interval,
        )

    def _load_filter(self) -> str:
        value = self.preferences.get(FILTER_STORAGE_KEY, DEFAULT_FILTER)
        if value not in FILTER_OPTIONS:
            self.logger.warning("Ignoring unknown saved filter", value=value)
            return DEFAULT_FILTER
        return value

    @property
    def payouts(self) -> list[Payout] | None:
        return self.cache.get_query_data(payout_keys.list(self.filter))

    @property
    def snapshot(self) -> FundsSnapshot | None:
        return self.cache.get_query_data(snapshot_keys.current())

    async def _fetch_payouts(self, force: bool = False) -> list[Payout]:
        status_filter = self.filter
        return await self.cache.fetch_query(
            payout_keys.list(status_filter),
            lambda: self.api.get_payouts(status_filter),
            PAYOUT_LIST_OPTIONS,
            force=force,
        )

    async def _fetch_snapshot(self, force: bool = False) -> FundsSnapshot:
        return await self.cache.fetch_query(
            snapshot_keys.current(),
            self.api.get_snapshot,
            SNAPSHOT_OPTIONS,
            force=force,
        )

    async def load(self, force: bool = False) -> bool:
        """Load the payout list and the snapshot together.

        Returns False and sets ``error`` when either request fails.
        """
        try:
            await asyncio.gather(self._fetch_payouts(force), self._fetch_snapshot(force))
        except ApiRequestError as exc:
            self.error = exc.message
            self.announcer.announce(f"Error: {exc.message}", Politeness.ASSERTIVE)
            return False
        self.error = None
        return True

    async def retry(self) -> bool:
        return await self.load(force=True)

    async def set_filter(self, value: str) -> bool:
        if value not in FILTER_OPTIONS:
            options = ", ".join(FILTER_OPTIONS)
            raise ValueError(f"Unknown filter {value!r}. Must be one of: {options}")
        self.filter = value
        self.preferences.set(FILTER_STORAGE_KEY, value)
        return await self.load()

    async def open_panel(self, payout_id: str) -> DecisionPanel:
        payout = next((p for p in self.payouts or [] if p.id == payout_id), None)
        if payout is None:
            payout = await self.cache.fetch_query(
                payout_keys.detail(payout_id),
                lambda: self.api.get_payout(payout_id),
                PAYOUT_DETAIL_OPTIONS,
            )

        self.close_panel()
        panel = DecisionPanel(
            payout,
            api=self.api,
            cache=self.cache,
            mutation=self.mutation,
            announcer=self.announcer,
            decided_by=self.decided_by,
            close_delay=self.close_delay,
            on_close=lambda: self._panel_closed(panel),
        )
        self.panel = panel
        await panel.load_details()
        return panel

    def _panel_closed(self, panel: DecisionPanel) -> None:
        if self.panel is panel:
            self.panel = None

    def close_panel(self) -> None:
        if self.panel is not None:
            self.panel.close()

    async def on_window_focus(self) -> None:
        await self.cache.on_window_focus()

    def start_polling(self) -> None:
        if self._poll_task is None or self._poll_task.done():
            self._poll_task = asyncio.create_task(self._poll_snapshot())

    async def stop_polling(self) -> None:
        if self._poll_task is None:
            return
        self._poll_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._poll_task
        self._poll_task = None

    async def _poll_snapshot(self) -> None:
        while True:
            await asyncio.sleep(self.snapshot_refetch_interval)
            try:
                await self._fetch_snapshot(force=True)
            except ApiRequestError as exc:
                # previous snapshot stays on screen
                self.logger.warning("Snapshot refresh failed", error=exc.message)

    async def aclose(self) -> None:
        await self.stop_polling()
        self.close_panel()
        await self.api.aclose()
