"""Client-side query cache.

Entries are keyed by tuples so that a key prefix addresses a whole family of
queries (``("payouts",)`` covers every list and every detail). Concurrent
fetches of one key share a single in-flight request, and a response that
arrives after the entry was cancelled or written locally is discarded.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

from payout_console.core.logging import LoggerMixin

QueryKey = tuple[str, ...]
Fetcher = Callable[[], Awaitable[Any]]


class PayoutKeys:
    """Key factory for payout queries."""

    all: QueryKey = ("payouts",)

    def lists(self) -> QueryKey:
        return (*self.all, "list")

    def list(self, status_filter: str) -> QueryKey:
        return (*self.lists(), status_filter)

    def details(self) -> QueryKey:
        return (*self.all, "detail")

    def detail(self, payout_id: str) -> QueryKey:
        return (*self.details(), payout_id)


class SnapshotKeys:
    all: QueryKey = ("snapshot",)

    def current(self) -> QueryKey:
        return (*self.all, "current")


payout_keys = PayoutKeys()
snapshot_keys = SnapshotKeys()


@dataclass(frozen=True)
class QueryOptions:
    stale_time: float = 0.0
    refetch_on_window_focus: bool = False
    refetch_interval: float | None = None


PAYOUT_LIST_OPTIONS = QueryOptions(stale_time=30.0, refetch_on_window_focus=True)
PAYOUT_DETAIL_OPTIONS = QueryOptions(stale_time=60.0)
SNAPSHOT_OPTIONS = QueryOptions(stale_time=30.0, refetch_on_window_focus=True, refetch_interval=60.0)


@dataclass
class QueryEntry:
    key: QueryKey
    options: QueryOptions = field(default_factory=QueryOptions)
    fetcher: Fetcher | None = None
    data: Any = None
    has_data: bool = False
    error: Exception | None = None
    updated_at: float = 0.0
    invalidated: bool = False
    generation: int = 0
    in_flight: "asyncio.Task[Any] | None" = None

    def is_stale(self, now: float) -> bool:
        if not self.has_data or self.invalidated:
            return True
        return now - self.updated_at >= self.options.stale_time

    @property
    def is_fetching(self) -> bool:
        return self.in_flight is not None and not self.in_flight.done()


def matches(key: QueryKey, prefix: QueryKey) -> bool:
    return key[: len(prefix)] == prefix


class QueryCache(LoggerMixin):
    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._entries: dict[QueryKey, QueryEntry] = {}
        self._clock = clock

    def _entry(self, key: QueryKey) -> QueryEntry:
        entry = self._entries.get(key)
        if entry is None:
            entry = self._entries[key] = QueryEntry(key=key)
        return entry

    def _matching(self, prefix: QueryKey) -> Iterator[QueryEntry]:
        for key, entry in list(self._entries.items()):
            if matches(key, prefix):
                yield entry

    def get_entry(self, key: QueryKey) -> QueryEntry | None:
        return self._entries.get(key)

    async def fetch_query(
        self,
        key: QueryKey,
        fetcher: Fetcher,
        options: QueryOptions | None = None,
        force: bool = False,
    ) -> Any:
        """Return cached data for ``key``, fetching it when missing or stale.

        The fetcher and options are remembered so that invalidation and
        focus events can refetch the entry later.
        """
        entry = self._entry(key)
        entry.fetcher = fetcher
        if options is not None:
            entry.options = options

        if not force and not entry.is_stale(self._clock()):
            return entry.data
        return await self._fetch(entry)

    async def refetch_query(self, key: QueryKey) -> Any:
        entry = self._entries.get(key)
        if entry is None or entry.fetcher is None:
            raise KeyError(f"No fetcher registered for query {key!r}")
        return await self._fetch(entry)

    async def _fetch(self, entry: QueryEntry) -> Any:
        if not entry.is_fetching:
            entry.in_flight = asyncio.ensure_future(self._run(entry, entry.generation))
        # shared by every waiter
        return await asyncio.shield(entry.in_flight)  # type: ignore[arg-type]

    async def _run(self, entry: QueryEntry, generation: int) -> Any:
        fetcher = entry.fetcher
        if fetcher is None:
            raise KeyError(f"No fetcher registered for query {entry.key!r}")
        try:
            data = await fetcher()
        except Exception as exc:
            if entry.generation == generation:
                entry.error = exc
            raise

        if entry.generation != generation:
            self.logger.debug("Discarding superseded response", key=list(entry.key))
            return data

        entry.data = data
        entry.has_data = True
        entry.error = None
        entry.invalidated = False
        entry.updated_at = self._clock()
        return data

    def get_query_data(self, key: QueryKey) -> Any:
        entry = self._entries.get(key)
        return entry.data if entry is not None and entry.has_data else None

    def set_query_data(self, key: QueryKey, data: Any) -> None:
        """Write data for ``key`` directly, superseding any in-flight fetch."""
        entry = self._entry(key)
        entry.generation += 1
        entry.in_flight = None
        entry.data = data
        entry.has_data = True
        entry.error = None
        entry.updated_at = self._clock()

    def get_queries_data(self, prefix: QueryKey) -> list[tuple[QueryKey, Any]]:
        return [(entry.key, entry.data) for entry in self._matching(prefix) if entry.has_data]

    def set_queries_data(self, prefix: QueryKey, updater: Callable[[Any], Any]) -> None:
        for key, data in self.get_queries_data(prefix):
            self.set_query_data(key, updater(data))

    def cancel_queries(self, prefix: QueryKey) -> None:
        """Drop in-flight fetches under ``prefix``; their responses will be ignored."""
        for entry in self._matching(prefix):
            if entry.is_fetching:
                entry.generation += 1
                entry.in_flight = None

    async def invalidate_queries(self, prefix: QueryKey) -> None:
        """Mark entries under ``prefix`` stale and refetch the ones with a fetcher.

        Refetch failures are kept on the entry and logged rather than raised.
        """
        entries = list(self._matching(prefix))
        for entry in entries:
            entry.invalidated = True
        await self._refetch_all([entry for entry in entries if entry.fetcher is not None])

    async def on_window_focus(self) -> None:
        now = self._clock()
        await self._refetch_all(
            [
                entry
                for entry in self._entries.values()
                if entry.options.refetch_on_window_focus
                and entry.fetcher is not None
                and entry.is_stale(now)
            ]
        )

    def remove_queries(self, prefix: QueryKey) -> None:
        for entry in list(self._matching(prefix)):
            del self._entries[entry.key]

    async def _refetch_all(self, entries: list[QueryEntry]) -> None:
        if not entries:
            return
        results = await asyncio.gather(*(self._fetch(e) for e in entries), return_exceptions=True)
        for entry, result in zip(entries, results):
            if isinstance(result, Exception):
                self.logger.warning(
                    "Background refetch failed", key=list(entry.key), error=str(result)
                )
