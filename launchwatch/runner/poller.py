"""Periodic token retrieval feeding the store and notification gate."""

import asyncio
from collections.abc import Awaitable, Callable
from enum import StrEnum

import structlog

from ..alerts.notifications import NotificationGate
from ..core.errors import TransientFetchError
from ..core.interfaces import Ticker, TokenBackend, VisibilitySource
from ..core.types import Token
from ..store.token_store import TokenStore

logger = structlog.get_logger(__name__)


class PollerState(StrEnum):
    """Poller lifecycle state."""

    STOPPED = "stopped"
    RUNNING = "running"


class AsyncioTicker(Ticker):
    """Wall-clock ticker on the running event loop.

    Each tick spawns the callback as its own task, so a slow callback never
    delays the schedule. Stopping cancels the schedule but not callbacks
    already started.
    """

    def __init__(self) -> None:
        self._task: asyncio.Task | None = None
        self._inflight: set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(
        self, interval_seconds: float, callback: Callable[[], Awaitable[object]]
    ) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(interval_seconds, callback))

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def drain(self) -> None:
        """Wait for callbacks already started."""
        if self._inflight:
            await asyncio.gather(*self._inflight, return_exceptions=True)

    async def _run(
        self, interval_seconds: float, callback: Callable[[], Awaitable[object]]
    ) -> None:
        while True:
            await asyncio.sleep(interval_seconds)
            task = asyncio.ensure_future(callback())
            self._inflight.add(task)
            task.add_done_callback(self._on_done)

    def _on_done(self, task: asyncio.Task) -> None:
        self._inflight.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Tick callback failed", error=str(task.exception()))


class Poller:
    """Drives periodic snapshot retrieval.

    Responses are applied in the order they complete. With
    discard_stale_responses enabled, a response to an older request than
    the last applied one is dropped instead.
    """

    def __init__(
        self,
        backend: TokenBackend,
        store: TokenStore,
        gate: NotificationGate,
        visibility: VisibilitySource,
        ticker: Ticker | None = None,
        interval_seconds: float = 60.0,
        discard_stale_responses: bool = False,
        on_snapshot: Callable[[list[Token]], None] | None = None,
    ) -> None:
        """Initialize poller.

        Args:
            backend: Token backend
            store: Token store receiving snapshots
            gate: Notification gate for newly appeared tokens
            visibility: Page visibility signal
            ticker: Recurring schedule, wall clock by default
            interval_seconds: Seconds between scheduled fetches
            discard_stale_responses: Drop responses that complete out of order
            on_snapshot: Called with the newly appeared tokens after each
                applied snapshot
        """
        self.backend = backend
        self.store = store
        self.gate = gate
        self.visibility = visibility
        self.ticker = ticker or AsyncioTicker()
        self.interval_seconds = interval_seconds
        self.discard_stale_responses = discard_stale_responses
        self.on_snapshot = on_snapshot

        self.state = PollerState.STOPPED
        self._issued_seq = 0
        self._applied_seq = 0

    async def start(self, interval_seconds: float | None = None) -> None:
        """Fetch immediately, then every interval_seconds."""
        if self.state == PollerState.RUNNING:
            logger.debug("Poller already running")
            return

        if interval_seconds is not None:
            self.interval_seconds = interval_seconds

        self.state = PollerState.RUNNING
        self.ticker.start(self.interval_seconds, self.fetch_now)
        logger.info("Poller started", interval_seconds=self.interval_seconds)

        await self.fetch_now()

    def stop(self) -> None:
        """Cancel future scheduled fetches; in-flight fetches still apply."""
        if self.state == PollerState.STOPPED:
            return
        self.ticker.stop()
        self.state = PollerState.STOPPED
        logger.info("Poller stopped")

    async def fetch_now(self) -> list[Token] | None:
        """Run one retrieval cycle.

        Returns:
            Newly appeared tokens, or None if nothing was applied
        """
        self._issued_seq += 1
        seq = self._issued_seq

        try:
            snapshot = await self.backend.fetch_tokens()
        except TransientFetchError as e:
            logger.warning(
                "Token fetch failed, keeping previous snapshot",
                error=str(e),
                status_code=e.status_code,
            )
            return None

        if self.discard_stale_responses and seq < self._applied_seq:
            logger.info(
                "Discarding out-of-order snapshot", seq=seq, applied=self._applied_seq
            )
            return None
        self._applied_seq = max(self._applied_seq, seq)

        newly_appeared = self.store.reconcile(snapshot)
        logger.info(
            "Fetched tokens", count=len(snapshot), newly_appeared=len(newly_appeared)
        )

        await self.gate.maybe_notify(len(newly_appeared), self.visibility.is_hidden())

        if self.on_snapshot is not None:
            self.on_snapshot(newly_appeared)
        return newly_appeared
