"""Monitoring session assembly and entry point."""

import argparse
import asyncio
import signal
import sys
from typing import Any

import structlog

from ..alerts.notifications import (
    LogNotificationPlatform,
    NotificationGate,
    StaticVisibility,
)
from ..alerts.telegram import TelegramNotificationPlatform
from ..config.logging import configure_logging
from ..config.settings import PROFILES, AppSettings, load_settings
from ..core.interfaces import NotificationPlatform, Ticker
from ..core.types import Token
from ..data.backend import BackendClient
from ..store.token_store import TokenStore
from ..view.sort import describe_row, sorted_rows
from .moderation import ModerationClient
from .poller import Poller, PollerState

logger = structlog.get_logger(__name__)

TOP_ROWS = 5


class MonitorSession:
    """One monitoring session: fresh state, assembled components."""

    def __init__(
        self,
        settings: AppSettings,
        backend: BackendClient | None = None,
        platform: NotificationPlatform | None = None,
        ticker: Ticker | None = None,
    ) -> None:
        """Initialize session components from settings.

        Args:
            settings: Application settings
            backend: Override for the backend client
            platform: Override for the notification platform
            ticker: Override for the poll schedule
        """
        self.settings = settings
        self.stop_event = asyncio.Event()
        self._closed = False

        self.backend = backend or BackendClient(
            base_url=settings.api_base_url, with_twitter=settings.with_twitter
        )
        self.platform = platform or self._create_platform(settings)
        self.store = TokenStore(notify_on_first_load=settings.notify_on_first_load)
        self.gate = NotificationGate(self.platform)
        self.visibility = StaticVisibility(hidden=settings.assume_page_hidden)
        self.poller = Poller(
            backend=self.backend,
            store=self.store,
            gate=self.gate,
            visibility=self.visibility,
            ticker=ticker,
            interval_seconds=settings.poll_interval_seconds,
            discard_stale_responses=settings.discard_stale_responses,
            on_snapshot=self._on_snapshot,
        )
        self.moderation = ModerationClient(self.backend, self.store, self.poller)

        logger.info(
            "Monitor session initialized",
            api_base_url=settings.api_base_url,
            platform=type(self.platform).__name__,
        )

    def _create_platform(self, settings: AppSettings) -> NotificationPlatform:
        """Pick Telegram when configured, the log otherwise."""
        if settings.telegram_bot_token and settings.telegram_chat_ids:
            logger.info("Using Telegram notification platform")
            return TelegramNotificationPlatform(
                bot_token=settings.telegram_bot_token,
                chat_ids=settings.telegram_chat_ids,
            )
        logger.info("Using log notification platform (no Telegram config)")
        return LogNotificationPlatform()

    def _on_snapshot(self, newly_appeared: list[Token]) -> None:
        for token in newly_appeared:
            logger.info("New token", **describe_row(token))
        for token in sorted_rows(self.store.snapshot)[:TOP_ROWS]:
            logger.debug("Top token", **describe_row(token))

    def get_status(self) -> dict[str, Any]:
        """Summarize session state."""
        return {
            "poller": self.poller.state.value,
            "tokens": len(self.store),
            "seen_ids": len(self.store.seen_ids),
            "reconciles": self.store.reconcile_count,
            "permission": self.gate.permission.value,
        }

    async def run_forever(self) -> None:
        """Poll until stop() is called or the task is cancelled."""
        await self.gate.request_permission()
        await self.poller.start()

        try:
            await self.stop_event.wait()
        except asyncio.CancelledError:
            logger.info("Session cancelled")
        finally:
            await self.stop()

    async def mark_scam_once(self, raw_id: Any) -> bool:
        """Load one snapshot, then run a single moderation round trip."""
        await self.poller.fetch_now()
        return await self.moderation.mark_as_scam(raw_id)

    async def stop(self) -> None:
        """Stop polling and release HTTP clients."""
        if self._closed:
            return
        self._closed = True

        logger.info("Stopping monitor session", **self.get_status())
        if self.poller.state == PollerState.RUNNING:
            self.poller.stop()
        self.stop_event.set()

        # Scheduled fetches already started must finish before the client closes
        if hasattr(self.poller.ticker, "drain"):
            await self.poller.ticker.drain()

        await self.backend.close()
        if isinstance(self.platform, TelegramNotificationPlatform):
            await self.platform.close()


async def main() -> None:
    """Main entry point for the launch monitor."""
    parser = argparse.ArgumentParser(description="Token launch monitor")
    parser.add_argument(
        "--config", default="configs/dev.yaml", help="Configuration file path"
    )
    parser.add_argument(
        "--profile", default="dev", choices=list(PROFILES), help="Configuration profile"
    )
    parser.add_argument(
        "--mark-scam", metavar="TOKEN_ID", help="Flag one token as scam and exit"
    )

    args = parser.parse_args()

    try:
        settings = load_settings(args.profile, args.config)
    except Exception as e:
        logger.error("Fatal error", error=str(e))
        sys.exit(1)

    configure_logging(settings.log_level)
    session = MonitorSession(settings)

    if args.mark_scam is not None:
        try:
            ok = await session.mark_scam_once(args.mark_scam)
        finally:
            await session.stop()
        sys.exit(0 if ok else 1)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, session.stop_event.set)

    await session.run_forever()


def cli() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    cli()
