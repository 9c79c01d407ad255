"""Notification gating for newly launched tokens."""

import asyncio

import structlog

from ..core.interfaces import NotificationPlatform, VisibilitySource
from ..core.types import PermissionState

logger = structlog.get_logger(__name__)


class LogNotificationPlatform(NotificationPlatform):
    """Platform that writes notifications to the log."""

    async def request_permission(self) -> PermissionState:
        """Always granted."""
        return PermissionState.GRANTED

    async def notify(self, message: str) -> None:
        """Log the notification."""
        logger.info("Notification", message=message)


class NullNotificationPlatform(NotificationPlatform):
    """Platform without notification support."""

    async def request_permission(self) -> PermissionState:
        """Always denied."""
        return PermissionState.DENIED

    async def notify(self, message: str) -> None:
        """No-op notify."""


class StaticVisibility(VisibilitySource):
    """Fixed visibility for processes without a foreground page."""

    def __init__(self, hidden: bool = True) -> None:
        self.hidden = hidden

    def is_hidden(self) -> bool:
        return self.hidden


class NotificationGate:
    """Decides whether newly appeared tokens warrant a notification.

    Permission is negotiated once per session and cached. Events arriving
    while the page is visible or permission is missing are dropped.
    """

    def __init__(self, platform: NotificationPlatform) -> None:
        """Initialize notification gate.

        Args:
            platform: Notification capability of the host
        """
        self.platform = platform
        self._permission: PermissionState | None = None
        self._permission_lock = asyncio.Lock()

    @property
    def permission(self) -> PermissionState:
        """Cached permission state, default until negotiated."""
        return self._permission or PermissionState.DEFAULT

    async def request_permission(self) -> PermissionState:
        """Negotiate permission with the platform once and cache the result."""
        async with self._permission_lock:
            if self._permission is not None:
                return self._permission

            try:
                state = await self.platform.request_permission()
            except Exception as e:
                logger.error("Notification permission request failed", error=str(e))
                state = PermissionState.DEFAULT

            self._permission = state

        logger.info("Notification permission resolved", permission=state.value)
        return state

    async def maybe_notify(self, newly_appeared_count: int, page_hidden: bool) -> bool:
        """Notify about newly appeared tokens if allowed.

        Args:
            newly_appeared_count: Number of tokens new in the last snapshot
            page_hidden: Whether the page is hidden at decision time

        Returns:
            True if a notification was dispatched
        """
        if newly_appeared_count <= 0:
            return False

        if not page_hidden or self.permission != PermissionState.GRANTED:
            logger.debug(
                "Notification dropped",
                count=newly_appeared_count,
                page_hidden=page_hidden,
                permission=self.permission.value,
            )
            return False

        message = f"{newly_appeared_count} more tokens launched"
        try:
            await self.platform.notify(message)
        except Exception as e:
            logger.warning("Failed to dispatch notification", error=str(e))
            return False

        logger.info("Notification dispatched", count=newly_appeared_count)
        return True
