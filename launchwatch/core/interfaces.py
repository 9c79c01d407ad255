"""Core interfaces for the launch monitor."""

from collections.abc import Awaitable, Callable
from typing import Protocol, runtime_checkable

from .types import PermissionState, Token


class TokenBackend(Protocol):
    """Backend serving the token list and accepting moderation requests."""

    async def fetch_tokens(self) -> list[Token]:
        """Fetch the full current snapshot."""
        ...

    async def mark_scam(self, pair_address: str) -> None:
        """Flag a pair as fraudulent."""
        ...


@runtime_checkable
class NotificationPlatform(Protocol):
    """Host notification capability."""

    async def request_permission(self) -> PermissionState:
        """Ask the platform for permission to notify."""
        ...

    async def notify(self, message: str) -> None:
        """Dispatch a notification."""
        ...


@runtime_checkable
class VisibilitySource(Protocol):
    """Page visibility signal."""

    def is_hidden(self) -> bool:
        """Return True if the page is currently hidden from the operator."""
        ...


class Ticker(Protocol):
    """Recurring schedule driving the poller."""

    @property
    def running(self) -> bool:
        """Whether a schedule is active."""
        ...

    def start(
        self, interval_seconds: float, callback: Callable[[], Awaitable[object]]
    ) -> None:
        """Invoke callback every interval_seconds."""
        ...

    def stop(self) -> None:
        """Cancel the schedule."""
        ...
