"""Telegram notification platform for launch alerts."""

import httpx
import structlog

from ..core.interfaces import NotificationPlatform
from ..core.types import PermissionState

logger = structlog.get_logger(__name__)


class TelegramNotificationPlatform(NotificationPlatform):
    """Delivers launch notifications to Telegram chats."""

    def __init__(
        self,
        bot_token: str,
        chat_ids: list[int],
        session: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize Telegram platform.

        Args:
            bot_token: Telegram bot token
            chat_ids: Chats that receive notifications
            session: Optional HTTP session for requests
        """
        self.bot_token = bot_token
        self.chat_ids = chat_ids
        self.session = session or httpx.AsyncClient()
        self.base_url = f"https://api.telegram.org/bot{bot_token}"

        logger.info("Telegram notification platform initialized", chats=len(chat_ids))

    async def request_permission(self) -> PermissionState:
        """Check that the bot token is accepted and chats are configured.

        Returns:
            granted for a working bot with chats, denied for a rejected token
            or no chats, default when Telegram could not be reached
        """
        if not self.chat_ids:
            logger.warning("No Telegram chats configured")
            return PermissionState.DENIED

        try:
            response = await self.session.get(f"{self.base_url}/getMe")
            response.raise_for_status()
            result = response.json()
        except httpx.HTTPStatusError as e:
            if e.response.status_code >= 500:
                logger.warning(
                    "Telegram server error", status_code=e.response.status_code
                )
                return PermissionState.DEFAULT
            logger.error(
                "Telegram rejected bot token", status_code=e.response.status_code
            )
            return PermissionState.DENIED
        except httpx.HTTPError as e:
            logger.warning("Telegram unreachable", error=str(e))
            return PermissionState.DEFAULT

        if not result.get("ok"):
            logger.error(
                "Telegram API error", description=result.get("description", "Unknown")
            )
            return PermissionState.DENIED

        return PermissionState.GRANTED

    async def notify(self, message: str) -> None:
        """Send message to every configured chat.

        Args:
            message: Notification text
        """
        success_count = 0
        for chat_id in self.chat_ids:
            try:
                await self._send_message(chat_id, message)
                success_count += 1
            except Exception as e:
                logger.error(
                    "Failed to send notification", chat_id=chat_id, error=str(e)
                )

        logger.info(
            "Notification push completed",
            total_chats=len(self.chat_ids),
            success_count=success_count,
        )

    async def _send_message(self, chat_id: int, text: str) -> None:
        """Send message to specific chat ID."""
        url = f"{self.base_url}/sendMessage"
        data = {"chat_id": chat_id, "text": text}

        response = await self.session.post(url, json=data)
        response.raise_for_status()

        result = response.json()
        if not result.get("ok"):
            raise Exception(
                f"Telegram API error: {result.get('description', 'Unknown error')}"
            )

    async def close(self) -> None:
        """Close the HTTP session."""
        if self.session:
            await self.session.aclose()
        logger.info("Telegram notification platform closed")
