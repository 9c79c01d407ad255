"""Tests for the Telegram notification platform."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import respx

from launchwatch.alerts.telegram import TelegramNotificationPlatform
from launchwatch.core.types import PermissionState

BASE = "https://api.telegram.org/bottest_token_123"


class TestTelegramNotificationPlatform:
    """Test Telegram platform functionality."""

    @pytest.fixture
    def platform(self):
        """Create a platform with a mocked session."""
        return TelegramNotificationPlatform(
            bot_token="test_token_123",
            chat_ids=[12345, 67890],
            session=AsyncMock(spec=httpx.AsyncClient),
        )

    def test_initialization(self, platform):
        assert platform.chat_ids == [12345, 67890]
        assert platform.base_url == BASE

    @pytest.mark.asyncio
    async def test_notify_all_chats(self, platform):
        """Test message goes to every chat."""
        mock_response = AsyncMock()
        mock_response.json = MagicMock(return_value={"ok": True})
        mock_response.raise_for_status = MagicMock()
        platform.session.post.return_value = mock_response

        await platform.notify("3 more tokens launched")

        assert platform.session.post.call_count == 2
        first_call = platform.session.post.call_args_list[0]
        assert first_call[0][0] == f"{BASE}/sendMessage"
        assert first_call[1]["json"] == {
            "chat_id": 12345,
            "text": "3 more tokens launched",
        }
        second_call = platform.session.post.call_args_list[1]
        assert second_call[1]["json"]["chat_id"] == 67890

    @pytest.mark.asyncio
    async def test_notify_partial_failure(self, platform):
        """Test a failing chat does not stop delivery to the others."""
        mock_failure = AsyncMock()
        mock_failure.raise_for_status = MagicMock(
            side_effect=httpx.HTTPStatusError(
                "Error", request=MagicMock(), response=MagicMock()
            )
        )
        mock_success = AsyncMock()
        mock_success.json = MagicMock(return_value={"ok": True})
        mock_success.raise_for_status = MagicMock()
        platform.session.post.side_effect = [mock_failure, mock_success]

        await platform.notify("1 more tokens launched")

        assert platform.session.post.call_count == 2

    @pytest.mark.asyncio
    async def test_send_message_telegram_error(self, platform):
        mock_response = AsyncMock()
        mock_response.json = MagicMock(
            return_value={"ok": False, "description": "Bad Request"}
        )
        mock_response.raise_for_status = MagicMock()
        platform.session.post.return_value = mock_response

        with pytest.raises(Exception, match="Telegram API error: Bad Request"):
            await platform._send_message(12345, "Test message")


class TestTelegramPermission:
    """Test permission negotiation through getMe."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_granted(self):
        respx.get(f"{BASE}/getMe").mock(
            return_value=httpx.Response(200, json={"ok": True, "result": {"id": 1}})
        )
        platform = TelegramNotificationPlatform(
            "test_token_123", [1], session=httpx.AsyncClient()
        )

        assert await platform.request_permission() == PermissionState.GRANTED
        await platform.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_rejected_token_denied(self):
        respx.get(f"{BASE}/getMe").mock(
            return_value=httpx.Response(401, json={"ok": False})
        )
        platform = TelegramNotificationPlatform(
            "test_token_123", [1], session=httpx.AsyncClient()
        )

        assert await platform.request_permission() == PermissionState.DENIED
        await platform.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_unreachable_default(self):
        respx.get(f"{BASE}/getMe").mock(side_effect=httpx.ConnectError("down"))
        platform = TelegramNotificationPlatform(
            "test_token_123", [1], session=httpx.AsyncClient()
        )

        assert await platform.request_permission() == PermissionState.DEFAULT
        await platform.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_server_error_default(self):
        respx.get(f"{BASE}/getMe").mock(return_value=httpx.Response(502))
        platform = TelegramNotificationPlatform(
            "test_token_123", [1], session=httpx.AsyncClient()
        )

        assert await platform.request_permission() == PermissionState.DEFAULT
        await platform.close()

    @pytest.mark.asyncio
    async def test_no_chats_denied(self):
        session = AsyncMock(spec=httpx.AsyncClient)
        platform = TelegramNotificationPlatform("test_token_123", [], session=session)

        assert await platform.request_permission() == PermissionState.DENIED
        session.get.assert_not_called()
