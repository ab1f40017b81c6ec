"""Tests for TelegramNotifier."""

import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from model_notify.notifications import TelegramNotifier, WarnOnce
from model_notify.target import DeliveryTarget

TARGET = DeliveryTarget(token="123:ABC", chat_id="-100")


def make_session(status: int = 200, body: str = '{"ok": true}'):
    """Mock aiohttp session answering every POST with ``status``."""
    mock_response = AsyncMock()
    mock_response.status = status
    mock_response.text.return_value = body
    mock_response.__aenter__.return_value = mock_response
    mock_response.__aexit__.return_value = None

    session = AsyncMock(spec=aiohttp.ClientSession)
    session.post.return_value = mock_response
    return session


def warnings(caplog):
    return [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]


class TestTelegramNotifierInit:
    """Tests for TelegramNotifier initialization."""

    def test_send_url(self):
        notifier = TelegramNotifier()
        assert notifier.send_url("123:ABC") == "https://api.telegram.org/bot123:ABC/sendMessage"

    def test_custom_api_base_strips_slash(self):
        notifier = TelegramNotifier(api_base="http://localhost:8081/")
        assert notifier.send_url("t") == "http://localhost:8081/bott/sendMessage"

    def test_shares_warn_sink(self):
        warn = WarnOnce()
        assert TelegramNotifier(warn=warn).warn is warn


class TestTelegramNotifierContextManager:
    """Tests for async context manager."""

    @pytest.mark.asyncio
    async def test_creates_and_closes_session(self):
        notifier = TelegramNotifier()

        async with notifier as n:
            assert isinstance(n._session, aiohttp.ClientSession)

        assert notifier._session is None

    @pytest.mark.asyncio
    async def test_does_not_close_external_session(self):
        session = make_session()

        async with TelegramNotifier(http_session=session):
            pass

        session.close.assert_not_called()


class TestTelegramNotifierSend:
    """Tests for send."""

    @pytest.mark.asyncio
    async def test_posts_message(self):
        session = make_session()
        notifier = TelegramNotifier(http_session=session)

        result = await notifier.send(TARGET, "Model switch -> openai/gpt-5 @ unknown")

        assert result is True
        session.post.assert_called_once()
        args, kwargs = session.post.call_args
        assert args[0] == "https://api.telegram.org/bot123:ABC/sendMessage"
        assert kwargs["json"] == {
            "chat_id": "-100",
            "text": "Model switch -> openai/gpt-5 @ unknown",
            "disable_web_page_preview": True,
        }

    @pytest.mark.asyncio
    async def test_missing_token_warns_once(self, caplog):
        session = make_session()
        notifier = TelegramNotifier(http_session=session)
        target = DeliveryTarget(chat_id="-100")

        assert await notifier.send(target, "a") is False
        assert await notifier.send(target, "b") is False

        session.post.assert_not_called()
        assert warnings(caplog) == ["[model-notify] Missing Telegram bot token."]

    @pytest.mark.asyncio
    async def test_missing_chat_id_warns_once(self, caplog):
        session = make_session()
        notifier = TelegramNotifier(http_session=session)
        target = DeliveryTarget(token="123:ABC")

        await notifier.send(target, "a")
        await notifier.send(target, "b")

        session.post.assert_not_called()
        messages = warnings(caplog)
        assert len(messages) == 1
        assert "Missing Telegram chat id" in messages[0]
        assert "OPENCLAW_TELEGRAM_CHAT_ID" in messages[0]

    @pytest.mark.asyncio
    async def test_error_status_warns_once_per_status(self, caplog):
        """Each distinct failure status is reported once, with the body."""
        notifier = TelegramNotifier(http_session=make_session(429, "Too Many Requests"))

        assert await notifier.send(TARGET, "a") is False
        assert await notifier.send(TARGET, "b") is False

        notifier._session = make_session(403, "Forbidden: bot was blocked")
        assert await notifier.send(TARGET, "c") is False

        assert warnings(caplog) == [
            "[model-notify] Telegram sendMessage failed (429): Too Many Requests",
            "[model-notify] Telegram sendMessage failed (403): Forbidden: bot was blocked",
        ]
        assert "telegram-send-429" in notifier.warn
        assert "telegram-send-403" in notifier.warn

    @pytest.mark.asyncio
    async def test_any_2xx_is_success(self):
        notifier = TelegramNotifier(http_session=make_session(204, ""))
        assert await notifier.send(TARGET, "a") is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [aiohttp.ClientConnectionError("connection refused"), asyncio.TimeoutError()],
    )
    async def test_transport_error_does_not_raise(self, caplog, error):
        session = make_session()
        session.post.side_effect = error
        notifier = TelegramNotifier(http_session=session)

        assert await notifier.send(TARGET, "a") is False
        assert await notifier.send(TARGET, "b") is False

        assert len(warnings(caplog)) == 1
        assert "telegram-send-error" in notifier.warn

    @pytest.mark.asyncio
    async def test_without_session_uses_short_lived_session(self):
        session = make_session()
        session_cm = MagicMock()
        session_cm.__aenter__ = AsyncMock(return_value=session)
        session_cm.__aexit__ = AsyncMock(return_value=None)

        with patch(
            "model_notify.notifications.telegram.aiohttp.ClientSession",
            return_value=session_cm,
        ) as session_class:
            result = await TelegramNotifier().send(TARGET, "a")

        assert result is True
        session_class.assert_called_once()
        session_cm.__aexit__.assert_awaited_once()
        session.post.assert_called_once()
