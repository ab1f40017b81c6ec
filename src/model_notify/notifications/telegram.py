"""Sends model switch notifications through the Telegram Bot API."""

import asyncio
import logging
from typing import Optional

import aiohttp

from model_notify.errors import DeliveryError
from model_notify.target import DeliveryTarget

from .warn_once import WarnOnce

logger = logging.getLogger(__name__)

WARN_PREFIX = "[model-notify]"
TOKEN_WARNING_KEY = "telegram-token"
CHAT_WARNING_KEY = "telegram-chat"
SEND_ERROR_WARNING_KEY = "telegram-send-error"


class TelegramNotifier:
    """Delivers text messages with ``sendMessage``.

    Features:
    - Single attempt per message, no retry or queueing
    - Never raises: missing configuration and failed sends become
      warnings, each logged once per distinct cause
    - Context manager for session lifecycle; without one, each send uses
      a short-lived session
    """

    API_BASE = "https://api.telegram.org"

    # Request timeout
    REQUEST_TIMEOUT = 10.0  # seconds

    def __init__(
        self,
        warn: Optional[WarnOnce] = None,
        http_session: Optional[aiohttp.ClientSession] = None,
        api_base: str = API_BASE,
    ):
        """Initialize notifier.

        Args:
            warn: One-shot warning sink (shared with the caller if given).
            http_session: Optional aiohttp session (for testing).
            api_base: Bot API base URL.
        """
        self._warn = warn if warn is not None else WarnOnce(logger)
        self._session = http_session
        self._owns_session = http_session is None
        self._api_base = api_base.rstrip("/")

    async def __aenter__(self):
        """Enter async context, creating session if needed."""
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self

    async def __aexit__(self, *args):
        """Exit async context, closing owned session."""
        await self.close()

    @property
    def warn(self) -> WarnOnce:
        """The warning sink used for delivery problems."""
        return self._warn

    def send_url(self, token: str) -> str:
        """``sendMessage`` URL for a bot token."""
        return f"{self._api_base}/bot{token}/sendMessage"

    async def send(self, target: DeliveryTarget, text: str) -> bool:
        """Send ``text`` to the target chat.

        Args:
            target: Resolved token and chat id.
            text: Message text.

        Returns:
            True if Telegram accepted the message, False otherwise.
        """
        if not target.token:
            self._warn(TOKEN_WARNING_KEY, f"{WARN_PREFIX} Missing Telegram bot token.")
            return False
        if not target.chat_id:
            self._warn(
                CHAT_WARNING_KEY,
                f"{WARN_PREFIX} Missing Telegram chat id. "
                "Set OPENCLAW_TELEGRAM_CHAT_ID to enable notifications.",
            )
            return False

        payload = {
            "chat_id": target.chat_id,
            "text": text,
            "disable_web_page_preview": True,
        }

        try:
            await self._try_send(self.send_url(target.token), payload)
        except DeliveryError as e:
            self._warn(
                f"telegram-send-{e.status}",
                f"{WARN_PREFIX} Telegram sendMessage failed ({e.status}): {e.body}",
            )
            return False
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._warn(
                SEND_ERROR_WARNING_KEY,
                f"{WARN_PREFIX} Telegram sendMessage failed: {e!r}",
            )
            return False

        logger.info("Sent model switch notification")
        return True

    async def _try_send(self, url: str, payload: dict) -> None:
        """Single send attempt.

        Raises:
            DeliveryError: Telegram answered with a non-2xx status.
        """
        if self._session is not None:
            await self._post(self._session, url, payload)
            return

        async with aiohttp.ClientSession() as session:
            await self._post(session, url, payload)

    async def _post(
        self, session: aiohttp.ClientSession, url: str, payload: dict
    ) -> None:
        async with session.post(
            url,
            json=payload,
            timeout=aiohttp.ClientTimeout(total=self.REQUEST_TIMEOUT),
        ) as resp:
            if 200 <= resp.status < 300:
                return
            try:
                body = await resp.text()
            except (aiohttp.ClientError, UnicodeDecodeError):
                body = ""
            raise DeliveryError(resp.status, body)

    async def close(self) -> None:
        """Close the HTTP session if owned."""
        if self._owns_session and self._session:
            await self._session.close()
            self._session = None
