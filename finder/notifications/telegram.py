"""Telegram Bot API notification implementation."""

import logging
from typing import Any

import httpx

from finder.config import Settings, get_settings
from finder.notifications.base import Notifier

logger = logging.getLogger(__name__)

TELEGRAM_API_BASE = "https://api.telegram.org"


class TelegramNotifier(Notifier):
    """Send messages through the Telegram Bot API ``sendMessage`` method."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._token = self._settings.active_telegram_bot_token
        self._timeout = httpx.Timeout(10.0)
        self._transport = transport

    @property
    def api_url(self) -> str:
        return f"{TELEGRAM_API_BASE}/bot{self._token}"

    async def send(
        self,
        message: str,
        *,
        chat_id: str,
        reply_markup: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> bool:
        if not self._token:
            logger.warning("Telegram bot token not configured, skipping message")
            return False

        payload: dict[str, Any] = {
            "chat_id": chat_id,
            "text": message,
            "disable_web_page_preview": True,
            **kwargs,
        }
        if reply_markup is not None:
            payload["reply_markup"] = reply_markup

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(f"{self.api_url}/sendMessage", json=payload)
                response.raise_for_status()
                result = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Telegram HTTP error for chat {chat_id}: {e.response.status_code}")
            return False
        except httpx.HTTPError as e:
            logger.error(f"Telegram request failed for chat {chat_id}: {e}")
            return False

        if result.get("ok"):
            logger.info(f"Telegram message sent to chat {chat_id}")
            return True
        logger.error(f"Telegram API error: {result.get('description', 'Unknown')}")
        return False
