"""Business logic for Telegram and WhatsApp subscriptions."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from finder.db.repositories import (
    fetch_telegram_subscription,
    fetch_whatsapp_subscription,
    filter_state_from_row,
    upsert_telegram_subscription,
    upsert_whatsapp_subscription,
)
from finder.filters.query_string import serialize, to_payload
from finder.filters.state import FilterState
from finder.models.filter_columns import FilterColumnsMixin
from finder.models.subscription import TelegramSubscription, WhatsappSubscription
from finder.taskiq_app.tasks import enqueue_subscription_confirmation

logger = logging.getLogger(__name__)


def serialize_filter_row(row: FilterColumnsMixin) -> dict[str, object]:
    return to_payload(filter_state_from_row(row))


def serialize_telegram_subscription(row: TelegramSubscription) -> dict[str, object]:
    return {
        "id": row.id,
        "chatId": row.chat_id,
        "targetType": row.target_type,
        "active": row.active,
        **serialize_filter_row(row),
        "createdAt": row.created_at.isoformat() if row.created_at else None,
        "updatedAt": row.updated_at.isoformat() if row.updated_at else None,
    }


def serialize_whatsapp_subscription(row: WhatsappSubscription) -> dict[str, object]:
    return {
        "id": row.id,
        "phoneNumber": row.phone_number,
        "active": row.active,
        **serialize_filter_row(row),
        "createdAt": row.created_at.isoformat() if row.created_at else None,
        "updatedAt": row.updated_at.isoformat() if row.updated_at else None,
    }


class SubscriptionService:
    """Service layer for messaging subscriptions."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_telegram(
        self, chat_id: str, target_type: str = "user"
    ) -> dict[str, object] | None:
        row = await fetch_telegram_subscription(self._session, chat_id, target_type)
        return serialize_telegram_subscription(row) if row else None

    async def save_telegram(
        self, chat_id: str, target_type: str, state: FilterState
    ) -> dict[str, object]:
        """Persist the subscription, then queue its confirmation message.

        The saved row is returned even when the confirmation cannot be queued.
        """

        row = await upsert_telegram_subscription(
            self._session, chat_id, target_type, state
        )
        logger.info(f"Telegram subscription saved for chat {chat_id} ({target_type})")

        try:
            await enqueue_subscription_confirmation(chat_id, serialize(state))
        except Exception:
            logger.exception(f"Failed to enqueue confirmation for chat {chat_id}")

        return serialize_telegram_subscription(row)

    async def get_whatsapp(self, phone_number: str) -> dict[str, object] | None:
        row = await fetch_whatsapp_subscription(self._session, phone_number)
        return serialize_whatsapp_subscription(row) if row else None

    async def save_whatsapp(
        self, phone_number: str, state: FilterState
    ) -> dict[str, object]:
        row = await upsert_whatsapp_subscription(self._session, phone_number, state)
        logger.info(f"WhatsApp subscription saved for {phone_number}")
        return serialize_whatsapp_subscription(row)
