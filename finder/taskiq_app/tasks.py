"""Taskiq tasks for subscriber notifications."""

import hashlib
import logging
from typing import Any, cast

from finder.config import get_settings
from finder.filters.query_string import deserialize
from finder.notifications.messages import (
    build_confirmation_message,
    build_edit_link,
    build_search_link,
)
from finder.notifications.telegram import TelegramNotifier
from finder.taskiq_app.broker import broker
from finder.taskiq_app.dedup import acquire_dedup_lock, build_dedup_key

logger = logging.getLogger(__name__)
settings = get_settings()

CONFIRMATION_TASK_NAME = "send_subscription_confirmation"


@broker.task(
    task_name=CONFIRMATION_TASK_NAME,
    retry_on_error=True,
    max_retries=3,
)
async def send_subscription_confirmation(
    chat_id: str, search_query: str
) -> dict[str, object]:
    """Tell a Telegram chat its filters were saved, with search and edit links."""

    state = deserialize(search_query)
    message = build_confirmation_message(
        state,
        search_link=build_search_link(settings.app_url, state),
        edit_link=build_edit_link(
            settings.app_url, chat_id, settings.subscription_link_secret
        ),
    )

    sent = await TelegramNotifier().send(message, chat_id=chat_id)
    if not sent:
        logger.warning(f"Subscription confirmation not delivered to chat {chat_id}")
    return {"chat_id": chat_id, "status": "sent" if sent else "failed"}


async def enqueue_subscription_confirmation(
    chat_id: str, search_query: str
) -> dict[str, object]:
    """Enqueue the confirmation unless this exact save was just confirmed."""

    query_digest = hashlib.sha256(search_query.encode()).hexdigest()[:16]
    dedup_key = build_dedup_key(
        task_name=CONFIRMATION_TASK_NAME, fingerprint=f"{chat_id}:{query_digest}"
    )
    lock_acquired = await acquire_dedup_lock(
        dedup_key, settings.confirmation_dedup_ttl_seconds
    )
    if not lock_acquired:
        return {"enqueued": False, "reason": "duplicate_enqueue"}

    task_kicker = cast(Any, send_subscription_confirmation)
    task = await task_kicker.kiq(chat_id, search_query)
    return {"enqueued": True, "task_id": task.task_id}
