"""Telegram subscription routes used by the private subscription page."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from finder.api.schemas import TelegramSubscriptionRequest
from finder.config import get_settings
from finder.db.session import get_db_session
from finder.filters.session import FilterSession
from finder.notifications.messages import verify_subscription_token
from finder.services.subscription_service import SubscriptionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/telegram", tags=["telegram"])


def _check_token(chat_id: str, token: str | None) -> None:
    secret = get_settings().subscription_link_secret
    if not verify_subscription_token(chat_id, token, secret):
        logger.info(f"Rejected subscription token for chat {chat_id}")
        raise HTTPException(status_code=401, detail="Invalid subscription token")


@router.get("/private-subscription")
async def get_private_subscription(
    chat_id: str,
    token: str | None = None,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    _check_token(chat_id, token)
    subscription = await SubscriptionService(session).get_telegram(chat_id)
    if subscription is None:
        raise HTTPException(status_code=404, detail="Subscription not found")
    return subscription


@router.post("/private-subscription")
async def save_private_subscription(
    body: TelegramSubscriptionRequest,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    """Upsert the chat's filters; the confirmation message is queued."""

    _check_token(body.chat_id, body.token)

    filter_session = FilterSession(body.to_state())
    if not filter_session.validate_for_subscription():
        raise HTTPException(status_code=400, detail=filter_session.errors)

    return await SubscriptionService(session).save_telegram(
        body.chat_id, body.target_type, filter_session.state
    )
