"""WhatsApp subscription routes called by the chatbot backend."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from finder.api.deps import require_chatbot_key
from finder.api.schemas import WhatsappSubscriptionRequest
from finder.db.session import get_db_session
from finder.services.subscription_service import SubscriptionService

router = APIRouter(
    prefix="/api/whatsapp",
    tags=["whatsapp"],
    dependencies=[Depends(require_chatbot_key)],
)


@router.get("/subscription")
async def get_subscription(
    phone_number: str,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    subscription = await SubscriptionService(session).get_whatsapp(phone_number)
    if subscription is None:
        raise HTTPException(status_code=404, detail="Subscription not found")
    return subscription


@router.post("/subscription")
async def save_subscription(
    body: WhatsappSubscriptionRequest,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    return await SubscriptionService(session).save_whatsapp(
        body.phone_number, body.to_state()
    )
