"""Database session and repository utilities."""

from finder.db.session import get_db_session, get_engine, get_sessionmaker, session_context
from finder.db.repositories import (
    fetch_listings,
    fetch_listing_by_post_id,
    record_listing_view,
    fetch_telegram_subscription,
    upsert_telegram_subscription,
    set_telegram_subscription_active,
    fetch_whatsapp_subscription,
    upsert_whatsapp_subscription,
)

__all__ = [
    "get_db_session",
    "get_engine",
    "get_sessionmaker",
    "session_context",
    "fetch_listings",
    "fetch_listing_by_post_id",
    "record_listing_view",
    "fetch_telegram_subscription",
    "upsert_telegram_subscription",
    "set_telegram_subscription_active",
    "fetch_whatsapp_subscription",
    "upsert_whatsapp_subscription",
]
