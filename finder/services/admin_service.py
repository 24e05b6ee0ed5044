"""Aggregated usage statistics for the admin dashboard."""

from collections.abc import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from finder.config import get_settings
from finder.db.repositories import (
    ListingViewCount,
    count_subscribed_users,
    fetch_daily_sent_messages,
    fetch_daily_subscription_counts,
    fetch_daily_user_stats,
    fetch_listing_view_counts,
    fetch_source_platform_counts,
)


def build_view_histogram(
    listing_views: Iterable[ListingViewCount],
) -> dict[str, dict[int, int]]:
    """Per day, how many chats viewed exactly N listings.

    Rows for the same day and chat are summed before bucketing.
    """

    totals: dict[str, dict[str, int]] = {}
    for row in listing_views:
        day = row.date_created.isoformat()[:10]
        per_chat = totals.setdefault(day, {})
        per_chat[row.telegram_chat_id] = (
            per_chat.get(row.telegram_chat_id, 0) + row.entry_count
        )

    histogram: dict[str, dict[int, int]] = {}
    for day, per_chat in totals.items():
        buckets = histogram.setdefault(day, {})
        for views in per_chat.values():
            buckets[views] = buckets.get(views, 0) + 1
    return histogram


class AdminService:
    """Service layer for admin statistics."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_stats(self, lookback_days: int | None = None) -> dict[str, object]:
        days = lookback_days or get_settings().admin_stats_lookback_days

        listing_views = await fetch_listing_view_counts(self._session, days)
        subscriptions = await fetch_daily_subscription_counts(self._session, days)
        daily_users = await fetch_daily_user_stats(self._session, days)
        sent_messages = await fetch_daily_sent_messages(self._session, days)
        platforms = await fetch_source_platform_counts(self._session, days)
        total_users = await count_subscribed_users(self._session)

        return {
            "listingViews": [
                {
                    "date_created": row.date_created.isoformat(),
                    "telegram_chat_id": row.telegram_chat_id,
                    "entry_count": row.entry_count,
                }
                for row in listing_views
            ],
            "subscriptions": [
                {"date_created": row.day.isoformat(), "subscriptions": row.count}
                for row in subscriptions
            ],
            "totalUsers": total_users,
            "dailyUserStats": [
                {
                    "date_created": row.date_created.isoformat(),
                    "daily_active_users": row.daily_active_users,
                    "daily_views_per_user": row.daily_views_per_user,
                }
                for row in daily_users
            ],
            "dailySentMessages": [
                {"date_sent": row.day.isoformat(), "messages_sent": row.count}
                for row in sent_messages
            ],
            "sourcePlatformStats": [
                {
                    "date_in": row.date_in.isoformat(),
                    "source_platform": row.source_platform,
                    "count": row.count,
                }
                for row in platforms
            ],
            "viewHistogram": {
                day: {str(views): users for views, users in buckets.items()}
                for day, buckets in build_view_histogram(listing_views).items()
            },
        }
