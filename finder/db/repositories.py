"""Repository helpers for listing, subscription, account, and stats queries."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing import Any, cast

from sqlalchemy import Date, cast as sa_cast, delete, distinct, func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from finder.config import get_settings
from finder.filters.query import build_listings_query
from finder.filters.state import (
    CATEGORICAL_FIELDS,
    RANGE_FIELDS,
    FilterState,
    normalize,
)
from finder.models.activity import ListingView, WhatsappMessageLog
from finder.models.filter_columns import FilterColumnsMixin
from finder.models.listing import Listing
from finder.models.subscription import TelegramSubscription, WhatsappSubscription
from finder.models.user import User, UserFilter

_RANGE_COLUMN_NAMES: dict[str, tuple[str, str]] = {
    name: (f"min_{name}", f"max_{name}") for name in RANGE_FIELDS
}


@dataclass(slots=True)
class ListingViewCount:
    date_created: date
    telegram_chat_id: str
    entry_count: int


@dataclass(slots=True)
class DailyCount:
    day: date
    count: int


@dataclass(slots=True)
class DailyUserStat:
    date_created: date
    daily_active_users: int
    daily_views_per_user: float


@dataclass(slots=True)
class SourcePlatformCount:
    date_in: date
    source_platform: str
    count: int


def filter_columns(state: FilterState) -> dict[str, Any]:
    """Column values persisted for a filter state (arrays stay native lists)."""

    state = normalize(state)
    values: dict[str, Any] = {}
    for name, (min_column, max_column) in _RANGE_COLUMN_NAMES.items():
        low, high = state.bounds(name)
        values[min_column] = low
        values[max_column] = high
        values[f"include_zero_{name}"] = state.include_zero(name)
    values["neighborhoods"] = list(state.neighborhoods)
    for field_name in CATEGORICAL_FIELDS:
        values[field_name] = list(state.selected(field_name))
    return values


def filter_state_from_row(row: FilterColumnsMixin) -> FilterState:
    """Rebuild a filter state from a stored row, defaulting NULL columns."""

    defaults = FilterState()
    values: dict[str, Any] = {}
    for name, (min_column, max_column) in _RANGE_COLUMN_NAMES.items():
        default_low, default_high = defaults.bounds(name)
        low = getattr(row, min_column)
        high = getattr(row, max_column)
        values[min_column] = default_low if low is None else low
        values[max_column] = default_high if high is None else high
        values[f"include_zero_{name}"] = getattr(row, f"include_zero_{name}")
    values["neighborhoods"] = list(row.neighborhoods or [])
    for field_name in CATEGORICAL_FIELDS:
        values[field_name] = list(getattr(row, field_name) or [])
    return normalize(FilterState(**values))


# --- Listings ---


async def fetch_listings(
    session: AsyncSession,
    state: FilterState,
    *,
    now: datetime | None = None,
    limit: int | None = None,
) -> list[Listing]:
    """Fetch recent for-rent listings matching ``state``."""

    settings = get_settings()
    stmt = build_listings_query(
        state,
        now=now,
        recency_days=settings.listing_recency_days,
        limit=limit or settings.listing_result_limit,
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def fetch_listing_by_post_id(
    session: AsyncSession, post_id: str
) -> Listing | None:
    """Exact lookup by external post id, regardless of age or rent status."""

    stmt = select(Listing).where(Listing.post_id == post_id)
    result = await session.execute(stmt)
    return result.scalars().first()


async def record_listing_view(
    session: AsyncSession, post_id: str, telegram_chat_id: str
) -> None:
    session.add(ListingView(post_id=post_id, telegram_chat_id=telegram_chat_id))
    await session.commit()


# --- Messaging subscriptions ---


async def fetch_telegram_subscription(
    session: AsyncSession, chat_id: str, target_type: str = "user"
) -> TelegramSubscription | None:
    stmt = (
        select(TelegramSubscription)
        .where(TelegramSubscription.chat_id == chat_id)
        .where(TelegramSubscription.target_type == target_type)
    )
    result = await session.execute(stmt)
    return result.scalars().first()


async def upsert_telegram_subscription(
    session: AsyncSession,
    chat_id: str,
    target_type: str,
    state: FilterState,
) -> TelegramSubscription:
    """Insert or overwrite every filter field for (chat_id, target_type)."""

    values = filter_columns(state)
    stmt = pg_insert(TelegramSubscription).values(
        chat_id=chat_id, target_type=target_type, active=True, **values
    )
    stmt = stmt.on_conflict_do_update(
        constraint="uq_telegram_subscriptions_chat_target",
        set_={**values, "active": True, "updated_at": func.now()},
    ).returning(TelegramSubscription)

    result = await session.execute(
        stmt, execution_options={"populate_existing": True}
    )
    subscription = result.scalars().one()
    await session.commit()
    return subscription


async def set_telegram_subscription_active(
    session: AsyncSession, chat_id: str, active: bool
) -> int:
    """Pause or resume every subscription of a chat; returns affected rows."""

    stmt = (
        update(TelegramSubscription)
        .where(TelegramSubscription.chat_id == chat_id)
        .values(active=active, updated_at=func.now())
        .returning(TelegramSubscription.id)
    )
    result = await session.execute(stmt)
    await session.commit()
    return len(result.scalars().all())


async def fetch_whatsapp_subscription(
    session: AsyncSession, phone_number: str
) -> WhatsappSubscription | None:
    stmt = select(WhatsappSubscription).where(
        WhatsappSubscription.phone_number == phone_number
    )
    result = await session.execute(stmt)
    return result.scalars().first()


async def upsert_whatsapp_subscription(
    session: AsyncSession, phone_number: str, state: FilterState
) -> WhatsappSubscription:
    """Insert or overwrite every filter field for ``phone_number``."""

    values = filter_columns(state)
    stmt = pg_insert(WhatsappSubscription).values(
        phone_number=phone_number, active=True, **values
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[WhatsappSubscription.phone_number],
        set_={**values, "updated_at": func.now()},
    ).returning(WhatsappSubscription)

    result = await session.execute(
        stmt, execution_options={"populate_existing": True}
    )
    subscription = result.scalars().one()
    await session.commit()
    return subscription


# --- Accounts ---


async def fetch_user(session: AsyncSession, user_id: int) -> User | None:
    return await session.get(User, user_id)


async def fetch_user_by_username(
    session: AsyncSession, username: str
) -> User | None:
    stmt = select(User).where(User.username == username)
    result = await session.execute(stmt)
    return result.scalars().first()


async def create_user(session: AsyncSession, username: str, password_hash: str) -> User:
    user = User(
        username=username,
        password=password_hash,
        is_subscribed=False,
        telegram_chat_id=None,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


async def update_user_subscription(
    session: AsyncSession, user_id: int, is_subscribed: bool
) -> User | None:
    stmt = (
        update(User)
        .where(User.id == user_id)
        .values(is_subscribed=is_subscribed)
        .returning(User)
    )
    result = await session.execute(
        stmt, execution_options={"populate_existing": True}
    )
    user = result.scalars().first()
    await session.commit()
    return user


async def update_user_telegram_chat(
    session: AsyncSession, user_id: int, chat_id: str
) -> User | None:
    stmt = (
        update(User)
        .where(User.id == user_id)
        .values(telegram_chat_id=chat_id)
        .returning(User)
    )
    result = await session.execute(
        stmt, execution_options={"populate_existing": True}
    )
    user = result.scalars().first()
    await session.commit()
    return user


async def fetch_user_filters(session: AsyncSession, user_id: int) -> list[UserFilter]:
    stmt = (
        select(UserFilter)
        .where(UserFilter.user_id == user_id)
        .order_by(UserFilter.created_at.desc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def fetch_user_filter(
    session: AsyncSession, user_id: int, filter_id: int
) -> UserFilter | None:
    """Fetch one filter, scoped to its owner."""

    stmt = (
        select(UserFilter)
        .where(UserFilter.id == filter_id)
        .where(UserFilter.user_id == user_id)
    )
    result = await session.execute(stmt)
    return result.scalars().first()


async def create_user_filter(
    session: AsyncSession, user_id: int, state: FilterState
) -> UserFilter:
    user_filter = UserFilter(user_id=user_id, **filter_columns(state))
    session.add(user_filter)
    await session.commit()
    await session.refresh(user_filter)
    return user_filter


async def update_user_filter(
    session: AsyncSession,
    user_id: int,
    filter_id: int,
    changes: dict[str, Any],
) -> UserFilter | None:
    """Apply a partial update to an owned filter.

    ``changes`` maps filter column names to new values; the merged result
    is normalized before it is written back.
    """

    user_filter = await fetch_user_filter(session, user_id, filter_id)
    if user_filter is None:
        return None

    merged = filter_columns(filter_state_from_row(user_filter))
    merged.update({key: value for key, value in changes.items() if key in merged})
    for key, value in filter_columns(FilterState(**merged)).items():
        setattr(user_filter, key, value)

    await session.commit()
    await session.refresh(user_filter)
    return user_filter


async def delete_user_filter(
    session: AsyncSession, user_id: int, filter_id: int
) -> bool:
    stmt = (
        delete(UserFilter)
        .where(UserFilter.id == filter_id)
        .where(UserFilter.user_id == user_id)
        .returning(UserFilter.id)
    )
    result = await session.execute(stmt)
    deleted = result.scalars().all()
    await session.commit()
    return bool(deleted)


# --- Admin statistics ---


def _since(lookback_days: int) -> datetime:
    return datetime.now(UTC) - timedelta(days=lookback_days)


async def fetch_listing_view_counts(
    session: AsyncSession, lookback_days: int
) -> list[ListingViewCount]:
    day = sa_cast(ListingView.created_at, Date)
    stmt = (
        select(day, ListingView.telegram_chat_id, func.count(ListingView.id))
        .where(ListingView.created_at >= _since(lookback_days))
        .group_by(day, ListingView.telegram_chat_id)
        .order_by(day.desc())
    )
    rows = (await session.execute(stmt)).all()
    return [
        ListingViewCount(
            date_created=cast(date, row[0]),
            telegram_chat_id=str(row[1]),
            entry_count=int(row[2]),
        )
        for row in rows
    ]


async def fetch_daily_user_stats(
    session: AsyncSession, lookback_days: int
) -> list[DailyUserStat]:
    day = sa_cast(ListingView.created_at, Date)
    stmt = (
        select(
            day,
            func.count(distinct(ListingView.telegram_chat_id)),
            func.count(ListingView.id),
        )
        .where(ListingView.created_at >= _since(lookback_days))
        .group_by(day)
        .order_by(day.desc())
    )
    rows = (await session.execute(stmt)).all()
    stats: list[DailyUserStat] = []
    for row in rows:
        active = int(row[1] or 0)
        views = int(row[2] or 0)
        stats.append(
            DailyUserStat(
                date_created=cast(date, row[0]),
                daily_active_users=active,
                daily_views_per_user=round(views / active, 2) if active else 0.0,
            )
        )
    return stats


async def fetch_daily_subscription_counts(
    session: AsyncSession, lookback_days: int
) -> list[DailyCount]:
    day = sa_cast(TelegramSubscription.created_at, Date)
    stmt = (
        select(day, func.count(TelegramSubscription.id))
        .where(TelegramSubscription.created_at >= _since(lookback_days))
        .group_by(day)
        .order_by(day.desc())
    )
    rows = (await session.execute(stmt)).all()
    return [DailyCount(day=cast(date, row[0]), count=int(row[1])) for row in rows]


async def count_subscribed_users(session: AsyncSession) -> int:
    stmt = select(func.count(distinct(TelegramSubscription.chat_id))).where(
        TelegramSubscription.target_type == "user"
    )
    return (await session.execute(stmt)).scalar_one_or_none() or 0


async def fetch_daily_sent_messages(
    session: AsyncSession, lookback_days: int
) -> list[DailyCount]:
    day = sa_cast(WhatsappMessageLog.sent_at, Date)
    stmt = (
        select(day, func.count(WhatsappMessageLog.id))
        .where(WhatsappMessageLog.sent_at >= _since(lookback_days))
        .group_by(day)
        .order_by(day.desc())
    )
    rows = (await session.execute(stmt)).all()
    return [DailyCount(day=cast(date, row[0]), count=int(row[1])) for row in rows]


async def fetch_source_platform_counts(
    session: AsyncSession, lookback_days: int
) -> list[SourcePlatformCount]:
    day = sa_cast(Listing.created_at, Date)
    platform = func.coalesce(Listing.source_platform, "unknown")
    stmt = (
        select(day, platform, func.count(Listing.id))
        .where(Listing.created_at >= _since(lookback_days))
        .group_by(day, platform)
        .order_by(day.desc(), platform.asc())
    )
    rows = (await session.execute(stmt)).all()
    return [
        SourcePlatformCount(
            date_in=cast(date, row[0]),
            source_platform=str(row[1]),
            count=int(row[2]),
        )
        for row in rows
    ]
