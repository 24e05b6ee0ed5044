"""Business logic for account preferences and saved filters."""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from finder.db.repositories import (
    create_user_filter,
    delete_user_filter,
    fetch_user_filters,
    update_user_filter,
    update_user_subscription,
    update_user_telegram_chat,
)
from finder.filters.state import FilterState
from finder.models.user import User, UserFilter
from finder.services.auth_service import serialize_user
from finder.services.subscription_service import serialize_filter_row


def serialize_user_filter(row: UserFilter) -> dict[str, object]:
    return {
        "id": row.id,
        "userId": row.user_id,
        **serialize_filter_row(row),
        "createdAt": row.created_at.isoformat() if row.created_at else None,
    }


class UserService:
    """Service layer for routes scoped to the logged-in account."""

    def __init__(self, session: AsyncSession, user: User) -> None:
        self._session = session
        self._user = user

    async def set_subscribed(self, is_subscribed: bool) -> dict[str, object] | None:
        user = await update_user_subscription(self._session, self._user.id, is_subscribed)
        return serialize_user(user) if user else None

    async def link_telegram(self, chat_id: str) -> dict[str, object] | None:
        user = await update_user_telegram_chat(self._session, self._user.id, chat_id)
        return serialize_user(user) if user else None

    async def list_filters(self) -> list[dict[str, object]]:
        rows = await fetch_user_filters(self._session, self._user.id)
        return [serialize_user_filter(row) for row in rows]

    async def create_filter(self, state: FilterState) -> dict[str, object]:
        row = await create_user_filter(self._session, self._user.id, state)
        return serialize_user_filter(row)

    async def update_filter(
        self, filter_id: int, changes: dict[str, Any]
    ) -> dict[str, object] | None:
        """Partial update; ``None`` when the filter is missing or not owned."""

        row = await update_user_filter(self._session, self._user.id, filter_id, changes)
        return serialize_user_filter(row) if row else None

    async def delete_filter(self, filter_id: int) -> bool:
        return await delete_user_filter(self._session, self._user.id, filter_id)
