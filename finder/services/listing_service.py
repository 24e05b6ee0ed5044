"""Business logic for listing searches and lookups."""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from finder.db.repositories import (
    fetch_listing_by_post_id,
    fetch_listings,
    record_listing_view,
)
from finder.filters.state import FilterState
from finder.models.listing import Listing


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def serialize_listing(row: Listing) -> dict[str, object]:
    """Full listing shape returned by the HTTP API."""

    return {
        "id": row.id,
        "post_id": row.post_id,
        "url": row.url,
        "source_platform": row.source_platform,
        "description": row.description,
        "detailed_description": row.detailed_description,
        "price": row.price,
        "size": row.size,
        "num_rooms": row.num_rooms,
        "balcony": row.balcony,
        "parking": row.parking,
        "furnished": row.furnished,
        "agent": row.agent,
        "street": row.street,
        "house_number": row.house_number,
        "neighborhood": row.neighborhood,
        "city": row.city,
        "attachments": list(row.attachments or []),
        "is_for_rent": row.is_for_rent,
        "created_at": _isoformat(row.created_at),
        "updated_at": _isoformat(row.updated_at),
    }


def listing_public_url(app_url: str, post_id: str) -> str:
    return f"{app_url.rstrip('/')}/listing/{post_id}"


def standardize_listing(row: Listing, app_url: str) -> dict[str, object]:
    """Compact listing shape for chatbot replies, linking to the public page."""

    address = " ".join(part for part in (row.street, row.house_number) if part)
    return {
        "post_id": row.post_id,
        "price": row.price,
        "address": address or None,
        "neighborhood": row.neighborhood,
        "city": row.city,
        "num_rooms": row.num_rooms,
        "size": row.size,
        "agent": row.agent,
        "balcony": row.balcony,
        "parking": row.parking,
        "furnished": row.furnished,
        "description": row.description,
        "detailed_description": row.detailed_description,
        "source_platform": row.source_platform,
        "created_at": _isoformat(row.created_at),
        "url": listing_public_url(app_url, row.post_id),
    }


class ListingService:
    """Service layer for listing routes and chatbot tools."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def search(
        self, state: FilterState, *, limit: int | None = None
    ) -> list[Listing]:
        return await fetch_listings(self._session, state, limit=limit)

    async def search_listings(self, state: FilterState) -> list[dict[str, object]]:
        """Recent listings matching ``state`` in API shape."""

        return [serialize_listing(row) for row in await self.search(state)]

    async def get_listing(
        self, post_id: str, *, viewer_chat_id: str | None = None
    ) -> dict[str, object] | None:
        """Exact post lookup; records a view when a chat id is attributed."""

        row = await fetch_listing_by_post_id(self._session, post_id)
        if row is None:
            return None
        if viewer_chat_id:
            await record_listing_view(self._session, post_id, viewer_chat_id)
        return serialize_listing(row)
