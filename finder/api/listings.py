"""Listing search and lookup routes."""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from finder.config.neighborhoods import CITIES_AND_NEIGHBORHOODS
from finder.db.session import get_db_session
from finder.filters.query_string import deserialize
from finder.services.listing_service import ListingService

router = APIRouter(prefix="/api", tags=["listings"])


@router.get("/listings")
async def search_listings(
    request: Request,
    session: AsyncSession = Depends(get_db_session),
) -> list[dict[str, object]]:
    """Recent for-rent listings matching the query-string filter."""

    state = deserialize(request.query_params.multi_items())
    return await ListingService(session).search_listings(state)


@router.get("/listings/{post_id}")
async def get_listing(
    post_id: str,
    ci: str | None = None,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    listing = await ListingService(session).get_listing(post_id, viewer_chat_id=ci)
    if listing is None:
        raise HTTPException(status_code=404, detail="Listing not found")
    return listing


@router.get("/neighborhoods")
async def list_neighborhoods() -> dict[str, list[str]]:
    return {city: list(names) for city, names in CITIES_AND_NEIGHBORHOODS.items()}
