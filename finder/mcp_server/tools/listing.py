"""MCP tools for chatbot listing lookups."""

from typing import cast

from mcp.server.fastmcp import FastMCP

from finder.api.schemas import FilterPayload
from finder.cache import build_search_cache_key, cache_get_json, cache_set_json
from finder.config import get_settings
from finder.config.neighborhoods import CITIES_AND_NEIGHBORHOODS
from finder.db.repositories import fetch_listing_by_post_id
from finder.db.session import session_context
from finder.filters.query_string import to_payload
from finder.services.listing_service import ListingService, standardize_listing

settings = get_settings()
EMPTY_RESULTS_MESSAGE = "לא נמצאו מודעות מתאימות בשבועיים האחרונים."


def register_listing_tools(mcp: FastMCP) -> None:
    """Register listing-related tools on a FastMCP server."""

    @mcp.tool(name="recent_listings")
    async def recent_listings(
        min_price: float | None = None,
        max_price: float | None = None,
        min_size: float | None = None,
        max_size: float | None = None,
        min_rooms: float | None = None,
        max_rooms: float | None = None,
        neighborhoods: list[str] | None = None,
        balcony: list[str] | None = None,
        parking: list[str] | None = None,
        furnished: list[str] | None = None,
        agent: list[str] | None = None,
        include_zero_price: bool = True,
        include_zero_size: bool = True,
        include_zero_rooms: bool = True,
    ) -> dict[str, object]:
        """Newest listings matching the filter, at most a handful."""

        state = FilterPayload(
            min_price=min_price,
            max_price=max_price,
            min_size=min_size,
            max_size=max_size,
            min_rooms=min_rooms,
            max_rooms=max_rooms,
            include_zero_price=include_zero_price,
            include_zero_size=include_zero_size,
            include_zero_rooms=include_zero_rooms,
            neighborhoods=list(neighborhoods or []),
            balcony=list(balcony or []),
            parking=list(parking or []),
            furnished=list(furnished or []),
            agent=list(agent or []),
        ).to_state()
        limit = settings.chatbot_listing_limit
        cache_key = build_search_cache_key(state, limit)

        cached = await cache_get_json(cache_key)
        if cached:
            result = cast(dict[str, object], cached)
            result["cache_hit"] = True
            return result

        async with session_context() as session:
            rows = await ListingService(session).search(state, limit=limit)

        items = [standardize_listing(row, settings.app_url) for row in rows]
        result: dict[str, object] = {
            "query": to_payload(state),
            "count": len(items),
            "items": items,
            "cache_hit": False,
        }
        if not items:
            result["message"] = EMPTY_RESULTS_MESSAGE

        await cache_set_json(cache_key, result, settings.listing_cache_ttl_seconds)
        return result

    @mcp.tool(name="get_listing")
    async def get_listing(post_id: str) -> dict[str, object]:
        """One listing by post id, regardless of age."""

        async with session_context() as session:
            row = await fetch_listing_by_post_id(session, post_id)

        if row is None:
            return {"post_id": post_id, "status": "not_found"}
        return {"status": "ok", "listing": standardize_listing(row, settings.app_url)}

    @mcp.tool(name="list_neighborhoods")
    async def list_neighborhoods() -> dict[str, object]:
        """Known cities and their neighborhood names."""

        return {
            "cities": {
                city: list(names) for city, names in CITIES_AND_NEIGHBORHOODS.items()
            }
        }
