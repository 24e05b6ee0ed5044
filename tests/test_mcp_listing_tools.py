"""Contract tests for the chatbot listing tools."""

from __future__ import annotations

import json
from collections.abc import Mapping
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

import pytest

from finder.filters.state import FilterState
from finder.mcp_server.server import create_mcp_server
from finder.mcp_server.tools import listing as listing_tools
from finder.models.listing import Listing


def _normalize_payload(mapping: Mapping[object, object]) -> dict[str, object]:
    return {str(key): value for key, value in mapping.items()}


def _extract_payload(tool_result: object) -> dict[str, object]:
    if isinstance(tool_result, dict):
        return _normalize_payload(tool_result)

    if isinstance(tool_result, tuple):
        for part in tool_result:
            if isinstance(part, dict):
                return _normalize_payload(part)
            if isinstance(part, list) and part:
                maybe_text = getattr(part[0], "text", None)
                if isinstance(maybe_text, str):
                    loaded = json.loads(maybe_text)
                    if isinstance(loaded, dict):
                        return _normalize_payload(loaded)

    if isinstance(tool_result, list) and tool_result:
        maybe_text = getattr(tool_result[0], "text", None)
        if isinstance(maybe_text, str):
            loaded = json.loads(maybe_text)
            if isinstance(loaded, dict):
                return _normalize_payload(loaded)
    raise AssertionError("Failed to extract MCP payload dict")


def _listing(post_id: str) -> Listing:
    created = datetime(2026, 10, 18, 9, 30, tzinfo=UTC)
    return Listing(
        id=1,
        post_id=post_id,
        url=f"https://facebook.com/{post_id}",
        description="דירה",
        price=5200.0,
        street="פלורנטין",
        house_number="12",
        neighborhood="פלורנטיין",
        city="תל אביב",
        is_for_rent=True,
        created_at=created,
        updated_at=created,
    )


@asynccontextmanager
async def _fake_session_context():
    yield object()


@pytest.mark.anyio
async def test_recent_listings_cache_miss_limits_and_caches(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    searches: list[tuple[FilterState, int | None]] = []
    cache_set_calls: list[tuple[str, Any, int]] = []

    async def fake_cache_get(_key: str) -> None:
        return None

    async def fake_cache_set(key: str, value: Any, ttl_seconds: int) -> None:
        cache_set_calls.append((key, value, ttl_seconds))

    async def fake_search(
        self: Any, state: FilterState, *, limit: int | None = None
    ) -> list[Listing]:
        _ = self
        searches.append((state, limit))
        return [_listing("fb-1")]

    monkeypatch.setattr(listing_tools, "cache_get_json", fake_cache_get)
    monkeypatch.setattr(listing_tools, "cache_set_json", fake_cache_set)
    monkeypatch.setattr(listing_tools, "session_context", _fake_session_context)
    monkeypatch.setattr(listing_tools.ListingService, "search", fake_search)

    result = await create_mcp_server().call_tool(
        "recent_listings",
        {"max_price": 6000, "neighborhoods": ["פלורנטיין"], "balcony": ["yes"]},
    )
    payload = _extract_payload(result)

    assert payload["cache_hit"] is False
    assert payload["count"] == 1
    item = payload["items"][0]  # type: ignore[index]
    assert item["url"] == "http://localhost:5000/listing/fb-1"
    assert item["address"] == "פלורנטין 12"
    state, limit = searches[0]
    assert limit == 5
    assert state.max_price == 6000
    assert state.neighborhoods == ["פלורנטיין"]
    assert len(cache_set_calls) == 1
    assert cache_set_calls[0][0].startswith("search:listings:")


@pytest.mark.anyio
async def test_recent_listings_cache_hit_skips_session(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    cached_payload = {"query": {}, "count": 0, "items": [], "cache_hit": False}

    async def fake_cache_get(_key: str) -> dict[str, object]:
        return dict(cached_payload)

    @asynccontextmanager
    async def forbidden_session_context():
        raise AssertionError("session_context must not be called on cache hit")
        yield object()  # pragma: no cover

    monkeypatch.setattr(listing_tools, "cache_get_json", fake_cache_get)
    monkeypatch.setattr(listing_tools, "session_context", forbidden_session_context)

    payload = _extract_payload(await create_mcp_server().call_tool("recent_listings", {}))

    assert payload["cache_hit"] is True
    assert payload["count"] == 0


def test_cache_key_is_shared_by_equivalent_filters() -> None:
    full = FilterState(balcony=["yes", "no", "not mentioned"])
    empty = FilterState(balcony=[])

    assert listing_tools.build_search_cache_key(full, 5) == listing_tools.build_search_cache_key(
        empty, 5
    )
    assert listing_tools.build_search_cache_key(full, 5) != listing_tools.build_search_cache_key(
        full, 6
    )


@pytest.mark.anyio
async def test_get_listing_found_and_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    async def fake_fetch(session: object, post_id: str) -> Listing | None:
        _ = session
        return _listing(post_id) if post_id == "fb-7" else None

    monkeypatch.setattr(listing_tools, "session_context", _fake_session_context)
    monkeypatch.setattr(listing_tools, "fetch_listing_by_post_id", fake_fetch)
    server = create_mcp_server()

    found = _extract_payload(await server.call_tool("get_listing", {"post_id": "fb-7"}))
    missing = _extract_payload(await server.call_tool("get_listing", {"post_id": "nope"}))

    assert found["status"] == "ok"
    assert found["listing"]["post_id"] == "fb-7"  # type: ignore[index]
    assert missing == {"post_id": "nope", "status": "not_found"}
