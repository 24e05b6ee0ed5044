"""Redis cache for chatbot listing results."""

import hashlib
import json
from typing import Any

from finder.filters.query_string import serialize
from finder.filters.state import FilterState, normalize
from finder.redis_client import redis_client


def build_search_cache_key(state: FilterState, limit: int) -> str:
    """Key derived from the normalized filter, so equivalent filters share it."""

    payload = json.dumps(
        {"query": serialize(normalize(state)), "limit": limit}, sort_keys=True
    )
    digest = hashlib.md5(payload.encode()).hexdigest()[:16]
    return f"search:listings:{digest}"


async def cache_get_json(key: str) -> Any | None:
    async with redis_client() as client:
        value = await client.get(key)
    return json.loads(value) if value else None


async def cache_set_json(key: str, value: Any, ttl_seconds: int) -> None:
    async with redis_client() as client:
        await client.set(key, json.dumps(value, ensure_ascii=False), ex=ttl_seconds)
