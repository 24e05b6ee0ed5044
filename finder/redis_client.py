"""Short-lived Redis connections shared by cache, dedup, and session helpers."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from redis.asyncio import Redis

from finder.config import get_settings


@asynccontextmanager
async def redis_client(*, decode_responses: bool = True) -> AsyncIterator[Redis]:
    """Open a client for one operation and close it afterwards."""

    settings = get_settings()
    client = Redis.from_url(
        settings.redis_url, encoding="utf-8", decode_responses=decode_responses
    )
    try:
        yield client
    finally:
        await client.aclose()
