"""Dedup locks that suppress repeat confirmations within a short window."""

from __future__ import annotations

from time import monotonic

from finder.config import get_settings
from finder.redis_client import redis_client

_MEMORY_LOCKS: dict[str, float] = {}


def build_dedup_key(*, task_name: str, fingerprint: str) -> str:
    return f"dedup:enqueue:{task_name}:{fingerprint}"


def _acquire_memory_lock(key: str, ttl_seconds: int) -> bool:
    now = monotonic()
    for lock_key, expiry in list(_MEMORY_LOCKS.items()):
        if expiry <= now:
            del _MEMORY_LOCKS[lock_key]

    if key in _MEMORY_LOCKS:
        return False
    _MEMORY_LOCKS[key] = now + ttl_seconds
    return True


async def acquire_dedup_lock(key: str, ttl_seconds: int) -> bool:
    """True when the caller owns ``key`` for ``ttl_seconds`` (Redis SET NX EX)."""

    if get_settings().taskiq_testing:
        return _acquire_memory_lock(key, ttl_seconds)

    async with redis_client() as client:
        return bool(await client.set(key, "1", nx=True, ex=ttl_seconds))


def clear_memory_locks() -> None:
    _MEMORY_LOCKS.clear()
