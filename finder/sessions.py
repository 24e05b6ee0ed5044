"""Server-side login sessions for users and the admin dashboard.

A session is an opaque random token mapped to a subject string
(``"admin"`` or ``"user:<id>"``) with an expiry. Tokens live in Redis with
a TTL, or in process memory when ``TASKIQ_TESTING`` is set.
"""

from __future__ import annotations

import secrets
from time import monotonic

from finder.config import get_settings
from finder.redis_client import redis_client

ADMIN_KIND = "admin"
USER_KIND = "user"
ADMIN_SUBJECT = "admin"

_MEMORY_SESSIONS: dict[str, tuple[str, float]] = {}


def _session_key(kind: str, token: str) -> str:
    return f"session:{kind}:{token}"


def user_subject(user_id: int) -> str:
    return f"user:{user_id}"


def parse_user_subject(subject: str | None) -> int | None:
    if not subject or not subject.startswith("user:"):
        return None
    try:
        return int(subject.split(":", 1)[1])
    except ValueError:
        return None


async def create_session(kind: str, subject: str, ttl_seconds: int) -> str:
    """Issue a new token for ``subject`` that expires after ``ttl_seconds``."""

    token = secrets.token_urlsafe(32)
    key = _session_key(kind, token)

    if get_settings().taskiq_testing:
        _MEMORY_SESSIONS[key] = (subject, monotonic() + ttl_seconds)
        return token

    async with redis_client() as client:
        await client.set(key, subject, ex=ttl_seconds)
    return token


async def resolve_session(kind: str, token: str | None) -> str | None:
    """Return the subject behind ``token``, or ``None`` if unknown or expired."""

    if not token:
        return None
    key = _session_key(kind, token)

    if get_settings().taskiq_testing:
        entry = _MEMORY_SESSIONS.get(key)
        if entry is None:
            return None
        subject, expiry = entry
        if expiry <= monotonic():
            _MEMORY_SESSIONS.pop(key, None)
            return None
        return subject

    async with redis_client() as client:
        value = await client.get(key)
    return str(value) if value else None


async def revoke_session(kind: str, token: str | None) -> None:
    if not token:
        return
    key = _session_key(kind, token)

    if get_settings().taskiq_testing:
        _MEMORY_SESSIONS.pop(key, None)
        return

    async with redis_client() as client:
        await client.delete(key)


def clear_memory_sessions() -> None:
    _MEMORY_SESSIONS.clear()
