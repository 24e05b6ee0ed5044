"""Tests for password hashing and server-side sessions."""

import threading
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import IntegrityError

import finder.services.auth_service as auth_module

from finder.config import get_settings
from finder.services.auth_service import AuthService, hash_password, verify_password
from finder.sessions import (
    ADMIN_KIND,
    ADMIN_SUBJECT,
    USER_KIND,
    create_session,
    parse_user_subject,
    resolve_session,
    revoke_session,
    user_subject,
)


def test_hash_password_is_salted_and_verifiable() -> None:
    first = hash_password("hunter2")
    second = hash_password("hunter2")

    assert first != second
    assert verify_password("hunter2", first) is True
    assert verify_password("hunter3", first) is False


@pytest.mark.parametrize("stored", ["", "nohash", "zz.zz", "abcd."])
def test_verify_password_rejects_malformed_hashes(stored: str) -> None:
    assert verify_password("x", stored) is False


def test_user_subject_round_trip() -> None:
    assert parse_user_subject(user_subject(17)) == 17
    assert parse_user_subject("admin") is None
    assert parse_user_subject("user:abc") is None
    assert parse_user_subject(None) is None


@pytest.mark.anyio
async def test_sessions_resolve_and_revoke() -> None:
    token = await create_session(USER_KIND, user_subject(3), 60)

    assert await resolve_session(USER_KIND, token) == "user:3"
    assert await resolve_session(ADMIN_KIND, token) is None

    await revoke_session(USER_KIND, token)
    assert await resolve_session(USER_KIND, token) is None


@pytest.mark.anyio
async def test_expired_session_is_rejected() -> None:
    token = await create_session(USER_KIND, user_subject(3), 0)

    assert await resolve_session(USER_KIND, token) is None


@pytest.mark.anyio
async def test_admin_login_requires_configured_password(
    monkeypatch: pytest.MonkeyPatch, clear_settings_cache: None
) -> None:
    _ = clear_settings_cache
    monkeypatch.delenv("ADMIN_PASSWORD", raising=False)
    assert await AuthService().admin_login("anything") is None

    get_settings.cache_clear()
    monkeypatch.setenv("ADMIN_PASSWORD", "pw")
    token = await AuthService().admin_login("pw")

    assert token is not None
    assert await resolve_session(ADMIN_KIND, token) == ADMIN_SUBJECT


@pytest.mark.anyio
async def test_password_hashing_runs_outside_the_event_loop_thread(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    loop_thread = threading.get_ident()
    hashing_threads: list[int] = []
    verifying_threads: list[int] = []

    def recording_hash(password: str) -> str:
        hashing_threads.append(threading.get_ident())
        return hash_password(password)

    def recording_verify(password: str, stored: str) -> bool:
        verifying_threads.append(threading.get_ident())
        return verify_password(password, stored)

    stored_users: dict[str, SimpleNamespace] = {}

    async def fake_fetch(session: object, username: str) -> SimpleNamespace | None:
        _ = session
        return stored_users.get(username)

    async def fake_create(
        session: object, username: str, password_hash: str
    ) -> SimpleNamespace:
        _ = session
        user = SimpleNamespace(id=1, username=username, password=password_hash)
        stored_users[username] = user
        return user

    monkeypatch.setattr(auth_module, "hash_password", recording_hash)
    monkeypatch.setattr(auth_module, "verify_password", recording_verify)
    monkeypatch.setattr(auth_module, "fetch_user_by_username", fake_fetch)
    monkeypatch.setattr(auth_module, "create_user", fake_create)
    service = AuthService(AsyncMock())

    assert await service.register("dana", "hunter2") is not None
    assert await service.authenticate("dana", "hunter2") is not None
    assert await service.authenticate("dana", "wrong") is None

    assert hashing_threads and loop_thread not in hashing_threads
    assert len(verifying_threads) == 2
    assert loop_thread not in verifying_threads


@pytest.mark.anyio
async def test_register_returns_none_when_username_insert_conflicts(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    async def no_existing_user(session: object, username: str) -> None:
        _ = session, username
        return None

    async def conflicting_create(
        session: object, username: str, password_hash: str
    ) -> None:
        _ = session, username, password_hash
        raise IntegrityError("INSERT INTO users", {}, Exception("duplicate key"))

    monkeypatch.setattr(auth_module, "fetch_user_by_username", no_existing_user)
    monkeypatch.setattr(auth_module, "create_user", conflicting_create)
    session = AsyncMock()

    result = await AuthService(session).register("dana", "hunter2")

    assert result is None
    session.rollback.assert_awaited_once()
