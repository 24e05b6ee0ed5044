"""Tests for repository statements against a mocked async session."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from finder.db.repositories import (
    fetch_listing_by_post_id,
    fetch_listings,
    filter_columns,
    filter_state_from_row,
    set_telegram_subscription_active,
    update_user_filter,
    upsert_telegram_subscription,
    upsert_whatsapp_subscription,
)
from finder.filters.state import MULTI_OPTIONS, FilterState


def _mock_session(result: MagicMock | None = None) -> AsyncMock:
    if result is None:
        result = MagicMock()
        result.scalars.return_value.all.return_value = []
    session = AsyncMock()
    session.execute.return_value = result
    session.add = MagicMock()
    return session


def _pg(stmt: object) -> str:
    return str(stmt.compile(dialect=postgresql.dialect()))  # type: ignore[attr-defined]


@pytest.mark.anyio
async def test_fetch_listings_uses_recency_window_and_limit() -> None:
    session = _mock_session()

    await fetch_listings(session, FilterState(neighborhoods=["בבלי"]))

    stmt = session.execute.call_args.args[0]
    criteria = [str(item) for item in stmt._where_criteria]
    assert any("processed_posts.created_at >=" in item for item in criteria)
    assert any("processed_posts.neighborhood IN" in item for item in criteria)
    assert "LIMIT" in _pg(stmt)


@pytest.mark.anyio
async def test_fetch_listing_by_post_id_is_exact_lookup_without_recency() -> None:
    session = _mock_session()

    await fetch_listing_by_post_id(session, "fb-123")

    stmt = session.execute.call_args.args[0]
    criteria = [str(item) for item in stmt._where_criteria]
    assert criteria == ["processed_posts.post_id = :post_id_1"]


@pytest.mark.anyio
async def test_upsert_telegram_subscription_is_single_on_conflict_statement() -> None:
    session = _mock_session()
    state = FilterState(neighborhoods=["בבלי"], balcony=["yes"])

    await upsert_telegram_subscription(session, "42", "user", state)

    assert session.execute.await_count == 1
    call = session.execute.call_args
    compiled = _pg(call.args[0])
    assert "INSERT INTO telegram_subscriptions" in compiled
    assert (
        "ON CONFLICT ON CONSTRAINT uq_telegram_subscriptions_chat_target DO UPDATE"
        in compiled
    )
    assert "RETURNING" in compiled
    assert "updated_at = now()" in compiled
    assert call.kwargs["execution_options"] == {"populate_existing": True}
    session.commit.assert_awaited_once()


@pytest.mark.anyio
async def test_upsert_whatsapp_subscription_conflicts_on_phone_number() -> None:
    session = _mock_session()

    await upsert_whatsapp_subscription(session, "+972500000000", FilterState())

    compiled = _pg(session.execute.call_args.args[0])
    assert "ON CONFLICT (phone_number) DO UPDATE" in compiled


@pytest.mark.anyio
async def test_set_telegram_subscription_active_returns_affected_rows() -> None:
    result = MagicMock()
    result.scalars.return_value.all.return_value = [1, 2]
    session = _mock_session(result)

    affected = await set_telegram_subscription_active(session, "42", False)

    assert affected == 2
    compiled = _pg(session.execute.call_args.args[0])
    assert "UPDATE telegram_subscriptions SET active=" in compiled


def test_filter_columns_keep_native_lists() -> None:
    values = filter_columns(FilterState(neighborhoods=["בבלי", "בבלי"], agent=[]))

    assert values["neighborhoods"] == ["בבלי"]
    assert values["agent"] == list(MULTI_OPTIONS)
    assert values["min_price"] == 0
    assert values["include_zero_rooms"] is True


def _filter_row(**overrides: object) -> SimpleNamespace:
    values = filter_columns(FilterState())
    values.update(overrides)
    return SimpleNamespace(**values)


def test_filter_state_from_row_defaults_null_columns() -> None:
    row = _filter_row(min_price=None, max_size=None, balcony=None, neighborhoods=None)

    state = filter_state_from_row(row)  # type: ignore[arg-type]

    assert state.bounds("price") == (0, 10000)
    assert state.bounds("size") == (0, 500)
    assert state.balcony == list(MULTI_OPTIONS)
    assert state.neighborhoods == []


@pytest.mark.anyio
async def test_update_user_filter_merges_partial_changes() -> None:
    row = _filter_row(id=5, user_id=1, neighborhoods=["בבלי"], max_price=4000.0)
    result = MagicMock()
    result.scalars.return_value.first.return_value = row
    session = _mock_session(result)

    updated = await update_user_filter(
        session, 1, 5, {"max_price": 6000, "parking": ["yes"], "unknown": 1}
    )

    assert updated is row
    assert row.max_price == 6000
    assert row.parking == ["yes"]
    assert row.neighborhoods == ["בבלי"]
    assert not hasattr(row, "unknown")
    session.commit.assert_awaited_once()


@pytest.mark.anyio
async def test_update_user_filter_returns_none_for_foreign_filter() -> None:
    result = MagicMock()
    result.scalars.return_value.first.return_value = None
    session = _mock_session(result)

    assert await update_user_filter(session, 1, 99, {"max_price": 1}) is None

    stmt = session.execute.call_args.args[0]
    criteria = [str(item) for item in stmt._where_criteria]
    assert "user_filters.user_id = :user_id_1" in criteria
    session.commit.assert_not_awaited()
